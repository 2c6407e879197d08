# marketplace/api/deps.py
from fastapi import Query

from marketplace.domain.access import Actor
from marketplace.utils.logging import add_context


def _bind(actor: Actor) -> Actor:
    add_context(user_id=actor.user_id, role=actor.role.value)
    return actor


#async - kontekst logow wiazany w zadaniu requestu, nie w kopii z threadpoola
async def get_actor(
    user_id: int = Query(..., gt=0),
    role: str | None = Query(None, description="Admin | Seller | Customer"),
) -> Actor:
    #tozsamosc dostarcza warstwa uwierzytelniania (tu: parametry zapytania)
    return _bind(Actor.of(user_id, role))


async def get_optional_actor(
    user_id: int | None = Query(None, gt=0),
    role: str | None = Query(None),
) -> Actor | None:
    if user_id is None:
        return None
    return _bind(Actor.of(user_id, role))
