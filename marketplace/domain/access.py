# marketplace/domain/access.py
from dataclasses import dataclass
from enum import Enum

from marketplace.domain.errors import ForbiddenError


class Role(str, Enum):
    ADMIN = "Admin"
    SELLER = "Seller"
    CUSTOMER = "Customer"


@dataclass(frozen=True)
class Actor:
    """Wywolujacy: id + rola z warstwy uwierzytelniania."""

    user_id: int
    role: Role = Role.CUSTOMER

    @classmethod
    def of(cls, user_id: int, role: str | Role | None) -> "Actor":
        #nieznana/pusta rola = klient (najmniejsze uprawnienia)
        try:
            parsed = Role(role) if role else Role.CUSTOMER
        except ValueError:
            parsed = Role.CUSTOMER
        return cls(user_id=user_id, role=parsed)


def is_elevated(role: str | Role | None) -> bool:
    return role == Role.ADMIN


def is_owner(actor_id: int, resource) -> bool:
    owner_id = getattr(resource, "created_by_user_id", None)
    if owner_id is None:
        owner_id = getattr(resource, "user_id", None)
    return owner_id is not None and owner_id == actor_id


def require_elevated(actor: Actor, message: str = "Administrator role required.") -> None:
    if not is_elevated(actor.role):
        raise ForbiddenError(message)


def require_owner_or_elevated(actor: Actor, resource, message: str) -> None:
    if not (is_elevated(actor.role) or is_owner(actor.user_id, resource)):
        raise ForbiddenError(message)
