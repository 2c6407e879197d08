#marketplace/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_actor
from marketplace.data.database import get_db
from marketplace.domain.access import Actor
from marketplace.domain.errors import NotFoundError
from marketplace.domain.schemas import CartItemIn, CartItemOut, CartItemUpdate, CartOut, CartTotalOut, MessageOut
from marketplace.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/", response_model=CartOut)
def get_cart(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).get_cart(actor.user_id)


@router.get("/total", response_model=CartTotalOut)
def get_cart_total(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return {"user_id": actor.user_id, "total": get_service(db).total(actor.user_id)}


@router.post("/items", response_model=CartItemOut)
def add_item(payload: CartItemIn, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).add_item(actor.user_id, payload.product_id, payload.quantity)


@router.put("/items/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(item_id, actor.user_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=MessageOut)
def remove_item(item_id: int, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    if not get_service(db).remove_item(item_id, actor.user_id):
        raise NotFoundError("Cart item not found.")
    return {"success": True, "message": "Item removed from cart"}


@router.delete("/", response_model=MessageOut)
def clear_cart(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    removed = get_service(db).clear(actor.user_id)
    return {"success": True, "message": f"Cart cleared ({removed} items removed)"}
