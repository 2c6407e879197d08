# marketplace/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_actor
from marketplace.data.database import get_db
from marketplace.domain.access import Actor
from marketplace.domain.schemas import OrderOut, OrderStatusUpdate, ShippingInfo
from marketplace.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: ShippingInfo,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie z koszyka użytkownika.
    Stan magazynu i koszyk zmieniane atomowo razem z zamówieniem.
    """
    return get_service(db).create_from_cart(actor.user_id, payload)


@router.get("/", response_model=List[OrderOut])
def my_orders(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).list_for_user(actor.user_id)


@router.get("/admin", response_model=List[OrderOut])
def all_orders(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).list_all(actor)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).get_order(order_id, actor.user_id, actor.role)


@router.put("/status", response_model=OrderOut)
def update_status(payload: OrderStatusUpdate, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).update_status(payload.order_id, payload.status, actor)
