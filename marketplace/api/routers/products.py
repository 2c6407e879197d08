#marketplace/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketplace.api.deps import get_actor, get_optional_actor
from marketplace.data.database import get_db
from marketplace.domain.access import Actor
from marketplace.domain.schemas import ModerationIn, ProductIn, ProductOut
from marketplace.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("/", response_model=List[ProductOut])
def list_products(actor: Actor | None = Depends(get_optional_actor), db: Session = Depends(get_db)):
    """Klient/anonim widzi tylko zatwierdzone, seller i admin wszystkie."""
    return get_service(db).list_products(actor)


@router.get("/approved", response_model=List[ProductOut])
def list_approved(db: Session = Depends(get_db)):
    return get_service(db).list_approved()


@router.get("/pending", response_model=List[ProductOut])
def list_pending(actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).list_pending(actor)


@router.get("/seller/{seller_id}", response_model=List[ProductOut])
def list_by_seller(seller_id: int, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).list_by_seller(seller_id, actor)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    actor: Actor | None = Depends(get_optional_actor),
    db: Session = Depends(get_db),
):
    return get_service(db).get_product(product_id, actor)


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).create_product(payload, actor)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductIn,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return get_service(db).update_product(product_id, payload, actor)


@router.delete("/{product_id}", response_model=ProductOut)
def delete_product(product_id: int, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).delete_product(product_id, actor)


@router.post("/moderate", response_model=ProductOut)
def moderate_product(payload: ModerationIn, actor: Actor = Depends(get_actor), db: Session = Depends(get_db)):
    return get_service(db).moderate(payload.product_id, payload.approved, actor)
