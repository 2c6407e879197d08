# marketplace/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from marketplace.data.database import SessionLocal
from marketplace.data.models.category import CategoryModel
from marketplace.domain.access import Actor, Role
from marketplace.domain.schemas import ProductIn
from marketplace.repos.category_repo import CategoryRepo
from marketplace.services.product_service import ProductService
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

SEED_ADMIN = Actor(user_id=1, role=Role.ADMIN)

CATEGORIES = [
    ("Electronics", "Keyboards, mice, monitors"),
    ("Books", None),
]

PRODUCTS = [
    ("Keyboard", Decimal("199.99"), 25),
    ("Mouse", Decimal("49.50"), 100),
    ("Monitor", Decimal("899.00"), 5),
]


def seed(db: Session | None = None) -> None:
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(CategoryModel).first():
            return

        categories = CategoryRepo(db)
        created = [categories.create_category(CategoryModel(name=n, description=d)) for n, d in CATEGORIES]
        db.commit()

        #produkty przez serwis - admin, wiec od razu Approved
        service = ProductService(db)
        for name, price, stock in PRODUCTS:
            service.create_product(
                ProductIn(name=name, price=price, stock_quantity=stock, category_id=created[0].id),
                SEED_ADMIN,
            )
        logger.info(f"Seeded {len(created)} categories and {len(PRODUCTS)} products")
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    seed()
