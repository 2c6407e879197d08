import os

# ustawione zanim marketplace.utils.settings zostanie zaimportowane
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import marketplace.data.models  # noqa: F401
from marketplace.data.database import Base, build_engine, get_db
from marketplace.data.models.category import CategoryModel
from marketplace.data.models.product import ProductModel
from marketplace.domain.access import Actor, Role
from marketplace.domain.status import ProductStatus
from marketplace.utils.logging import configure_logging

configure_logging("WARNING")

ADMIN_ID = 1
SELLER_ID = 2
OTHER_SELLER_ID = 3
CUSTOMER_ID = 10
OTHER_CUSTOMER_ID = 11


@pytest.fixture
def engine(tmp_path):
    """Swieza baza sqlite (plik) na kazdy test."""
    eng = build_engine(f"sqlite:///{tmp_path / 'marketplace.db'}", echo=False)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def admin():
    return Actor(user_id=ADMIN_ID, role=Role.ADMIN)


@pytest.fixture
def seller():
    return Actor(user_id=SELLER_ID, role=Role.SELLER)


@pytest.fixture
def other_seller():
    return Actor(user_id=OTHER_SELLER_ID, role=Role.SELLER)


@pytest.fixture
def customer():
    return Actor(user_id=CUSTOMER_ID, role=Role.CUSTOMER)


@pytest.fixture
def category(db):
    cat = CategoryModel(name="General", description="Everything", is_active=True)
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def inactive_category(db):
    cat = CategoryModel(name="Archive", is_active=False)
    db.add(cat)
    db.commit()
    return cat


@pytest.fixture
def make_product(db, category):
    def _make(
        name="Widget",
        price="10.00",
        stock=5,
        status=ProductStatus.APPROVED,
        active=True,
        owner=SELLER_ID,
    ):
        product = ProductModel(
            name=name,
            price=Decimal(price),
            stock_quantity=stock,
            category_id=category.id,
            created_by_user_id=owner,
            status=status.value,
            is_active=active,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def stock_of(db):
    def _stock(product_id):
        db.expire_all()
        return db.get(ProductModel, product_id).stock_quantity

    return _stock


@pytest.fixture
def client(session_factory):
    from marketplace.main import create_app

    app = create_app(create_tables=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c
