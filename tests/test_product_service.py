from decimal import Decimal

import pytest

from marketplace.domain.errors import ForbiddenError, InvalidStateError, NotFoundError
from marketplace.domain.schemas import ProductIn
from marketplace.domain.status import ProductStatus
from marketplace.services.product_service import ProductService


@pytest.fixture
def service(db):
    return ProductService(db)


def _payload(category_id, **overrides):
    data = {
        "name": "Lamp",
        "description": "Desk lamp",
        "price": Decimal("25.00"),
        "stock_quantity": 8,
        "category_id": category_id,
    }
    data.update(overrides)
    return ProductIn(**data)


class TestCreate:
    def test_seller_product_waits_for_moderation(self, service, category, seller):
        product = service.create_product(_payload(category.id), seller)

        assert product["status"] == ProductStatus.PENDING.value
        assert product["created_by_user_id"] == seller.user_id
        assert product["approved_by_user_id"] is None
        assert product["approved_at"] is None
        assert product["is_active"] is True
        assert product["category_name"] == "General"

    def test_admin_product_is_auto_approved(self, service, category, admin):
        product = service.create_product(_payload(category.id), admin)

        assert product["status"] == ProductStatus.APPROVED.value
        assert product["approved_by_user_id"] == admin.user_id
        assert product["approved_at"] is not None

    def test_customer_cannot_create(self, service, category, customer):
        with pytest.raises(ForbiddenError):
            service.create_product(_payload(category.id), customer)

    def test_unknown_category(self, service, category, seller):
        with pytest.raises(InvalidStateError, match="category"):
            service.create_product(_payload(999), seller)

    def test_inactive_category(self, service, inactive_category, seller):
        with pytest.raises(InvalidStateError, match="category"):
            service.create_product(_payload(inactive_category.id), seller)


class TestUpdate:
    def test_seller_edit_of_approved_product_resubmits(self, service, category, seller, admin):
        created = service.create_product(_payload(category.id), seller)
        service.moderate(created["id"], True, admin)

        updated = service.update_product(created["id"], _payload(category.id, price=Decimal("30.00")), seller)

        assert updated["status"] == ProductStatus.PENDING.value
        assert updated["approved_by_user_id"] is None
        assert updated["approved_at"] is None
        assert updated["price"] == Decimal("30.00")

    def test_admin_edit_keeps_status(self, service, category, seller, admin):
        created = service.create_product(_payload(category.id), seller)
        service.moderate(created["id"], True, admin)

        updated = service.update_product(created["id"], _payload(category.id, name="Lamp XL"), admin)

        assert updated["status"] == ProductStatus.APPROVED.value
        assert updated["approved_by_user_id"] == admin.user_id
        assert updated["name"] == "Lamp XL"

    def test_rejected_product_stays_rejected_on_edit(self, service, category, seller, admin):
        created = service.create_product(_payload(category.id), seller)
        service.moderate(created["id"], False, admin)

        updated = service.update_product(created["id"], _payload(category.id), seller)

        assert updated["status"] == ProductStatus.REJECTED.value

    def test_other_seller_cannot_edit(self, service, category, seller, other_seller):
        created = service.create_product(_payload(category.id), seller)
        with pytest.raises(ForbiddenError):
            service.update_product(created["id"], _payload(category.id, name="Hijack"), other_seller)
        assert service.get_product(created["id"], seller)["name"] == "Lamp"

    def test_missing_product(self, service, category, seller):
        with pytest.raises(NotFoundError):
            service.update_product(404, _payload(category.id), seller)

    def test_inactive_category_rejected(self, service, category, inactive_category, seller):
        created = service.create_product(_payload(category.id), seller)
        with pytest.raises(InvalidStateError):
            service.update_product(created["id"], _payload(inactive_category.id), seller)
        assert service.get_product(created["id"], seller)["category_id"] == category.id

    def test_updated_at_is_set(self, service, category, seller):
        created = service.create_product(_payload(category.id), seller)
        assert created["updated_at"] is None
        updated = service.update_product(created["id"], _payload(category.id), seller)
        assert updated["updated_at"] is not None


class TestDelete:
    def test_soft_delete_keeps_row_and_status(self, service, category, admin):
        created = service.create_product(_payload(category.id), admin)

        deleted = service.delete_product(created["id"], admin)

        assert deleted["is_active"] is False
        assert deleted["status"] == ProductStatus.APPROVED.value
        assert service.get_product(created["id"], admin)["is_active"] is False

    def test_deleted_product_not_listed_as_approved(self, service, category, admin):
        created = service.create_product(_payload(category.id), admin)
        service.delete_product(created["id"], admin)
        assert service.list_approved() == []

    def test_other_seller_cannot_delete(self, service, category, seller, other_seller):
        created = service.create_product(_payload(category.id), seller)
        with pytest.raises(ForbiddenError):
            service.delete_product(created["id"], other_seller)

    def test_missing_product(self, service, category, admin):
        with pytest.raises(NotFoundError):
            service.delete_product(404, admin)


class TestModerate:
    def test_approve(self, service, category, seller, admin):
        created = service.create_product(_payload(category.id), seller)

        approved = service.moderate(created["id"], True, admin)

        assert approved["status"] == ProductStatus.APPROVED.value
        assert approved["approved_by_user_id"] == admin.user_id
        assert approved["approved_at"] is not None

    def test_reject(self, service, category, seller, admin):
        created = service.create_product(_payload(category.id), seller)
        rejected = service.moderate(created["id"], False, admin)
        assert rejected["status"] == ProductStatus.REJECTED.value

    @pytest.mark.parametrize("first", [True, False])
    def test_only_pending_can_be_moderated(self, service, category, seller, admin, first):
        created = service.create_product(_payload(category.id), seller)
        service.moderate(created["id"], first, admin)
        with pytest.raises(InvalidStateError, match="Only pending"):
            service.moderate(created["id"], True, admin)

    def test_requires_admin(self, service, category, seller):
        created = service.create_product(_payload(category.id), seller)
        with pytest.raises(ForbiddenError):
            service.moderate(created["id"], True, seller)

    def test_missing_product(self, service, category, admin):
        with pytest.raises(NotFoundError):
            service.moderate(404, True, admin)


class TestReads:
    def test_customer_sees_only_approved(self, service, category, seller, admin, customer):
        pending = service.create_product(_payload(category.id, name="Pending"), seller)
        approved = service.create_product(_payload(category.id, name="Approved"), admin)

        assert [p["id"] for p in service.list_products(customer)] == [approved["id"]]
        assert [p["id"] for p in service.list_products(None)] == [approved["id"]]
        assert {p["id"] for p in service.list_products(seller)} == {pending["id"], approved["id"]}

        with pytest.raises(NotFoundError):
            service.get_product(pending["id"], customer)
        assert service.get_product(approved["id"], None)["name"] == "Approved"

    def test_pending_queue_is_admin_only(self, service, category, seller, admin):
        created = service.create_product(_payload(category.id), seller)
        assert [p["id"] for p in service.list_pending(admin)] == [created["id"]]
        with pytest.raises(ForbiddenError):
            service.list_pending(seller)

    def test_seller_catalogue(self, service, category, seller, other_seller, admin, customer):
        mine = service.create_product(_payload(category.id), seller)
        service.create_product(_payload(category.id), other_seller)

        assert [p["id"] for p in service.list_by_seller(seller.user_id, seller)] == [mine["id"]]
        assert [p["id"] for p in service.list_by_seller(seller.user_id, admin)] == [mine["id"]]
        with pytest.raises(ForbiddenError):
            service.list_by_seller(seller.user_id, other_seller)
        with pytest.raises(ForbiddenError):
            service.list_by_seller(seller.user_id, customer)
