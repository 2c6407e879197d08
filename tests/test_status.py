"""Transition tables for product moderation and order lifecycle."""

import pytest

from marketplace.domain.errors import InvalidStateError
from marketplace.domain.status import (
    TERMINAL_ORDER_STATUSES,
    OrderStatus,
    ProductStatus,
    allowed_transitions,
    can_moderate,
    parse_order_status,
)


class TestProductTransitions:
    def test_pending_can_be_approved_or_rejected(self):
        assert allowed_transitions(ProductStatus.PENDING) == {ProductStatus.APPROVED, ProductStatus.REJECTED}

    def test_approved_only_goes_back_to_pending(self):
        assert allowed_transitions(ProductStatus.APPROVED) == {ProductStatus.PENDING}

    def test_rejected_has_no_transitions(self):
        assert allowed_transitions(ProductStatus.REJECTED) == set()

    @pytest.mark.parametrize("current", [ProductStatus.APPROVED, ProductStatus.REJECTED])
    def test_moderation_requires_pending(self, current):
        assert not can_moderate(current, ProductStatus.APPROVED)
        assert not can_moderate(current, ProductStatus.REJECTED)

    def test_moderator_cannot_target_pending(self):
        assert not can_moderate(ProductStatus.PENDING, ProductStatus.PENDING)


class TestOrderTransitions:
    @pytest.mark.parametrize("current", [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED])
    def test_non_terminal_states_reach_every_status(self, current):
        assert allowed_transitions(current) == set(OrderStatus)

    @pytest.mark.parametrize("current", sorted(TERMINAL_ORDER_STATUSES, key=lambda s: s.value))
    def test_terminal_states_only_allow_themselves(self, current):
        assert allowed_transitions(current) == {current}

    def test_terminal_set(self):
        assert TERMINAL_ORDER_STATUSES == {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


class TestParseOrderStatus:
    def test_known_value(self):
        assert parse_order_status("Shipped") is OrderStatus.SHIPPED

    @pytest.mark.parametrize("value", ["shipped", "Lost", ""])
    def test_unknown_value_lists_valid_statuses(self, value):
        with pytest.raises(InvalidStateError, match="Valid statuses: Pending, Processing, Shipped, Delivered, Cancelled"):
            parse_order_status(value)


def test_unsupported_status_type():
    with pytest.raises(TypeError):
        allowed_transitions("Pending")
