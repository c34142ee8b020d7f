"""
Tests for adding and removing order items.
"""

import pytest

from rest_api.services.domain import OrderDraft, OrderLine
from shared.config.constants import OrderStatus, OrderType
from shared.utils.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    ValidationError,
)


@pytest.fixture
def takeaway_order(order_service, restaurant_a):
    """Takeaway order with one burger (total 1000)."""
    return order_service.create_order(
        restaurant_a.id,
        OrderDraft(type=OrderType.TAKEAWAY),
        [OrderLine(restaurant_a.burger.id, 1)],
    ).order


class TestAddItem:

    def test_add_item_updates_total(self, order_service, restaurant_a, takeaway_order):
        item = order_service.add_item(
            restaurant_a.id, takeaway_order.id, OrderLine(restaurant_a.fries.id, 2)
        )

        order = order_service.get_order(restaurant_a.id, takeaway_order.id)
        assert item.price_cents == 500
        assert len(order.items) == 2
        assert order.total_amount_cents == 2000

    def test_add_item_allowed_while_delivered(self, order_service, restaurant_a, takeaway_order):
        order_service.update_status(restaurant_a.id, takeaway_order.id, OrderStatus.DELIVERED)

        order_service.add_item(restaurant_a.id, takeaway_order.id, OrderLine(restaurant_a.fries.id, 1))

        assert order_service.get_order(restaurant_a.id, takeaway_order.id).total_amount_cents == 1500

    @pytest.mark.parametrize("terminal", [OrderStatus.PAID, OrderStatus.CANCELLED])
    def test_terminal_order_rejects_new_items(self, order_service, restaurant_a, takeaway_order, terminal):
        order_service.update_status(restaurant_a.id, takeaway_order.id, terminal)

        with pytest.raises(InvalidTransitionError):
            order_service.add_item(
                restaurant_a.id, takeaway_order.id, OrderLine(restaurant_a.fries.id, 1)
            )

        order = order_service.get_order(restaurant_a.id, takeaway_order.id)
        assert len(order.items) == 1
        assert order.total_amount_cents == 1000

    def test_out_of_stock_rejected(self, order_service, restaurant_a, takeaway_order):
        with pytest.raises(OutOfStockError):
            order_service.add_item(
                restaurant_a.id, takeaway_order.id, OrderLine(restaurant_a.sold_out.id, 1)
            )

    def test_unknown_product_rejected(self, order_service, restaurant_a, takeaway_order):
        with pytest.raises(ProductNotFoundError):
            order_service.add_item(restaurant_a.id, takeaway_order.id, OrderLine("nope", 1))

    def test_failed_product_check_releases_order_lock(
        self, db_session, order_service, restaurant_a, takeaway_order
    ):
        restaurant_id, order_id = restaurant_a.id, takeaway_order.id

        with pytest.raises(OutOfStockError):
            order_service.add_item(restaurant_id, order_id, OrderLine(restaurant_a.sold_out.id, 1))

        assert not db_session.in_transaction()
        order_service.add_item(restaurant_id, order_id, OrderLine(restaurant_a.fries.id, 1))
        assert order_service.get_order(restaurant_id, order_id).total_amount_cents == 1500

    def test_zero_quantity_rejected(self, order_service, restaurant_a, takeaway_order):
        with pytest.raises(ValidationError):
            order_service.add_item(
                restaurant_a.id, takeaway_order.id, OrderLine(restaurant_a.fries.id, 0)
            )

    def test_unknown_order(self, order_service, restaurant_a):
        with pytest.raises(NotFoundError):
            order_service.add_item(restaurant_a.id, "missing", OrderLine(restaurant_a.fries.id, 1))


class TestRemoveItem:

    def test_remove_item_updates_total(self, order_service, restaurant_a, takeaway_order):
        added = order_service.add_item(
            restaurant_a.id, takeaway_order.id, OrderLine(restaurant_a.fries.id, 2)
        )

        order = order_service.remove_item(restaurant_a.id, takeaway_order.id, added.id)

        assert order.total_amount_cents == 1000
        assert [i.product_id for i in order.items] == [restaurant_a.burger.id]

    def test_removing_last_item_leaves_zero_total(self, order_service, restaurant_a, takeaway_order):
        item_id = takeaway_order.items[0].id

        order = order_service.remove_item(restaurant_a.id, takeaway_order.id, item_id)

        assert order.items == []
        assert order.total_amount_cents == 0

    def test_item_of_another_order_not_found(self, order_service, restaurant_a, takeaway_order):
        other = order_service.create_order(
            restaurant_a.id,
            OrderDraft(type=OrderType.TAKEAWAY),
            [OrderLine(restaurant_a.fries.id, 1)],
        ).order

        with pytest.raises(NotFoundError):
            order_service.remove_item(restaurant_a.id, takeaway_order.id, other.items[0].id)

        assert order_service.get_order(restaurant_a.id, other.id).total_amount_cents == 500

    def test_terminal_order_rejects_removal(self, order_service, restaurant_a, takeaway_order):
        item_id = takeaway_order.items[0].id
        order_service.update_status(restaurant_a.id, takeaway_order.id, OrderStatus.PAID)

        with pytest.raises(InvalidTransitionError):
            order_service.remove_item(restaurant_a.id, takeaway_order.id, item_id)

        assert order_service.get_order(restaurant_a.id, takeaway_order.id).total_amount_cents == 1000
