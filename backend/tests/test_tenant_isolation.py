"""
Tests for restaurant isolation: no operation may read or change rows of
another restaurant, and foreign rows look exactly like missing ones.
"""

import logging

import pytest

from rest_api.models import Order, Table
from rest_api.repositories import OrderRepository
from rest_api.services.domain import FinanceService, OrderDraft, OrderLine, TenantGuard
from shared.config.constants import OrderStatus, OrderType, TableStatus
from shared.utils.exceptions import NotFoundError, ProductNotFoundError, TenantMismatchError


@pytest.fixture
def order_of_b(order_service, restaurant_b):
    return order_service.create_order(
        restaurant_b.id,
        OrderDraft(table_id=restaurant_b.tables[0].id),
        [OrderLine(restaurant_b.burger.id, 1)],
    ).order


class TestTenantGuard:

    def test_missing_row_is_not_found(self, db_session, restaurant_a):
        guard = TenantGuard(db_session)
        with pytest.raises(NotFoundError) as exc_info:
            guard.load(OrderRepository(db_session), "Order", "missing", restaurant_a.id)
        assert not isinstance(exc_info.value, TenantMismatchError)

    def test_foreign_row_is_mismatch_with_same_detail(self, db_session, restaurant_a, order_of_b):
        guard = TenantGuard(db_session)
        with pytest.raises(TenantMismatchError) as foreign:
            guard.load(OrderRepository(db_session), "Order", order_of_b.id, restaurant_a.id)
        with pytest.raises(NotFoundError) as missing:
            guard.load(OrderRepository(db_session), "Order", order_of_b.id + "x", restaurant_a.id)

        assert foreign.value.status_code == missing.value.status_code == 404
        assert foreign.value.detail == f"Order with ID {order_of_b.id} not found"
        assert missing.value.detail == f"Order with ID {order_of_b.id}x not found"

    def test_mismatch_is_audit_logged(self, db_session, restaurant_a, order_of_b, caplog):
        guard = TenantGuard(db_session)
        with caplog.at_level(logging.WARNING):
            assert guard.is_foreign(OrderRepository(db_session), "Order", order_of_b.id, restaurant_a.id)
        assert any(r.name == "security.audit" for r in caplog.records)

    def test_ensure_owned(self, db_session, restaurant_a, restaurant_b, order_of_b):
        guard = TenantGuard(db_session)
        guard.ensure_owned(order_of_b, "Order", restaurant_b.id)
        with pytest.raises(TenantMismatchError):
            guard.ensure_owned(order_of_b, "Order", restaurant_a.id)


class TestOrderIsolation:

    def test_cannot_read_foreign_order(self, order_service, restaurant_a, order_of_b):
        with pytest.raises(NotFoundError):
            order_service.get_order(restaurant_a.id, order_of_b.id)

    def test_foreign_orders_not_listed(self, order_service, restaurant_a, order_of_b):
        assert order_service.list_orders(restaurant_a.id) == []

    def test_cannot_change_foreign_order_status(self, db_session, order_service, restaurant_a, order_of_b):
        with pytest.raises(NotFoundError):
            order_service.update_status(restaurant_a.id, order_of_b.id, OrderStatus.PAID)

        db_session.expire_all()
        assert db_session.get(Order, order_of_b.id).status == OrderStatus.PENDING

    def test_cannot_add_item_to_foreign_order(self, db_session, order_service, restaurant_a, order_of_b):
        with pytest.raises(NotFoundError):
            order_service.add_item(restaurant_a.id, order_of_b.id, OrderLine(restaurant_a.fries.id, 1))

        db_session.expire_all()
        assert db_session.get(Order, order_of_b.id).total_amount_cents == 1000

    def test_cannot_remove_item_of_foreign_order(self, order_service, restaurant_a, order_of_b):
        with pytest.raises(NotFoundError):
            order_service.remove_item(restaurant_a.id, order_of_b.id, order_of_b.items[0].id)

    def test_cannot_use_foreign_product(self, db_session, order_service, restaurant_a, restaurant_b):
        with pytest.raises(ProductNotFoundError):
            order_service.create_order(
                restaurant_a.id,
                OrderDraft(type=OrderType.TAKEAWAY),
                [OrderLine(restaurant_b.burger.id, 1)],
            )
        assert db_session.query(Order).count() == 0

    def test_cannot_use_foreign_table(self, db_session, order_service, restaurant_a, restaurant_b):
        foreign_table = restaurant_b.tables[0]
        with pytest.raises(NotFoundError):
            order_service.create_order(
                restaurant_a.id,
                OrderDraft(table_id=foreign_table.id),
                [OrderLine(restaurant_a.burger.id, 1)],
            )

        db_session.rollback()
        db_session.refresh(foreign_table)
        assert foreign_table.status == TableStatus.FREE

    def test_active_order_of_foreign_table(self, order_service, restaurant_a, restaurant_b, order_of_b):
        with pytest.raises(NotFoundError):
            order_service.get_active_order_by_table(restaurant_a.id, restaurant_b.tables[0].id)

    def test_foreign_transactions_invisible(self, db_session, order_service, restaurant_a, restaurant_b, order_of_b):
        order_service.update_status(restaurant_b.id, order_of_b.id, OrderStatus.PAID)
        finance = FinanceService(db_session)

        assert finance.list_transactions(restaurant_a.id) == []
        assert len(finance.list_transactions(restaurant_b.id)) == 1
        with pytest.raises(NotFoundError):
            finance.get_transactions_by_order(restaurant_a.id, order_of_b.id)
