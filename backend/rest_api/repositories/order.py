"""
Order Repository - Data access for orders and their items.
Items are eager-loaded with selectinload to avoid N+1 queries.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy.orm import selectinload
from sqlalchemy import Select, select, func

from rest_api.models import Order, OrderItem
from shared.config.constants import OrderStatus, OrderType
from .base import TenantRepository, RepositoryFilters


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    status: str | None = None
    statuses: list[str] | None = None
    type: str | None = None
    table_id: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None


class OrderRepository(TenantRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of items. Results are newest first.
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self, restaurant_id: str) -> Select:
        return (
            select(Order)
            .where(Order.restaurant_id == restaurant_id)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc())
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply order-specific filters."""
        if not isinstance(filters, OrderFilters):
            return query

        if filters.status:
            query = query.where(Order.status == filters.status)
        elif filters.statuses:
            query = query.where(Order.status.in_(filters.statuses))

        if filters.type:
            query = query.where(Order.type == filters.type)

        if filters.table_id:
            query = query.where(Order.table_id == filters.table_id)

        # Half-open interval [created_from, created_to)
        if filters.created_from is not None:
            query = query.where(Order.created_at >= filters.created_from)
        if filters.created_to is not None:
            query = query.where(Order.created_at < filters.created_to)

        return query

    def find_active_by_table(self, table_id: str, restaurant_id: str) -> Order | None:
        """Newest non-terminal order on a table, if any."""
        query = (
            self._base_query(restaurant_id)
            .where(
                Order.table_id == table_id,
                Order.status.in_(OrderStatus.ACTIVE),
            )
            .limit(1)
        )
        return self._db.execute(query).scalars().unique().first()

    def find_by_date_and_type(
        self,
        restaurant_id: str,
        start: datetime,
        end: datetime,
        order_type: str,
    ) -> Sequence[Order]:
        """Orders of one type created in [start, end)."""
        query = self._apply_filters(
            self._base_query(restaurant_id),
            OrderFilters(type=order_type, created_from=start, created_to=end),
        )
        return self._db.execute(query).scalars().unique().all()

    def find_delivery_by_date(
        self,
        restaurant_id: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[Order]:
        return self.find_by_date_and_type(restaurant_id, start, end, OrderType.DELIVERY)

    # =========================================================================
    # Items
    # =========================================================================

    def find_item(self, item_id: str, order_id: str, restaurant_id: str) -> OrderItem | None:
        """Item lookup that only matches when the item belongs to the order."""
        query = select(OrderItem).where(
            OrderItem.id == item_id,
            OrderItem.order_id == order_id,
            OrderItem.restaurant_id == restaurant_id,
        )
        return self._db.scalar(query)

    def add_item(self, item: OrderItem) -> OrderItem:
        self._db.add(item)
        self._db.flush()
        return item

    def delete_item(self, item: OrderItem) -> None:
        self._db.delete(item)
        self._db.flush()

    def sum_item_totals(self, order_id: str, restaurant_id: str) -> int:
        """SUM(price_cents * quantity) over the order's current item rows."""
        query = select(
            func.coalesce(func.sum(OrderItem.price_cents * OrderItem.quantity), 0)
        ).where(
            OrderItem.order_id == order_id,
            OrderItem.restaurant_id == restaurant_id,
        )
        return int(self._db.scalar(query) or 0)