"""
Financial Transaction Repository - Ledger reads and appends.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy import Select, select, func

from rest_api.models import FinancialTransaction
from shared.config.constants import TransactionCategory, TransactionType
from .base import TenantRepository, RepositoryFilters


@dataclass
class TransactionFilters(RepositoryFilters):
    """Filters specific to ledger entries."""

    type: str | None = None
    category: str | None = None
    order_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


class FinancialTransactionRepository(TenantRepository[FinancialTransaction]):
    """Repository for FinancialTransaction entities, newest first."""

    @property
    def model(self) -> type[FinancialTransaction]:
        return FinancialTransaction

    def _base_query(self, restaurant_id: str) -> Select:
        return (
            select(FinancialTransaction)
            .where(FinancialTransaction.restaurant_id == restaurant_id)
            .order_by(FinancialTransaction.date.desc())
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, TransactionFilters):
            return query

        if filters.type:
            query = query.where(FinancialTransaction.type == filters.type)
        if filters.category:
            query = query.where(FinancialTransaction.category == filters.category)
        if filters.order_id:
            query = query.where(FinancialTransaction.order_id == filters.order_id)
        # Half-open interval [date_from, date_to)
        if filters.date_from is not None:
            query = query.where(FinancialTransaction.date >= filters.date_from)
        if filters.date_to is not None:
            query = query.where(FinancialTransaction.date < filters.date_to)

        return query

    def find_by_order(self, order_id: str, restaurant_id: str) -> Sequence[FinancialTransaction]:
        return self.find_all(restaurant_id, TransactionFilters(order_id=order_id))

    def find_sale_for_order(self, order_id: str, restaurant_id: str) -> FinancialTransaction | None:
        """The sales income entry written when the order was paid, if any."""
        query = self._base_query(restaurant_id).where(
            FinancialTransaction.order_id == order_id,
            FinancialTransaction.type == TransactionType.INCOME,
            FinancialTransaction.category == TransactionCategory.SALES,
        )
        return self._db.scalar(query)

    def sum_by_type(
        self,
        restaurant_id: str,
        transaction_type: str,
        start: datetime,
        end: datetime,
    ) -> int:
        """Total amount of one transaction type dated in [start, end)."""
        query = select(func.coalesce(func.sum(FinancialTransaction.amount_cents), 0)).where(
            FinancialTransaction.restaurant_id == restaurant_id,
            FinancialTransaction.type == transaction_type,
            FinancialTransaction.date >= start,
            FinancialTransaction.date < end,
        )
        return int(self._db.scalar(query) or 0)