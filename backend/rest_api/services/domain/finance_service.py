"""
Finance Domain Service.

Ledger entries booked by hand, listings and income/expense summaries.
Sales entries are written by PaymentRecorder when an order is paid.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import Limits, TransactionType, manual_categories
from shared.config.logging import finance_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DatabaseError, ValidationError
from shared.utils.periods import as_utc, day_bounds, month_bounds
from shared.utils.validators import sanitize_text
from rest_api.models import FinancialTransaction, utcnow
from rest_api.repositories import (
    FinancialTransactionRepository,
    OrderRepository,
    TransactionFilters,
)
from .tenant_guard import TenantGuard


@dataclass
class FinancialSummary:
    """Totals for a period, in cents."""

    period_start: date
    period_end: date
    income_cents: int
    expense_cents: int

    @property
    def balance_cents(self) -> int:
        return self.income_cents - self.expense_cents


class FinanceService:
    """Restaurant-scoped ledger bookkeeping and queries."""

    def __init__(self, db: Session):
        self._db = db
        self._transactions = FinancialTransactionRepository(db)
        self._orders = OrderRepository(db)
        self._guard = TenantGuard(db)

    # =========================================================================
    # Manual entries
    # =========================================================================

    def record_entry(
        self,
        restaurant_id: str,
        transaction_type: str,
        category: str,
        amount_cents: int,
        day: date | None = None,
        description: str | None = None,
        user_id: str | None = None,
        order_id: str | None = None,
    ) -> FinancialTransaction:
        """
        Book an income or expense entry by hand.

        The entry is dated at the start of ``day`` in the restaurant time
        zone, or now when no day is given. The sales category is reserved
        for paid orders.

        Raises:
            ValidationError: Unknown type, category not allowed for the type,
                amount not positive
            NotFoundError: order_id is not an order of this restaurant
            DatabaseError: The entry could not be stored
        """
        if transaction_type not in TransactionType.ALL:
            raise ValidationError(
                f"Invalid transaction type '{transaction_type}'", type=transaction_type
            )
        if category not in manual_categories(transaction_type):
            raise ValidationError(
                f"Category '{category}' cannot be booked as {transaction_type}",
                type=transaction_type,
                category=category,
            )
        if amount_cents <= 0:
            raise ValidationError("amount_cents must be positive", amount_cents=amount_cents)

        if order_id is not None:
            self._guard.load(self._orders, "Order", order_id, restaurant_id)

        transaction = FinancialTransaction(
            restaurant_id=restaurant_id,
            type=transaction_type,
            category=category,
            amount_cents=amount_cents,
            description=sanitize_text(description),
            order_id=order_id,
            user_id=user_id,
            date=day_bounds(day)[0] if day else utcnow(),
        )

        try:
            self._transactions.add(transaction)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("ledger entry", restaurant_id=restaurant_id, error=str(e)) from e

        logger.info(
            "Ledger entry recorded",
            restaurant_id=restaurant_id,
            transaction_id=transaction.id,
            type=transaction_type,
            category=category,
            amount_cents=amount_cents,
        )
        return transaction

    def get_transaction(self, restaurant_id: str, transaction_id: str) -> FinancialTransaction:
        return self._guard.load(self._transactions, "Transaction", transaction_id, restaurant_id)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_transactions(
        self,
        restaurant_id: str,
        transaction_type: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Sequence[FinancialTransaction]:
        if transaction_type is not None and transaction_type not in TransactionType.ALL:
            raise ValidationError(
                f"Invalid transaction type '{transaction_type}'", type=transaction_type
            )
        start, end = as_utc(start), as_utc(end)
        if start is not None and end is not None and start >= end:
            raise ValidationError("start must be before end", start=start, end=end)

        filters = TransactionFilters(
            type=transaction_type,
            date_from=start,
            date_to=end,
            limit=limit,
            offset=offset,
        )
        return self._transactions.find_all(restaurant_id, filters)

    def get_transactions_by_order(
        self,
        restaurant_id: str,
        order_id: str,
    ) -> Sequence[FinancialTransaction]:
        """
        Raises:
            NotFoundError: Unknown order for this restaurant
        """
        self._guard.load(self._orders, "Order", order_id, restaurant_id)
        return self._transactions.find_by_order(order_id, restaurant_id)

    def get_daily_summary(self, restaurant_id: str, day: date) -> FinancialSummary:
        start, end = day_bounds(day)
        return self._summarize(restaurant_id, day, day, start, end)

    def get_monthly_summary(self, restaurant_id: str, year: int, month: int) -> FinancialSummary:
        """
        Raises:
            ValidationError: Month outside 1..12
        """
        try:
            start, end = month_bounds(year, month)
        except ValueError as e:
            raise ValidationError(str(e), year=year, month=month) from e

        first = date(year, month, 1)
        last = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        last = date.fromordinal(last.toordinal() - 1)
        return self._summarize(restaurant_id, first, last, start, end)

    def _summarize(
        self,
        restaurant_id: str,
        period_start: date,
        period_end: date,
        start: datetime,
        end: datetime,
    ) -> FinancialSummary:
        summary = FinancialSummary(
            period_start=period_start,
            period_end=period_end,
            income_cents=self._transactions.sum_by_type(
                restaurant_id, TransactionType.INCOME, start, end
            ),
            expense_cents=self._transactions.sum_by_type(
                restaurant_id, TransactionType.EXPENSE, start, end
            ),
        )
        logger.debug(
            "Financial summary computed",
            restaurant_id=restaurant_id,
            period_start=period_start,
            period_end=period_end,
            balance_cents=summary.balance_cents,
        )
        return summary
