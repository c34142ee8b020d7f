"""
Payment Recorder.

Writes the sales income entry for a paid order. The entry is staged in the
caller's session and committed together with the order's paid status.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from shared.config.constants import TransactionCategory, TransactionType
from shared.config.logging import finance_logger as logger
from rest_api.models import FinancialTransaction, Order, utcnow
from rest_api.repositories import FinancialTransactionRepository
from .tenant_guard import TenantGuard


class PaymentRecorder:
    """Appends one income transaction per paid order."""

    def __init__(self, db: Session, guard: TenantGuard | None = None):
        self._db = db
        self._transactions = FinancialTransactionRepository(db)
        self._guard = guard or TenantGuard(db)

    def record(
        self,
        order: Order,
        user_id: str | None,
        payment_method: str | None = None,
        paid_at: datetime | None = None,
    ) -> FinancialTransaction:
        """
        Stage the sales entry for an order. Does not commit.

        Returns the existing entry when the order already has one, so a
        retried payment never books the income twice.
        """
        restaurant_id = order.restaurant_id
        self._guard.ensure_owned(order, "Order", restaurant_id)

        existing = self._transactions.find_sale_for_order(order.id, restaurant_id)
        if existing is not None:
            logger.warning(
                "Sales entry already recorded for order",
                restaurant_id=restaurant_id,
                order_id=order.id,
                transaction_id=existing.id,
            )
            return existing

        transaction = FinancialTransaction(
            restaurant_id=restaurant_id,
            type=TransactionType.INCOME,
            category=TransactionCategory.SALES,
            amount_cents=order.total_amount_cents,
            description=f"Payment for order {order.code}",
            order_id=order.id,
            user_id=user_id or order.user_id,
            payment_method=payment_method,
            date=paid_at or utcnow(),
        )
        self._transactions.add(transaction)

        logger.info(
            "Sales entry staged",
            restaurant_id=restaurant_id,
            order_id=order.id,
            amount_cents=transaction.amount_cents,
        )
        return transaction
