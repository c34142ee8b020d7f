"""
Finance Model: FinancialTransaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_uuid, utcnow


class FinancialTransaction(TimestampMixin, Base):
    """
    Ledger entry. Sales income is written once per paid order; other
    entries come from manual bookkeeping.
    """

    __tablename__ = "financial_transaction"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    restaurant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant.id"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # income, expense
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    # Audit link back to the order that produced the entry
    order_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("orders.id"), nullable=True, index=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50))
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("type IN ('income', 'expense')", name="chk_transaction_type"),
        CheckConstraint("amount_cents >= 0", name="chk_transaction_amount_non_negative"),
        Index("ix_transaction_restaurant_date", "restaurant_id", "date"),
        # At most one sales entry per order
        Index(
            "uq_transaction_order_sales",
            "order_id",
            unique=True,
            postgresql_where=text("order_id IS NOT NULL AND type = 'income' AND category = 'sales'"),
            sqlite_where=text("order_id IS NOT NULL AND type = 'income' AND category = 'sales'"),
        ),
    )
