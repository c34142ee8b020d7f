"""
Order Models: Order, OrderItem.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, new_uuid


class Order(TimestampMixin, Base):
    """
    A customer order. Never physically deleted; cancelled orders keep
    their rows for the audit trail.

    total_amount_cents always equals the sum of price_cents * quantity over
    the current items.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    restaurant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant.id"), nullable=False, index=True
    )
    # Required for in_house, NULL otherwise
    table_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("restaurant_table.id"), nullable=True, index=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    # "#DDNNN" display code
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    total_amount_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Delivery / takeaway customer fields
    customer_name: Mapped[Optional[str]] = mapped_column(Text)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(20))
    customer_email: Mapped[Optional[str]] = mapped_column(Text)
    delivery_address: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    delivered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'preparing', 'ready', 'delivered', 'paid', 'cancelled')",
            name="chk_order_status",
        ),
        CheckConstraint(
            "type IN ('in_house', 'delivery', 'takeaway')", name="chk_order_type"
        ),
        CheckConstraint(
            "(type = 'in_house' AND table_id IS NOT NULL) OR "
            "(type != 'in_house' AND table_id IS NULL)",
            name="chk_order_table_by_type",
        ),
        CheckConstraint("total_amount_cents >= 0", name="chk_order_total_non_negative"),
        Index("ix_order_restaurant_status", "restaurant_id", "status"),
        Index("ix_order_restaurant_created", "restaurant_id", "created_at"),
    )

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, code='{self.code}', status='{self.status}')>"


class OrderItem(TimestampMixin, Base):
    """
    One product line of an order. price_cents is the catalog price at the
    moment the line was added and is never re-read afterwards.
    """

    __tablename__ = "order_item"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    restaurant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant.id"), nullable=False, index=True
    )
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("product.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_qty_positive"),
        CheckConstraint("price_cents >= 0", name="chk_order_item_price_non_negative"),
    )

    order: Mapped["Order"] = relationship(back_populates="items")

    @property
    def subtotal_cents(self) -> int:
        return self.price_cents * self.quantity
