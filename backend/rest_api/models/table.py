"""
Table Model.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_uuid


class Table(TimestampMixin, Base):
    """
    Physical table in a restaurant.

    current_order_id is a plain indexed column, not a foreign key: the table
    only looks its order up, it does not own it.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    restaurant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant.id"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="free", nullable=False)  # free, occupied, reserved
    current_order_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("restaurant_id", "number", name="uq_table_restaurant_number"),
        CheckConstraint(
            "status IN ('free', 'occupied', 'reserved')", name="chk_table_status"
        ),
        CheckConstraint("capacity > 0", name="chk_table_capacity_positive"),
        Index("ix_table_restaurant_status", "restaurant_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, number={self.number}, status='{self.status}')>"
