"""
Multi-Tenancy Model: Restaurant.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_uuid


class Restaurant(TimestampMixin, Base):
    """
    A restaurant is the tenant: every other row carries its restaurant_id
    and is only ever read or written under it.
    """

    __tablename__ = "restaurant"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # trial, active, inactive (evaluated by onboarding, not here)
    subscription_status: Mapped[str] = mapped_column(Text, default="trial", nullable=False)

    __table_args__ = (
        CheckConstraint(
            "subscription_status IN ('trial', 'active', 'inactive')",
            name="chk_restaurant_subscription_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}', slug='{self.slug}')>"
