"""
Redis Channel Naming.
"""

from __future__ import annotations

from shared.config.settings import settings


def _validate_id(id_value: str, name: str) -> None:
    """Channel segments must be non-empty and free of separators."""
    if not isinstance(id_value, str) or not id_value or ":" in id_value:
        raise ValueError(f"{name} must be a non-empty id without ':', got {id_value!r}")


def channel_restaurant_orders(restaurant_id: str, prefix: str | None = None) -> str:
    """Channel for order notifications in a restaurant."""
    _validate_id(restaurant_id, "restaurant_id")
    return f"{prefix or settings.notification_channel_prefix}:{restaurant_id}:orders"
