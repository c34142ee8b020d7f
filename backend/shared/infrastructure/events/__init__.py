"""
Event System for order notifications via Redis pub/sub.

- event_schema.py: Event dataclass with validation
- channels.py: Channel naming functions
- redis_pool.py: Connection pool management and health check
"""

from .event_schema import Event, MAX_EVENT_SIZE
from .channels import channel_restaurant_orders
from .redis_pool import (
    get_redis_sync_client,
    check_redis_sync_health,
    close_redis_sync_client,
)

__all__ = [
    "Event",
    "MAX_EVENT_SIZE",
    "channel_restaurant_orders",
    "get_redis_sync_client",
    "check_redis_sync_health",
    "close_redis_sync_client",
]
