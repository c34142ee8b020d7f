"""
Order notifications.

Delivery orders are announced on a per-restaurant Redis channel so that
dashboards can pick them up. Publishing is fire-and-forget: the snapshot is
built on the request thread, the Redis call runs in a small thread pool,
and failures are only logged.
"""

import concurrent.futures
import threading
from typing import Any, Protocol

import redis

from shared.config.constants import EventType
from shared.config.logging import get_logger, mask_email, mask_phone
from shared.config.settings import settings
from shared.infrastructure.events import (
    Event,
    channel_restaurant_orders,
    get_redis_sync_client,
)
from rest_api.models import Order

logger = get_logger(__name__)


class OrderNotifier(Protocol):
    """Receives newly created orders for broadcast."""

    def publish(self, order: Order) -> None:
        ...


def build_order_snapshot(order: Order) -> dict[str, Any]:
    """Plain-data copy of an order, safe to hand to another thread."""
    return {
        "id": order.id,
        "code": order.code,
        "type": order.type,
        "status": order.status,
        "total_amount_cents": order.total_amount_cents,
        "table_id": order.table_id,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "customer_email": order.customer_email,
        "delivery_address": order.delivery_address,
        "notes": order.notes,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "items": [
            {
                "id": item.id,
                "product_id": item.product_id,
                "quantity": item.quantity,
                "price_cents": item.price_cents,
                "notes": item.notes,
            }
            for item in order.items
        ],
    }


class NullOrderNotifier:
    """Used when notifications are disabled."""

    def publish(self, order: Order) -> None:
        logger.debug("Notifications disabled, order not published", order_id=order.id)


class RedisOrderNotifier:
    """
    Publishes order events on "{prefix}:{restaurant_id}:orders".

    Usage:
        notifier = RedisOrderNotifier()
        notifier.publish(order)   # returns immediately
        notifier.shutdown()
    """

    def __init__(
        self,
        client_factory=get_redis_sync_client,
        max_workers: int | None = None,
        channel_prefix: str | None = None,
    ):
        self._client_factory = client_factory
        self._channel_prefix = channel_prefix or settings.notification_channel_prefix
        self._thread_pool = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers or settings.notification_workers,
            thread_name_prefix="order-notify",
        )

    def publish(self, order: Order) -> None:
        try:
            event = Event(
                type=EventType.DELIVERY_ORDER_CREATED,
                restaurant_id=order.restaurant_id,
                entity=build_order_snapshot(order),
                actor={"user_id": order.user_id},
            )
            channel = channel_restaurant_orders(order.restaurant_id, self._channel_prefix)
            payload = event.to_json()
            self._thread_pool.submit(self._send, channel, payload, order.id)
        except (ValueError, RuntimeError) as e:
            # RuntimeError: pool already shut down
            logger.error(
                "Failed to queue order notification",
                order_id=order.id,
                restaurant_id=order.restaurant_id,
                error=str(e),
            )

    def _send(self, channel: str, payload: str, order_id: str) -> None:
        try:
            receivers = self._client_factory().publish(channel, payload)
            logger.debug(
                "Order notification published",
                channel=channel,
                order_id=order_id,
                receivers=receivers,
            )
        except redis.RedisError as e:
            logger.error(
                "Failed to publish order notification",
                channel=channel,
                order_id=order_id,
                error=str(e),
            )

    def shutdown(self, wait: bool = True) -> None:
        self._thread_pool.shutdown(wait=wait)


_notifier: OrderNotifier | None = None
_notifier_lock = threading.Lock()


def get_order_notifier() -> OrderNotifier:
    """Process-wide notifier chosen from settings."""
    global _notifier
    if _notifier is None:
        with _notifier_lock:
            if _notifier is None:
                if settings.notifications_enabled:
                    _notifier = RedisOrderNotifier()
                else:
                    _notifier = NullOrderNotifier()
                logger.info(
                    "Order notifier initialized",
                    notifier=type(_notifier).__name__,
                )
    return _notifier


def shutdown_order_notifier() -> None:
    global _notifier
    with _notifier_lock:
        if isinstance(_notifier, RedisOrderNotifier):
            _notifier.shutdown()
        _notifier = None


def describe_customer(order: Order) -> dict[str, str | None]:
    """Masked customer contact for log lines."""
    return {
        "customer_email": mask_email(order.customer_email),
        "customer_phone": mask_phone(order.customer_phone),
    }
