"""
Tests for delivery-order notifications over Redis.
"""

import json

import pytest
import redis

from rest_api.services.domain import OrderDraft, OrderLine
from rest_api.services.domain.notifications import (
    NullOrderNotifier,
    RedisOrderNotifier,
    build_order_snapshot,
)
from shared.config.constants import EventType
from shared.infrastructure.events import Event, MAX_EVENT_SIZE, channel_restaurant_orders


class FakeRedis:
    """Stand-in for redis.Redis that records publish calls."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel, payload):
        if self.fail:
            raise redis.ConnectionError("connection refused")
        self.messages.append((channel, payload))
        return 1


@pytest.fixture
def delivery_order(order_service, restaurant_a):
    return order_service.create_delivery_order(
        restaurant_a.id,
        OrderDraft(
            user_id="waiter-7",
            customer_name="Bruno",
            customer_phone="555-0199",
            delivery_address="Calle Falsa 123",
        ),
        [OrderLine(restaurant_a.burger.id, 2)],
    ).order


class TestChannels:

    def test_channel_name(self):
        assert channel_restaurant_orders("abc", prefix="restaurant") == "restaurant:abc:orders"

    @pytest.mark.parametrize("bad", ["", "a:b", None])
    def test_rejects_bad_ids(self, bad):
        with pytest.raises(ValueError):
            channel_restaurant_orders(bad)


class TestEvent:

    def test_round_trip(self):
        event = Event(type=EventType.DELIVERY_ORDER_CREATED, restaurant_id="r1", entity={"id": "o1"})
        restored = Event.from_json(event.to_json())

        assert restored.type == EventType.DELIVERY_ORDER_CREATED
        assert restored.entity == {"id": "o1"}
        assert restored.ts is not None

    def test_requires_restaurant(self):
        with pytest.raises(ValueError):
            Event(type=EventType.DELIVERY_ORDER_CREATED, restaurant_id="")

    def test_oversized_event_rejected(self):
        event = Event(
            type=EventType.DELIVERY_ORDER_CREATED,
            restaurant_id="r1",
            entity={"notes": "x" * (MAX_EVENT_SIZE + 1)},
        )
        with pytest.raises(ValueError):
            event.to_json()


class TestRedisOrderNotifier:

    def test_publishes_snapshot_on_restaurant_channel(self, delivery_order, restaurant_a):
        fake = FakeRedis()
        notifier = RedisOrderNotifier(client_factory=lambda: fake, max_workers=1, channel_prefix="test")

        notifier.publish(delivery_order)
        notifier.shutdown()

        assert len(fake.messages) == 1
        channel, payload = fake.messages[0]
        assert channel == f"test:{restaurant_a.id}:orders"
        event = json.loads(payload)
        assert event["type"] == EventType.DELIVERY_ORDER_CREATED
        assert event["restaurant_id"] == restaurant_a.id
        assert event["actor"] == {"user_id": "waiter-7"}
        assert event["entity"]["code"] == delivery_order.code
        assert event["entity"]["total_amount_cents"] == 2000
        assert event["entity"]["items"][0]["quantity"] == 2

    def test_redis_failure_is_swallowed(self, delivery_order):
        fake = FakeRedis(fail=True)
        notifier = RedisOrderNotifier(client_factory=lambda: fake, max_workers=1)

        notifier.publish(delivery_order)
        notifier.shutdown()

        assert fake.messages == []

    def test_publish_after_shutdown_does_not_raise(self, delivery_order):
        notifier = RedisOrderNotifier(client_factory=FakeRedis, max_workers=1)
        notifier.shutdown()

        notifier.publish(delivery_order)


class TestSnapshot:

    def test_snapshot_is_plain_data(self, delivery_order):
        snapshot = build_order_snapshot(delivery_order)

        json.dumps(snapshot)
        assert snapshot["delivery_address"] == "Calle Falsa 123"
        assert len(snapshot["items"]) == 1

    def test_null_notifier(self, delivery_order):
        NullOrderNotifier().publish(delivery_order)
