"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rest_api.main import app
from rest_api.models import Base, Restaurant, ProductCategory, Product, Table, Order
from rest_api.routers.orders import get_order_service
from rest_api.services.domain import OrderCodeGenerator, OrderService
from shared.config.constants import TableStatus, UserType
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed clock for order codes: the 15th of the month
FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# =============================================================================
# Notifiers
# =============================================================================


class RecordingNotifier:
    """Keeps published orders in memory."""

    def __init__(self):
        self.published: list[Order] = []

    def publish(self, order: Order) -> None:
        self.published.append(order)


class FailingNotifier:
    """Raises on every publish."""

    def publish(self, order: Order) -> None:
        raise ConnectionError("redis unreachable")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return FailingNotifier()


@pytest.fixture
def code_generator():
    return OrderCodeGenerator(clock=lambda: FIXED_NOW)


@pytest.fixture
def order_service(db_session, code_generator, notifier):
    return OrderService(db_session, code_generator=code_generator, notifier=notifier)


# =============================================================================
# Seed data
# =============================================================================


@dataclass
class SeededRestaurant:
    restaurant: Restaurant
    tables: list[Table]
    burger: Product
    fries: Product
    sold_out: Product

    @property
    def id(self) -> str:
        return self.restaurant.id


def _seed_restaurant(db, name: str, slug: str) -> SeededRestaurant:
    restaurant = Restaurant(name=name, slug=slug, subscription_status="active")
    db.add(restaurant)
    db.flush()

    category = ProductCategory(restaurant_id=restaurant.id, name="Mains")
    db.add(category)
    db.flush()

    burger = Product(
        restaurant_id=restaurant.id,
        category_id=category.id,
        name="Burger",
        price_cents=1000,
        in_stock=True,
    )
    fries = Product(
        restaurant_id=restaurant.id,
        category_id=category.id,
        name="Fries",
        price_cents=500,
        in_stock=True,
    )
    sold_out = Product(
        restaurant_id=restaurant.id,
        category_id=category.id,
        name="Seasonal pie",
        price_cents=800,
        in_stock=False,
    )
    tables = [
        Table(restaurant_id=restaurant.id, number=n, capacity=4, status=TableStatus.FREE)
        for n in (1, 2, 3)
    ]
    db.add_all([burger, fries, sold_out, *tables])
    db.commit()
    return SeededRestaurant(restaurant, tables, burger, fries, sold_out)


@pytest.fixture
def restaurant_a(db_session):
    """First restaurant: three free tables, Burger 1000, Fries 500, sold-out pie."""
    return _seed_restaurant(db_session, "Restaurant A", "restaurant-a")


@pytest.fixture
def restaurant_b(db_session):
    """Second restaurant with the same layout as restaurant_a."""
    return _seed_restaurant(db_session, "Restaurant B", "restaurant-b")


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture(scope="function")
def client(db_session, code_generator, notifier):
    """
    Create a test client with database session and service overrides.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_get_order_service():
        return OrderService(db_session, code_generator=code_generator, notifier=notifier)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_order_service] = override_get_order_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_headers():
    """Build Authorization headers for a user of a restaurant."""

    def _make(restaurant_id: str | None, user_type: str = UserType.STAFF, user_id: str = "user-1"):
        payload = {"sub": user_id, "user_type": user_type}
        if restaurant_id is not None:
            payload["restaurant_id"] = restaurant_id
        return {"Authorization": f"Bearer {sign_jwt(payload)}"}

    return _make


@pytest.fixture
def staff_headers(make_headers, restaurant_a):
    return make_headers(restaurant_a.id, UserType.STAFF)


@pytest.fixture
def manager_headers(make_headers, restaurant_a):
    return make_headers(restaurant_a.id, UserType.MANAGER, user_id="manager-1")
