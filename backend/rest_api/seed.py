"""
Seed data for development.
Creates one demo restaurant with a small menu and a few tables.
"""

from sqlalchemy.orm import Session
from sqlalchemy import select

from shared.config.constants import SubscriptionStatus, TableStatus
from shared.config.logging import get_logger
from rest_api.models import Restaurant, ProductCategory, Product, Table

logger = get_logger(__name__)


DEMO_RESTAURANT_SLUG = "demo"
DEMO_TABLE_COUNT = 6
DEMO_TABLE_CAPACITY = 4

# category -> [(name, price_cents)]
DEMO_MENU: dict[str, list[tuple[str, int]]] = {
    "Starters": [
        ("Empanada", 350),
        ("Tomato soup", 600),
    ],
    "Mains": [
        ("Grilled chicken", 1450),
        ("Vegetable risotto", 1300),
        ("Beef burger", 1200),
    ],
    "Drinks": [
        ("Lemonade", 300),
        ("Sparkling water", 250),
    ],
}


def seed(db: Session) -> Restaurant:
    """
    Create the demo restaurant.
    Idempotent: returns the existing restaurant when already seeded.
    """
    existing = db.scalar(select(Restaurant).where(Restaurant.slug == DEMO_RESTAURANT_SLUG))
    if existing:
        logger.info("Demo restaurant already seeded, skipping", restaurant_id=existing.id)
        return existing

    restaurant = Restaurant(
        name="Demo Restaurant",
        slug=DEMO_RESTAURANT_SLUG,
        subscription_status=SubscriptionStatus.ACTIVE,
    )
    db.add(restaurant)
    db.flush()

    for category_name, products in DEMO_MENU.items():
        category = ProductCategory(restaurant_id=restaurant.id, name=category_name)
        db.add(category)
        db.flush()
        for name, price_cents in products:
            db.add(
                Product(
                    restaurant_id=restaurant.id,
                    category_id=category.id,
                    name=name,
                    price_cents=price_cents,
                    in_stock=True,
                )
            )

    for number in range(1, DEMO_TABLE_COUNT + 1):
        db.add(
            Table(
                restaurant_id=restaurant.id,
                number=number,
                capacity=DEMO_TABLE_CAPACITY,
                status=TableStatus.FREE,
            )
        )

    db.commit()
    logger.info(
        "Demo restaurant seeded",
        restaurant_id=restaurant.id,
        products=sum(len(p) for p in DEMO_MENU.values()),
        tables=DEMO_TABLE_COUNT,
    )
    return restaurant
