"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import OrderStatus, TableStatus, UserType

    if order.status in OrderStatus.TERMINAL:
        ...
"""

from typing import Final


# =============================================================================
# User Types
# =============================================================================


class UserType:
    """User type constants."""

    SUPERADMIN: Final[str] = "superadmin"  # Platform administrator
    ADMIN: Final[str] = "admin"
    MANAGER: Final[str] = "manager"
    STAFF: Final[str] = "staff"

    ALL: Final[list[str]] = [SUPERADMIN, ADMIN, MANAGER, STAFF]


MANAGEMENT_USER_TYPES: Final[frozenset[str]] = frozenset({UserType.ADMIN, UserType.MANAGER})
RESTAURANT_USER_TYPES: Final[frozenset[str]] = frozenset(
    {UserType.ADMIN, UserType.MANAGER, UserType.STAFF}
)


# =============================================================================
# Entity Status Constants
# =============================================================================


class SubscriptionStatus:
    """Restaurant subscription status constants."""

    TRIAL: Final[str] = "trial"
    ACTIVE: Final[str] = "active"
    INACTIVE: Final[str] = "inactive"


class OrderStatus:
    """Order status constants."""

    PENDING: Final[str] = "pending"
    PREPARING: Final[str] = "preparing"
    READY: Final[str] = "ready"
    DELIVERED: Final[str] = "delivered"
    PAID: Final[str] = "paid"
    CANCELLED: Final[str] = "cancelled"

    ALL: Final[list[str]] = [PENDING, PREPARING, READY, DELIVERED, PAID, CANCELLED]
    TERMINAL: Final[frozenset[str]] = frozenset({PAID, CANCELLED})
    ACTIVE: Final[list[str]] = [PENDING, PREPARING, READY, DELIVERED]


class OrderType:
    """Order type constants."""

    IN_HOUSE: Final[str] = "in_house"
    DELIVERY: Final[str] = "delivery"
    TAKEAWAY: Final[str] = "takeaway"

    ALL: Final[list[str]] = [IN_HOUSE, DELIVERY, TAKEAWAY]
    # Types that carry customer contact fields
    WITH_CUSTOMER: Final[frozenset[str]] = frozenset({DELIVERY, TAKEAWAY})


class TableStatus:
    """Table status constants."""

    FREE: Final[str] = "free"
    OCCUPIED: Final[str] = "occupied"
    RESERVED: Final[str] = "reserved"

    ALL: Final[list[str]] = [FREE, OCCUPIED, RESERVED]
    # A new order can only be seated on these
    AVAILABLE: Final[frozenset[str]] = frozenset({FREE, RESERVED})


class TransactionType:
    """Financial transaction type constants."""

    INCOME: Final[str] = "income"
    EXPENSE: Final[str] = "expense"

    ALL: Final[list[str]] = [INCOME, EXPENSE]


class TransactionCategory:
    """Financial transaction category constants."""

    SALES: Final[str] = "sales"
    OTHER_INCOME: Final[str] = "other_income"
    INGREDIENTS: Final[str] = "ingredients"
    UTILITIES: Final[str] = "utilities"
    SALARIES: Final[str] = "salaries"
    RENT: Final[str] = "rent"
    EQUIPMENT: Final[str] = "equipment"
    MAINTENANCE: Final[str] = "maintenance"

    INCOME: Final[frozenset[str]] = frozenset({SALES, OTHER_INCOME})
    EXPENSE: Final[frozenset[str]] = frozenset(
        {INGREDIENTS, UTILITIES, SALARIES, RENT, EQUIPMENT, MAINTENANCE}
    )
    # Sales are only booked by paying an order
    MANUAL: Final[frozenset[str]] = (INCOME | EXPENSE) - {SALES}


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 999

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 100
    MAX_PHONE_LENGTH: Final[int] = 20
    MAX_NOTES_LENGTH: Final[int] = 255
    MAX_ADDRESS_LENGTH: Final[int] = 255

    # Order lines per request
    MAX_ORDER_LINES: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200


# =============================================================================
# Event Types (Redis)
# =============================================================================


class EventType:
    """Redis event type constants."""

    DELIVERY_ORDER_CREATED: Final[str] = "DELIVERY_ORDER_CREATED"


# =============================================================================
# Status Validation Functions
# =============================================================================


def validate_order_status(status: str) -> bool:
    """Validate that an order status is valid."""
    return status in OrderStatus.ALL


def validate_order_type(order_type: str) -> bool:
    """Validate that an order type is valid."""
    return order_type in OrderType.ALL


def validate_table_status(status: str) -> bool:
    """Validate that a table status is valid."""
    return status in TableStatus.ALL


def manual_categories(transaction_type: str) -> frozenset[str]:
    """Categories a manual ledger entry of the given type may use."""
    if transaction_type == TransactionType.INCOME:
        return TransactionCategory.INCOME & TransactionCategory.MANUAL
    if transaction_type == TransactionType.EXPENSE:
        return TransactionCategory.EXPENSE
    return frozenset()
