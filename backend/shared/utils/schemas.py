"""
Shared Pydantic schemas used across the application.

Money is always expressed in integer cents.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, EmailStr


# =============================================================================
# Common Types
# =============================================================================

OrderStatus = Literal["pending", "preparing", "ready", "delivered", "paid", "cancelled"]
OrderType = Literal["in_house", "delivery", "takeaway"]
TableStatus = Literal["free", "occupied", "reserved"]
TransactionType = Literal["income", "expense"]


# =============================================================================
# Order Input Schemas
# =============================================================================


class OrderLineInput(BaseModel):
    """A single product line of an order."""

    product_id: str
    quantity: int = Field(ge=1, le=999)
    notes: str | None = Field(default=None, max_length=255)


class CreateOrderRequest(BaseModel):
    """Request to create an in-house or takeaway order."""

    type: Literal["in_house", "takeaway"] = "in_house"
    table_id: str | None = None
    customer_name: str | None = Field(default=None, max_length=100)
    customer_phone: str | None = Field(default=None, max_length=20)
    customer_email: EmailStr | None = None
    notes: str | None = Field(default=None, max_length=255)
    items: list[OrderLineInput] = Field(min_length=1, max_length=100)


class CreateDeliveryOrderRequest(BaseModel):
    """Request to create a delivery order. Never bound to a table."""

    customer_name: str = Field(min_length=1, max_length=100)
    customer_phone: str = Field(min_length=1, max_length=20)
    customer_email: EmailStr | None = None
    delivery_address: str = Field(min_length=1, max_length=255)
    notes: str | None = Field(default=None, max_length=255)
    items: list[OrderLineInput] = Field(min_length=1, max_length=100)


class UpdateOrderStatusRequest(BaseModel):
    """Request to move an order to another status."""

    status: OrderStatus
    payment_method: str | None = Field(default=None, max_length=50)


# =============================================================================
# Order Output Schemas
# =============================================================================


class OrderItemOutput(BaseModel):
    """Output for a single order item."""

    id: str
    product_id: str
    quantity: int
    price_cents: int
    subtotal_cents: int
    notes: str | None = None

    class Config:
        from_attributes = True


class OrderOutput(BaseModel):
    """Output for an order with its items."""

    id: str
    restaurant_id: str
    table_id: str | None = None
    user_id: str | None = None
    code: str
    type: OrderType
    status: OrderStatus
    total_amount_cents: int
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    notes: str | None = None
    delivery_address: str | None = None
    created_at: datetime
    paid_at: datetime | None = None
    delivered_at: datetime | None = None
    items: list[OrderItemOutput] = []

    class Config:
        from_attributes = True


class OrderResultResponse(BaseModel):
    """
    Response for operations with best-effort follow-ups.

    warnings lists follow-up steps that failed after the primary write
    succeeded (for example releasing the table).
    """

    order: OrderOutput
    warnings: list[str] = []


# =============================================================================
# Finance Schemas
# =============================================================================


class CreateTransactionRequest(BaseModel):
    """
    Request to book a ledger entry by hand.

    date is the business day of the entry; today when omitted.
    """

    type: TransactionType
    category: str = Field(min_length=1, max_length=30)
    amount_cents: int = Field(gt=0)
    entry_date: date | None = Field(default=None, alias="date")
    description: str | None = Field(default=None, max_length=255)
    order_id: str | None = None


class TransactionOutput(BaseModel):
    """Output for a financial transaction."""

    id: str
    restaurant_id: str
    type: TransactionType
    category: str
    amount_cents: int
    description: str | None = None
    order_id: str | None = None
    user_id: str | None = None
    payment_method: str | None = None
    date: datetime

    class Config:
        from_attributes = True


class FinancialSummaryOutput(BaseModel):
    """Income and expense totals for a period."""

    period_start: date
    period_end: date
    income_cents: int
    expense_cents: int
    balance_cents: int


# =============================================================================
# Misc
# =============================================================================


class HealthResponse(BaseModel):
    """Liveness report."""

    status: Literal["ok", "degraded"]
    service: str
    dependencies: dict[str, str] = {}


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None
