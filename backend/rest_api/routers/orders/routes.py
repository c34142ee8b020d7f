"""
Order endpoints.

Thin controllers: each route resolves the restaurant scope, hands the
request to OrderService and serializes the result. Domain errors raised by
the service are AppExceptions and map to HTTP statuses on their own.

All routes are prefixed with /api/restaurants/{restaurant_id}
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import RESTAURANT_USER_TYPES
from shared.infrastructure.db import get_db
from shared.security.auth import RestaurantScope, restaurant_scope_for
from shared.utils.schemas import (
    CreateDeliveryOrderRequest,
    CreateOrderRequest,
    ErrorResponse,
    OrderLineInput,
    OrderOutput,
    OrderResultResponse,
    OrderStatus,
    OrderType,
    UpdateOrderStatusRequest,
)
from rest_api.routers._common import Pagination, get_pagination
from rest_api.services.domain import OrderDraft, OrderLine, OrderResult, OrderService


router = APIRouter(
    prefix="/api/restaurants/{restaurant_id}",
    tags=["orders"],
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)

staff_scope = restaurant_scope_for(RESTAURANT_USER_TYPES)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


def _lines(items: list[OrderLineInput]) -> list[OrderLine]:
    return [OrderLine(i.product_id, i.quantity, i.notes) for i in items]


def _result(result: OrderResult) -> OrderResultResponse:
    return OrderResultResponse(
        order=OrderOutput.model_validate(result.order),
        warnings=result.warnings,
    )


# =============================================================================
# Creation
# =============================================================================


@router.post(
    "/orders",
    response_model=OrderResultResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    body: CreateOrderRequest,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderResultResponse:
    """
    Create an in-house or takeaway order.

    In-house orders need a free or reserved table, which becomes occupied.
    Prices are copied from the catalog at this moment.
    """
    draft = OrderDraft(
        type=body.type,
        table_id=body.table_id,
        user_id=scope.user_id,
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        customer_email=body.customer_email,
        notes=body.notes,
    )
    return _result(service.create_order(scope.restaurant_id, draft, _lines(body.items)))


@router.post(
    "/orders/delivery",
    response_model=OrderResultResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_delivery_order(
    body: CreateDeliveryOrderRequest,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderResultResponse:
    """Create a delivery order and announce it to the restaurant's dashboards."""
    draft = OrderDraft(
        user_id=scope.user_id,
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        customer_email=body.customer_email,
        delivery_address=body.delivery_address,
        notes=body.notes,
    )
    return _result(
        service.create_delivery_order(scope.restaurant_id, draft, _lines(body.items))
    )


# =============================================================================
# Queries
# =============================================================================


@router.get("/orders", response_model=list[OrderOutput])
def list_orders(
    table_id: str | None = None,
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """List orders, newest first."""
    orders = service.list_orders(
        scope.restaurant_id,
        table_id=table_id,
        status=order_status,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return [OrderOutput.model_validate(o) for o in orders]


@router.get("/orders/delivery", response_model=list[OrderOutput])
def list_delivery_orders(
    day: date | None = Query(default=None, alias="date"),
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """Delivery orders of a day (today by default)."""
    orders = service.find_delivery_orders_by_date(scope.restaurant_id, day)
    return [OrderOutput.model_validate(o) for o in orders]


@router.get("/orders/by-date", response_model=list[OrderOutput])
def list_orders_by_date(
    day: date = Query(alias="date"),
    order_type: OrderType = Query(alias="type"),
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """Orders of one type created on a given day."""
    orders = service.find_orders_by_date_and_type(scope.restaurant_id, day, order_type)
    return [OrderOutput.model_validate(o) for o in orders]


@router.get("/orders/by-date-range", response_model=list[OrderOutput])
def list_orders_by_date_range(
    start_day: date = Query(alias="start_date"),
    end_day: date | None = Query(default=None, alias="end_date"),
    order_type: OrderType = Query(alias="type"),
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> list[OrderOutput]:
    """Orders of one type created between two days, inclusive. end_date defaults to today."""
    orders = service.find_orders_by_date_range_and_type(
        scope.restaurant_id, start_day, end_day, order_type
    )
    return [OrderOutput.model_validate(o) for o in orders]


@router.get("/orders/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: str,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    return OrderOutput.model_validate(service.get_order(scope.restaurant_id, order_id))


@router.get("/tables/{table_id}/active-order", response_model=OrderOutput)
def get_active_order_by_table(
    table_id: str,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """The non-terminal order currently running on a table."""
    order = service.get_active_order_by_table(scope.restaurant_id, table_id)
    return OrderOutput.model_validate(order)


# =============================================================================
# Mutations
# =============================================================================


@router.patch("/orders/{order_id}/status", response_model=OrderResultResponse)
def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderResultResponse:
    """
    Move an order to another status.

    Paying books the sale; paying or cancelling frees the table.
    Paid and cancelled orders cannot change status (409).
    """
    result = service.update_status(
        scope.restaurant_id,
        order_id,
        body.status,
        user_id=scope.user_id,
        payment_method=body.payment_method,
    )
    return _result(result)


@router.post(
    "/orders/{order_id}/items",
    response_model=OrderOutput,
    status_code=status.HTTP_201_CREATED,
)
def add_order_item(
    order_id: str,
    body: OrderLineInput,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Add a product line; returns the order with its new total."""
    item = service.add_item(
        scope.restaurant_id,
        order_id,
        OrderLine(body.product_id, body.quantity, body.notes),
    )
    return OrderOutput.model_validate(service.get_order(scope.restaurant_id, item.order_id))


@router.delete("/orders/{order_id}/items/{item_id}", response_model=OrderOutput)
def remove_order_item(
    order_id: str,
    item_id: str,
    scope: RestaurantScope = Depends(staff_scope),
    service: OrderService = Depends(get_order_service),
) -> OrderOutput:
    """Remove a product line; returns the order with its new total."""
    order = service.remove_item(scope.restaurant_id, order_id, item_id)
    return OrderOutput.model_validate(order)
