"""
Centralized HTTP exceptions for consistent error handling.

Domain services raise these directly. The API renders them as
{"detail": ..., "code": ...} with the status code they carry; TenantMismatchError
shares the code and detail format of NotFoundError.

Usage:
    from shared.utils.exceptions import NotFoundError, OutOfStockError

    raise NotFoundError("Order", order_id, restaurant_id=restaurant_id)
    raise OutOfStockError(product.id, product.name)
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    code: str = "error"

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Order", order_id)
        raise NotFoundError("Table", table_id, restaurant_id=restaurant_id)
    """

    code = "not_found"

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        self.entity = entity
        self.entity_id = entity_id

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class TenantMismatchError(NotFoundError):
    """
    The entity exists but belongs to another restaurant.

    Renders exactly like NotFoundError so callers cannot discover rows
    owned by other tenants. Only the server log tells the two apart.
    """

    def __init__(self, entity: str, entity_id: int | str, **log_context: Any):
        super().__init__(entity, entity_id, tenant_mismatch=True, **log_context)


class ProductNotFoundError(NotFoundError):
    """Product absent from the restaurant's catalog."""

    def __init__(self, product_id: str, **log_context: Any):
        super().__init__("Product", product_id, **log_context)


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("update order status")
    """

    code = "forbidden"

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"Not allowed to {action}"
        else:
            detail = "Access denied"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            action=action,
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    """User doesn't have the required user type."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        roles_str = ", ".join(required_roles)
        super().__init__(
            f"perform this action (requires one of: {roles_str})",
            required_roles=required_roles,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Quantity must be at least 1", field="quantity", value=0)
    """

    code = "validation_error"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Table already has an active order")
    """

    code = "conflict"

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class OutOfStockError(ConflictError):
    """Product exists but is currently unavailable."""

    code = "out_of_stock"

    def __init__(self, product_id: str, product_name: str | None = None, **log_context: Any):
        label = f"'{product_name}'" if product_name else product_id
        self.product_id = product_id
        super().__init__(
            f"Product {label} is out of stock",
            product_id=product_id,
            **log_context,
        )


class TableUnavailableError(ConflictError):
    """Table cannot take a new order in its current status."""

    code = "table_unavailable"

    def __init__(self, table_id: str, current_status: str, **log_context: Any):
        self.table_id = table_id
        self.current_status = current_status
        super().__init__(
            f"Table {table_id} is {current_status} and cannot take a new order",
            table_id=table_id,
            current_status=current_status,
            **log_context,
        )


class InvalidTransitionError(ConflictError):
    """
    Operation not allowed in the entity's current status.

    Usage:
        raise InvalidTransitionError("Order", "paid", to_status="pending")
        raise InvalidTransitionError("Order", "cancelled", action="add items")
    """

    code = "invalid_transition"

    def __init__(
        self,
        entity: str,
        from_status: str,
        to_status: str | None = None,
        action: str | None = None,
        **log_context: Any,
    ):
        self.from_status = from_status
        self.to_status = to_status
        if to_status is not None:
            detail = f"Invalid transition from '{from_status}' to '{to_status}' for {entity}"
        else:
            detail = f"Cannot {action or 'modify'} {entity} in status '{from_status}'"
        super().__init__(
            detail,
            entity=entity,
            from_status=from_status,
            to_status=to_status,
            action=action,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to build order snapshot", order_id=order.id)
    """

    code = "internal_error"

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    code = "database_error"

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
