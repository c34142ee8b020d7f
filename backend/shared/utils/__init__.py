"""
Utilities module: Exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    NotFoundError,
    TenantMismatchError,
    ProductNotFoundError,
    ForbiddenError,
    InsufficientRoleError,
    ValidationError,
    ConflictError,
    OutOfStockError,
    TableUnavailableError,
    InvalidTransitionError,
    DatabaseError,
)
from shared.utils.validators import (
    validate_quantity,
    sanitize_text,
)
from shared.utils.schemas import ErrorResponse

__all__ = [
    # exceptions
    "NotFoundError",
    "TenantMismatchError",
    "ProductNotFoundError",
    "ForbiddenError",
    "InsufficientRoleError",
    "ValidationError",
    "ConflictError",
    "OutOfStockError",
    "TableUnavailableError",
    "InvalidTransitionError",
    "DatabaseError",
    # validators
    "validate_quantity",
    "sanitize_text",
    # schemas
    "ErrorResponse",
]
