"""
Security module: JWT authentication and restaurant scoping.
"""

from shared.security.auth import (
    sign_jwt,
    verify_jwt,
    get_bearer_token,
    current_user_context,
    require_user_types,
    restaurant_scope,
    restaurant_scope_for,
    RestaurantScope,
)

__all__ = [
    "sign_jwt",
    "verify_jwt",
    "get_bearer_token",
    "current_user_context",
    "require_user_types",
    "restaurant_scope",
    "restaurant_scope_for",
    "RestaurantScope",
]
