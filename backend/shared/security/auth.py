"""
Authentication and authorization utilities.
Handles JWT bearer tokens for restaurant staff and platform administrators.

Token claims:
    sub: user id (string)
    restaurant_id: home restaurant of the user (None for superadmins)
    user_type: superadmin | admin | manager | staff
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Depends, HTTPException, Header, Request, status

from shared.config.constants import UserType
from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import get_logger, audit_auth_event, audit_tenant_override
from shared.utils.exceptions import InsufficientRoleError, NotFoundError

logger = get_logger(__name__)


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, restaurant_id, user_type).
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        HTTPException: If token is invalid, expired, or missing required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        audit_auth_event("TOKEN_EXPIRED", success=False)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        logger.warning("JWT validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject claim",
        )

    if payload.get("user_type") not in UserType.ALL:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: malformed user_type claim",
        )

    # Everyone except superadmins is bound to exactly one restaurant
    if payload["user_type"] != UserType.SUPERADMIN and not payload.get("restaurant_id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing restaurant_id claim",
        )

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        HTTPException: If header is missing or malformed.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Returns:
        Dict with: sub (user_id), restaurant_id, user_type
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


def require_user_types(ctx: dict[str, Any], allowed: list[str] | frozenset[str]) -> None:
    """
    Verify that the user is one of the allowed user types.
    Superadmins always pass.

    Raises:
        InsufficientRoleError: If user lacks the required type (403).
    """
    user_type = ctx.get("user_type")
    if user_type == UserType.SUPERADMIN:
        return
    if user_type not in allowed:
        audit_auth_event(
            "ROLE_DENIED",
            user_id=ctx.get("sub"),
            success=False,
            reason=f"user_type {user_type} not in {sorted(allowed)}",
        )
        raise InsufficientRoleError(sorted(allowed), user_id=ctx.get("sub"), user_type=user_type)


# =============================================================================
# Restaurant scope
# =============================================================================


@dataclass(frozen=True)
class RestaurantScope:
    """Resolved tenant for a request plus the acting user."""

    restaurant_id: str
    user_id: str
    user_type: str
    is_override: bool = False


def restaurant_scope(
    restaurant_id: str,
    request: Request,
    ctx: dict[str, Any] = Depends(current_user_context),
) -> RestaurantScope:
    """
    FastAPI dependency resolving the restaurant addressed by the path.

    Regular users may only address their own restaurant. Any other id is
    answered with 404 so the existence of other restaurants is not revealed.
    Superadmins may address any restaurant; that override is audit-logged.
    The resolved id is still passed to every service call, so all reads and
    writes stay filtered by it.
    """
    user_id = str(ctx["sub"])
    user_type = ctx["user_type"]
    home_restaurant_id = ctx.get("restaurant_id")

    if home_restaurant_id == restaurant_id:
        return RestaurantScope(restaurant_id, user_id, user_type)

    if user_type == UserType.SUPERADMIN:
        audit_tenant_override(
            user_id=user_id,
            home_restaurant_id=home_restaurant_id,
            target_restaurant_id=restaurant_id,
            path=request.url.path,
        )
        return RestaurantScope(restaurant_id, user_id, user_type, is_override=True)

    audit_auth_event(
        "TENANT_DENIED",
        user_id=user_id,
        success=False,
        reason="restaurant outside token scope",
        requested_restaurant_id=restaurant_id,
    )
    raise NotFoundError("Restaurant", requested_restaurant_id=restaurant_id)


def restaurant_scope_for(allowed: frozenset[str]):
    """
    Build a dependency that resolves the restaurant scope and also checks
    the user type.

    Usage:
        @router.get("/finance/transactions")
        def list_transactions(
            scope: RestaurantScope = Depends(restaurant_scope_for(MANAGEMENT_USER_TYPES)),
        ): ...
    """

    def dependency(
        scope: RestaurantScope = Depends(restaurant_scope),
        ctx: dict[str, Any] = Depends(current_user_context),
    ) -> RestaurantScope:
        require_user_types(ctx, allowed)
        return scope

    return dependency
