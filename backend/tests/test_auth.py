"""
Tests for JWT handling and restaurant scoping.
"""

import pytest
from fastapi import HTTPException

from shared.config.constants import MANAGEMENT_USER_TYPES, UserType
from shared.security.auth import require_user_types, sign_jwt, verify_jwt


class TestJwt:

    def test_sign_and_verify(self):
        token = sign_jwt({"sub": "u1", "restaurant_id": "r1", "user_type": UserType.MANAGER})
        claims = verify_jwt(token)

        assert claims["sub"] == "u1"
        assert claims["restaurant_id"] == "r1"
        assert claims["jti"]

    def test_expired_token(self):
        token = sign_jwt({"sub": "u1", "restaurant_id": "r1", "user_type": UserType.STAFF}, ttl_seconds=-10)
        with pytest.raises(HTTPException) as exc_info:
            verify_jwt(token)
        assert exc_info.value.status_code == 401

    def test_unknown_user_type(self):
        token = sign_jwt({"sub": "u1", "restaurant_id": "r1", "user_type": "owner"})
        with pytest.raises(HTTPException):
            verify_jwt(token)

    def test_superadmin_needs_no_restaurant(self):
        token = sign_jwt({"sub": "root", "user_type": UserType.SUPERADMIN})
        assert verify_jwt(token)["user_type"] == UserType.SUPERADMIN

    def test_regular_user_needs_restaurant(self):
        token = sign_jwt({"sub": "u1", "user_type": UserType.ADMIN})
        with pytest.raises(HTTPException):
            verify_jwt(token)


class TestRequireUserTypes:

    def test_allowed(self):
        require_user_types({"sub": "u1", "user_type": UserType.MANAGER}, MANAGEMENT_USER_TYPES)

    def test_superadmin_always_allowed(self):
        require_user_types({"sub": "root", "user_type": UserType.SUPERADMIN}, MANAGEMENT_USER_TYPES)

    def test_denied(self):
        with pytest.raises(HTTPException) as exc_info:
            require_user_types({"sub": "u1", "user_type": UserType.STAFF}, MANAGEMENT_USER_TYPES)
        assert exc_info.value.status_code == 403
