"""
Orders router.
"""

from .routes import router, get_order_service

__all__ = ["router", "get_order_service"]
