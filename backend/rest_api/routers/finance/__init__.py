"""
Finance router.
"""

from .routes import router, get_finance_service

__all__ = ["router", "get_finance_service"]
