"""
Repository Pattern implementation.
Centralizes restaurant-scoped data access with guaranteed eager loading.

Usage:
    from rest_api.repositories import OrderRepository, OrderFilters

    repo = OrderRepository(db)
    orders = repo.find_all(restaurant_id, OrderFilters(status="pending"))
    order = repo.find_by_id(order_id, restaurant_id)
"""

from .base import TenantRepository, RepositoryFilters
from .order import OrderRepository, OrderFilters
from .table import TableRepository, TableFilters
from .product import ProductRepository, ProductFilters
from .finance import (
    FinancialTransactionRepository,
    TransactionFilters,
)

__all__ = [
    # Base
    "TenantRepository",
    "RepositoryFilters",
    # Order
    "OrderRepository",
    "OrderFilters",
    # Table
    "TableRepository",
    "TableFilters",
    # Product
    "ProductRepository",
    "ProductFilters",
    # Finance
    "FinancialTransactionRepository",
    "TransactionFilters",
]
