"""
SQLAlchemy ORM Models Package.

- base: Base class and TimestampMixin
- restaurant: Restaurant (tenant)
- catalog: ProductCategory, Product
- table: Table
- order: Order, OrderItem
- finance: FinancialTransaction
"""

from .base import Base, TimestampMixin, new_uuid, utcnow
from .restaurant import Restaurant
from .catalog import ProductCategory, Product
from .table import Table
from .order import Order, OrderItem
from .finance import FinancialTransaction

__all__ = [
    "Base",
    "TimestampMixin",
    "new_uuid",
    "utcnow",
    "Restaurant",
    "ProductCategory",
    "Product",
    "Table",
    "Order",
    "OrderItem",
    "FinancialTransaction",
]
