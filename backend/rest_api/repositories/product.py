"""
Product Repository - Read access to the restaurant catalog.
"""

from dataclasses import dataclass

from sqlalchemy import Select, select

from rest_api.models import Product
from .base import TenantRepository, RepositoryFilters


@dataclass
class ProductFilters(RepositoryFilters):
    """Filters specific to products."""

    category_id: str | None = None
    in_stock: bool | None = None


class ProductRepository(TenantRepository[Product]):
    """Repository for Product entities."""

    @property
    def model(self) -> type[Product]:
        return Product

    def _base_query(self, restaurant_id: str) -> Select:
        return (
            select(Product)
            .where(Product.restaurant_id == restaurant_id)
            .order_by(Product.name)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, ProductFilters):
            return query
        if filters.category_id:
            query = query.where(Product.category_id == filters.category_id)
        if filters.in_stock is not None:
            query = query.where(Product.in_stock.is_(filters.in_stock))
        return query