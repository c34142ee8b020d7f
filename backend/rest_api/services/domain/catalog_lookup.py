"""
Catalog lookups used while composing orders.
"""

from collections.abc import Iterable

from sqlalchemy.orm import Session

from rest_api.models import Product
from rest_api.repositories import ProductRepository
from shared.utils.exceptions import OutOfStockError, ProductNotFoundError
from .tenant_guard import TenantGuard


class CatalogLookup:
    """Read-only product access, always scoped to one restaurant."""

    def __init__(self, db: Session, guard: TenantGuard | None = None):
        self._db = db
        self._products = ProductRepository(db)
        self._guard = guard or TenantGuard(db)

    def get_product(self, restaurant_id: str, product_id: str) -> Product:
        """
        Raises:
            ProductNotFoundError: Absent, or owned by another restaurant
        """
        product = self._products.find_by_id(product_id, restaurant_id)
        if product is None:
            self._raise_not_found(restaurant_id, product_id)
        return product

    def get_available_product(self, restaurant_id: str, product_id: str) -> Product:
        """
        Raises:
            ProductNotFoundError: Absent, or owned by another restaurant
            OutOfStockError: Product exists but in_stock is false
        """
        product = self.get_product(restaurant_id, product_id)
        self._ensure_in_stock(product, restaurant_id)
        return product

    def get_available_products(
        self,
        restaurant_id: str,
        product_ids: Iterable[str],
    ) -> dict[str, Product]:
        """
        Resolve many products in one query.

        Ids are checked in the given order, so the first offending id
        decides the error.
        """
        product_ids = list(product_ids)
        found = {
            p.id: p for p in self._products.find_by_ids(product_ids, restaurant_id)
        }

        for product_id in product_ids:
            product = found.get(product_id)
            if product is None:
                self._raise_not_found(restaurant_id, product_id)
            self._ensure_in_stock(product, restaurant_id)

        return found

    def _ensure_in_stock(self, product: Product, restaurant_id: str) -> None:
        if not product.in_stock:
            raise OutOfStockError(product.id, product.name, restaurant_id=restaurant_id)

    def _raise_not_found(self, restaurant_id: str, product_id: str) -> None:
        foreign = self._guard.is_foreign(self._products, "Product", product_id, restaurant_id)
        raise ProductNotFoundError(
            product_id,
            restaurant_id=restaurant_id,
            tenant_mismatch=foreign,
        )
