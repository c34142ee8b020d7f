"""
Table Repository - Data access for restaurant tables.
"""

from dataclasses import dataclass

from sqlalchemy import Select, select

from rest_api.models import Table
from .base import TenantRepository, RepositoryFilters


@dataclass
class TableFilters(RepositoryFilters):
    """Filters specific to tables."""

    status: str | None = None


class TableRepository(TenantRepository[Table]):
    """Repository for Table entities, ordered by table number."""

    @property
    def model(self) -> type[Table]:
        return Table

    def _base_query(self, restaurant_id: str) -> Select:
        return (
            select(Table)
            .where(Table.restaurant_id == restaurant_id)
            .order_by(Table.number)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if isinstance(filters, TableFilters) and filters.status:
            query = query.where(Table.status == filters.status)
        return query