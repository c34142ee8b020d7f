"""
Restaurant-scoped repository base.

Every query built here carries ``restaurant_id = :rid``. find_any_by_id() is
the single unscoped lookup; the tenant guard uses it to tell an absent row
from a row owned by another restaurant, and nothing else should call it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence

from sqlalchemy.orm import Session
from sqlalchemy import Select, select, func

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Paging shared by all filter sets; subclasses add entity columns."""

    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0

    def __post_init__(self):
        self.limit = max(1, min(self.limit, Limits.MAX_PAGE_SIZE))
        self.offset = max(0, self.offset)


class TenantRepository(ABC, Generic[ModelT]):
    """
    Data access for one model that has ``id`` and ``restaurant_id`` columns.

    Subclasses provide the model, a base query (ordering, eager loads) and
    optionally their own filter handling. Writes are flushed, never
    committed; the service that owns the unit of work commits.
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]: ...

    @abstractmethod
    def _base_query(self, restaurant_id: str) -> Select: ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        return query

    def _scoped(self, restaurant_id: str, *criteria) -> Select:
        return select(self.model).where(self.model.restaurant_id == restaurant_id, *criteria)

    # -- reads ---------------------------------------------------------------

    def find_all(
        self,
        restaurant_id: str,
        filters: RepositoryFilters | None = None,
    ) -> Sequence[ModelT]:
        filters = filters or RepositoryFilters()
        query = self._apply_filters(self._base_query(restaurant_id), filters)
        query = query.offset(filters.offset).limit(filters.limit)
        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: str, restaurant_id: str) -> ModelT | None:
        query = self._base_query(restaurant_id).where(self.model.id == entity_id)
        return self._db.execute(query).scalars().unique().one_or_none()

    def find_by_ids(self, entity_ids: list[str], restaurant_id: str) -> Sequence[ModelT]:
        """Rows among ``entity_ids`` owned by the restaurant; others are silently absent."""
        if not entity_ids:
            return []
        query = self._base_query(restaurant_id).where(self.model.id.in_(set(entity_ids)))
        return self._db.execute(query).scalars().unique().all()

    def find_any_by_id(self, entity_id: str) -> ModelT | None:
        """Unscoped primary-key lookup. Reserved for the tenant guard."""
        return self._db.get(self.model, entity_id)

    def count(self, restaurant_id: str) -> int:
        query = select(func.count()).select_from(self._scoped(restaurant_id).subquery())
        return self._db.scalar(query) or 0

    def exists(self, entity_id: str, restaurant_id: str) -> bool:
        query = select(self._scoped(restaurant_id, self.model.id == entity_id).exists())
        return bool(self._db.scalar(query))

    # -- locking and writes --------------------------------------------------

    def lock_by_id(self, entity_id: str, restaurant_id: str) -> ModelT | None:
        """
        SELECT ... FOR UPDATE on one row of the restaurant, held until the
        transaction ends. populate_existing overwrites an instance already in
        the identity map with the locked row's values.
        """
        query = (
            self._scoped(restaurant_id, self.model.id == entity_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self._db.scalar(query)

    def add(self, entity: ModelT) -> ModelT:
        """Stage and flush so server defaults and ids are populated."""
        self._db.add(entity)
        self._db.flush()
        return entity
