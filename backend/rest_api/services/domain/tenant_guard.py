"""
Tenant Guard.

Every order, table, product or ledger read goes through a repository query
filtered by restaurant_id. When that query comes back empty the guard
decides which error to raise: NotFoundError if the row does not exist at
all, TenantMismatchError if it belongs to another restaurant. Both render
as the same 404.
"""

from typing import TypeVar

from sqlalchemy.orm import Session

from shared.config.logging import get_logger, audit_tenant_mismatch
from shared.utils.exceptions import NotFoundError, TenantMismatchError
from rest_api.repositories.base import TenantRepository

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


class TenantGuard:
    """Restaurant ownership checks for repository lookups."""

    def __init__(self, db: Session):
        self._db = db

    def load(
        self,
        repo: TenantRepository[ModelT],
        entity: str,
        entity_id: str,
        restaurant_id: str,
        lock: bool = False,
    ) -> ModelT:
        """
        Load one row of the restaurant or raise.

        Args:
            repo: Repository of the entity
            entity: Human-readable entity name for the error
            entity_id: Primary key
            restaurant_id: Restaurant the caller acts for
            lock: Take a row lock (SELECT ... FOR UPDATE)

        Raises:
            NotFoundError: No such row
            TenantMismatchError: Row owned by another restaurant
        """
        if lock:
            found = repo.lock_by_id(entity_id, restaurant_id)
        else:
            found = repo.find_by_id(entity_id, restaurant_id)

        if found is not None:
            return found

        if self.is_foreign(repo, entity, entity_id, restaurant_id):
            raise TenantMismatchError(entity, entity_id, restaurant_id=restaurant_id)
        raise NotFoundError(entity, entity_id, restaurant_id=restaurant_id)

    def is_foreign(
        self,
        repo: TenantRepository[ModelT],
        entity: str,
        entity_id: str,
        restaurant_id: str,
    ) -> bool:
        """
        True when the row exists under a different restaurant.
        Such attempts are written to the security audit log.
        """
        other = repo.find_any_by_id(entity_id)
        if other is None or getattr(other, "restaurant_id", None) == restaurant_id:
            return False

        audit_tenant_mismatch(entity, entity_id, restaurant_id)
        return True

    def ensure_owned(self, instance: object, entity: str, restaurant_id: str) -> None:
        """
        Check an already loaded instance against the restaurant.

        Raises:
            TenantMismatchError: Instance belongs to another restaurant
        """
        owner = getattr(instance, "restaurant_id", None)
        if owner != restaurant_id:
            entity_id = getattr(instance, "id", None)
            audit_tenant_mismatch(entity, str(entity_id), restaurant_id)
            raise TenantMismatchError(entity, entity_id, restaurant_id=restaurant_id)
