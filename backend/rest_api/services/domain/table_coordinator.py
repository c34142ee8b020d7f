"""
Table Coordinator.

Owns table occupancy: {status, current_order_id}. The rule it maintains is
that current_order_id is set exactly when the table is occupied by a
non-terminal order. Order existence is checked by the order service, not
here.
"""

from sqlalchemy.orm import Session

from shared.config.constants import TableStatus, validate_table_status
from shared.config.logging import tables_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import TableUnavailableError, ValidationError
from rest_api.models import Table
from rest_api.repositories import TableRepository
from .tenant_guard import TenantGuard


class TableCoordinator:
    """
    Tenant-scoped table state changes.

    update_status() and set_current_order() commit on their own and are
    idempotent. occupy() and release() change both fields in one commit.
    mark_occupied() does the same on a locked row without committing, so
    order creation can store the order and occupy its table together.
    """

    def __init__(self, db: Session, guard: TenantGuard | None = None):
        self._db = db
        self._tables = TableRepository(db)
        self._guard = guard or TenantGuard(db)

    def get_table(self, restaurant_id: str, table_id: str) -> Table:
        return self._guard.load(self._tables, "Table", table_id, restaurant_id)

    def check_available(self, restaurant_id: str, table_id: str) -> Table:
        """
        Lock the table row and make sure it can take a new order.

        The lock lasts until the caller's transaction ends.

        Raises:
            NotFoundError: Unknown table for this restaurant
            TableUnavailableError: Table is occupied
        """
        table = self._guard.load(self._tables, "Table", table_id, restaurant_id, lock=True)
        if table.status not in TableStatus.AVAILABLE:
            status = table.status
            self._db.rollback()  # release the row lock
            raise TableUnavailableError(table_id, status, restaurant_id=restaurant_id)
        return table

    def update_status(self, restaurant_id: str, table_id: str, status: str) -> Table:
        if not validate_table_status(status):
            raise ValidationError(f"Invalid table status '{status}'", status=status)

        table = self._guard.load(self._tables, "Table", table_id, restaurant_id, lock=True)
        if table.status != status:
            table.status = status
            safe_commit(self._db)
            logger.info("Table status updated", table_id=table_id, status=status)
        return table

    def set_current_order(self, restaurant_id: str, table_id: str, order_id: str | None) -> Table:
        table = self._guard.load(self._tables, "Table", table_id, restaurant_id, lock=True)
        if table.current_order_id != order_id:
            table.current_order_id = order_id
            safe_commit(self._db)
            logger.info("Table order link updated", table_id=table_id, order_id=order_id)
        return table

    def occupy(self, restaurant_id: str, table_id: str, order_id: str) -> Table:
        """
        Mark the table occupied by an order.

        Raises:
            TableUnavailableError: Another order took the table in the meantime
        """
        table = self._guard.load(self._tables, "Table", table_id, restaurant_id, lock=True)
        self.mark_occupied(table, order_id)
        safe_commit(self._db)

        logger.info(
            "Table occupied",
            restaurant_id=restaurant_id,
            table_id=table_id,
            order_id=order_id,
        )
        return table

    def mark_occupied(self, table: Table, order_id: str) -> None:
        """
        Occupy an already locked table inside the caller's transaction.

        Nothing is committed here.

        Raises:
            TableUnavailableError: The table belongs to another order
        """
        if table.status == TableStatus.OCCUPIED and table.current_order_id not in (None, order_id):
            raise TableUnavailableError(
                table.id,
                table.status,
                restaurant_id=table.restaurant_id,
                current_order_id=table.current_order_id,
                order_id=order_id,
            )

        table.status = TableStatus.OCCUPIED
        table.current_order_id = order_id

    def release(self, restaurant_id: str, table_id: str, order_id: str) -> Table:
        """
        Free the table held by an order.

        A table already linked to a different order is left alone.
        """
        table = self._guard.load(self._tables, "Table", table_id, restaurant_id, lock=True)

        if table.current_order_id not in (None, order_id):
            logger.warning(
                "Table linked to another order, not released",
                restaurant_id=restaurant_id,
                table_id=table_id,
                order_id=order_id,
                current_order_id=table.current_order_id,
            )
            return table

        if table.status == TableStatus.FREE and table.current_order_id is None:
            return table

        table.status = TableStatus.FREE
        table.current_order_id = None
        safe_commit(self._db)

        logger.info(
            "Table released",
            restaurant_id=restaurant_id,
            table_id=table_id,
            order_id=order_id,
        )
        return table
