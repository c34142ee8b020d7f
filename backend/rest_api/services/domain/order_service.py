"""
Order Domain Service.

Creates orders, mutates their items and drives them through the status
state machine:

    pending -> preparing -> ready -> delivered -> paid

Any non-terminal status may also move to any other status, including
straight to paid; cancelled is reachable from every non-terminal status.
paid and cancelled are terminal.

Consistency policy:
- Order, items, total and the occupied table are written in one
  transaction.
- Item changes lock the order row and recompute the total from the item
  rows inside the same transaction.
- Entering paid writes status, paid_at and the sales entry in one
  transaction. Releasing the table afterwards is best-effort; a failed
  release comes back as a warning next to the successful result.
- Failing checks after a row lock roll back before raising.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import (
    Limits,
    OrderStatus,
    OrderType,
    validate_order_status,
    validate_order_type,
)
from shared.config.logging import orders_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    AppException,
    DatabaseError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from shared.utils.periods import day_bounds, local_today
from shared.utils.validators import sanitize_text, validate_quantity
from rest_api.models import Order, OrderItem, utcnow
from rest_api.repositories import OrderFilters, OrderRepository
from .catalog_lookup import CatalogLookup
from .code_generator import OrderCodeGenerator, get_code_generator
from .notifications import OrderNotifier, describe_customer, get_order_notifier
from .payment_recorder import PaymentRecorder
from .table_coordinator import TableCoordinator
from .tenant_guard import TenantGuard


@dataclass
class OrderLine:
    """One requested product line."""

    product_id: str
    quantity: int
    notes: str | None = None


@dataclass
class OrderDraft:
    """Order header supplied by the caller."""

    type: str = OrderType.IN_HOUSE
    table_id: str | None = None
    user_id: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    delivery_address: str | None = None
    notes: str | None = None


@dataclass
class OrderResult:
    """Order plus warnings from best-effort follow-up steps."""

    order: Order
    warnings: list[str] = field(default_factory=list)


class OrderService:
    """
    Domain service for Order operations.

    Every public method takes the restaurant_id explicitly and never reads
    or writes rows of another restaurant.
    """

    def __init__(
        self,
        db: Session,
        code_generator: OrderCodeGenerator | None = None,
        notifier: OrderNotifier | None = None,
    ):
        self._db = db
        self._orders = OrderRepository(db)
        self._guard = TenantGuard(db)
        self._catalog = CatalogLookup(db, self._guard)
        self._tables = TableCoordinator(db, self._guard)
        self._payments = PaymentRecorder(db, self._guard)
        self._codes = code_generator or get_code_generator()
        self._notifier = notifier

    @property
    def notifier(self) -> OrderNotifier:
        if self._notifier is None:
            self._notifier = get_order_notifier()
        return self._notifier

    # =========================================================================
    # Creation
    # =========================================================================

    def create_order(
        self,
        restaurant_id: str,
        draft: OrderDraft,
        lines: Sequence[OrderLine],
    ) -> OrderResult:
        """
        Create an order with its items.

        An in-house order occupies its table in the same commit that stores
        the order. Delivery drafts go through create_delivery_order().

        Raises:
            ValidationError: Empty lines, bad quantity, table/type mismatch
            NotFoundError: Unknown table
            ProductNotFoundError: Unknown product
            OutOfStockError: Product not in stock
            TableUnavailableError: Table is occupied
            DatabaseError: The order could not be stored
        """
        if not validate_order_type(draft.type):
            raise ValidationError(f"Invalid order type '{draft.type}'", order_type=draft.type)

        if draft.type == OrderType.DELIVERY:
            return self.create_delivery_order(restaurant_id, draft, lines)

        return self._create(restaurant_id, draft, lines)

    def create_delivery_order(
        self,
        restaurant_id: str,
        draft: OrderDraft,
        lines: Sequence[OrderLine],
    ) -> OrderResult:
        """
        Create a delivery order and hand it to the notifier.

        Delivery orders are never bound to a table and need a customer
        name, phone and delivery address.
        """
        missing = [
            name
            for name in ("customer_name", "customer_phone", "delivery_address")
            if not (getattr(draft, name) or "").strip()
        ]
        if missing:
            raise ValidationError(
                f"Delivery orders require: {', '.join(missing)}",
                restaurant_id=restaurant_id,
                missing=missing,
            )
        if draft.table_id:
            raise ValidationError(
                "delivery orders cannot be bound to a table",
                restaurant_id=restaurant_id,
                table_id=draft.table_id,
            )

        result = self._create(restaurant_id, replace(draft, type=OrderType.DELIVERY), lines)

        warning = self._notify(result.order)
        if warning:
            result.warnings.append(warning)

        logger.info(
            "Delivery order created",
            restaurant_id=restaurant_id,
            order_id=result.order.id,
            **describe_customer(result.order),
        )
        return result

    def _create(
        self,
        restaurant_id: str,
        draft: OrderDraft,
        lines: Sequence[OrderLine],
    ) -> OrderResult:
        lines = self._validate_lines(lines)

        if draft.type == OrderType.IN_HOUSE and not draft.table_id:
            raise ValidationError("In-house orders require a table", restaurant_id=restaurant_id)
        if draft.type != OrderType.IN_HOUSE and draft.table_id:
            raise ValidationError(
                f"{draft.type} orders cannot be bound to a table",
                restaurant_id=restaurant_id,
                table_id=draft.table_id,
            )

        table = None
        if draft.table_id:
            table = self._tables.check_available(restaurant_id, draft.table_id)

        try:
            products = self._catalog.get_available_products(
                restaurant_id, [line.product_id for line in lines]
            )
        except AppException:
            self._db.rollback()  # release the table lock
            raise

        order = Order(
            restaurant_id=restaurant_id,
            table_id=draft.table_id,
            user_id=draft.user_id,
            code=self._codes.generate_code(restaurant_id),
            type=draft.type,
            status=OrderStatus.PENDING,
            notes=sanitize_text(draft.notes),
        )
        if draft.type in OrderType.WITH_CUSTOMER:
            order.customer_name = sanitize_text(draft.customer_name, Limits.MAX_NAME_LENGTH)
            order.customer_phone = sanitize_text(draft.customer_phone, Limits.MAX_PHONE_LENGTH)
            order.customer_email = sanitize_text(draft.customer_email)
        if draft.type == OrderType.DELIVERY:
            order.delivery_address = sanitize_text(draft.delivery_address, Limits.MAX_ADDRESS_LENGTH)

        for line in lines:
            order.items.append(
                OrderItem(
                    restaurant_id=restaurant_id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    # Snapshot: later catalog price changes do not apply
                    price_cents=products[line.product_id].price_cents,
                    notes=line.notes,
                )
            )
        order.total_amount_cents = sum(item.subtotal_cents for item in order.items)

        try:
            self._orders.add(order)
            if table is not None:
                self._tables.mark_occupied(table, order.id)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("order creation", restaurant_id=restaurant_id, error=str(e)) from e
        except AppException:
            self._db.rollback()
            raise

        logger.info(
            "Order created",
            restaurant_id=restaurant_id,
            order_id=order.id,
            code=order.code,
            type=order.type,
            table_id=order.table_id,
            total_amount_cents=order.total_amount_cents,
            items=len(lines),
        )
        return OrderResult(order)

    # =========================================================================
    # Items
    # =========================================================================

    def add_item(self, restaurant_id: str, order_id: str, line: OrderLine) -> OrderItem:
        """
        Add a product line to a non-terminal order.

        Raises:
            NotFoundError: Unknown order
            InvalidTransitionError: Order is paid or cancelled
            ProductNotFoundError / OutOfStockError: Product problems
        """
        line = self._validate_line(line)
        order = self._guard.load(self._orders, "Order", order_id, restaurant_id, lock=True)
        self._ensure_mutable(order, "add items to")

        try:
            product = self._catalog.get_available_product(restaurant_id, line.product_id)
        except AppException:
            self._db.rollback()  # release the row lock
            raise

        item = OrderItem(
            restaurant_id=restaurant_id,
            order_id=order.id,
            product_id=product.id,
            quantity=line.quantity,
            price_cents=product.price_cents,
            notes=line.notes,
        )

        try:
            self._orders.add_item(item)
            order.total_amount_cents = self._orders.sum_item_totals(order.id, restaurant_id)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("adding order item", order_id=order_id, error=str(e)) from e

        logger.info(
            "Order item added",
            restaurant_id=restaurant_id,
            order_id=order.id,
            item_id=item.id,
            total_amount_cents=order.total_amount_cents,
        )
        return item

    def remove_item(self, restaurant_id: str, order_id: str, item_id: str) -> Order:
        """
        Remove a line from a non-terminal order.

        Raises:
            NotFoundError: Unknown order, or item not part of this order
            InvalidTransitionError: Order is paid or cancelled
        """
        order = self._guard.load(self._orders, "Order", order_id, restaurant_id, lock=True)
        self._ensure_mutable(order, "remove items from")

        item = self._orders.find_item(item_id, order.id, restaurant_id)
        if item is None:
            self._db.rollback()  # release the row lock
            raise NotFoundError("Order item", item_id, order_id=order_id, restaurant_id=restaurant_id)

        try:
            self._orders.delete_item(item)
            order.total_amount_cents = self._orders.sum_item_totals(order.id, restaurant_id)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("removing order item", order_id=order_id, error=str(e)) from e

        logger.info(
            "Order item removed",
            restaurant_id=restaurant_id,
            order_id=order.id,
            item_id=item_id,
            total_amount_cents=order.total_amount_cents,
        )
        return order

    # =========================================================================
    # Status
    # =========================================================================

    def update_status(
        self,
        restaurant_id: str,
        order_id: str,
        new_status: str,
        user_id: str | None = None,
        payment_method: str | None = None,
    ) -> OrderResult:
        """
        Move an order to another status.

        Setting the status an order already has is a no-op. Entering paid
        stamps paid_at and books the sale in the same commit. Entering paid
        or cancelled then frees the table (best-effort).

        Raises:
            ValidationError: Unknown status
            NotFoundError: Unknown order
            InvalidTransitionError: Order is paid or cancelled
            DatabaseError: The status change could not be stored
        """
        if not validate_order_status(new_status):
            raise ValidationError(f"Invalid order status '{new_status}'", status=new_status)

        order = self._guard.load(self._orders, "Order", order_id, restaurant_id, lock=True)
        current = order.status

        if current == new_status:
            self._db.commit()  # release the row lock
            return OrderResult(order)

        if current in OrderStatus.TERMINAL:
            self._db.rollback()
            raise InvalidTransitionError(
                "Order", current, to_status=new_status, order_id=order_id, restaurant_id=restaurant_id
            )

        now = utcnow()
        try:
            order.status = new_status
            if new_status == OrderStatus.DELIVERED and order.delivered_at is None:
                order.delivered_at = now
            if new_status == OrderStatus.PAID:
                order.paid_at = now
                self._payments.record(order, user_id, payment_method, paid_at=now)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError(
                f"status change to {new_status}", order_id=order_id, error=str(e)
            ) from e

        logger.info(
            "Order status updated",
            restaurant_id=restaurant_id,
            order_id=order.id,
            from_status=current,
            to_status=new_status,
        )

        warnings: list[str] = []
        if new_status in OrderStatus.TERMINAL and order.table_id:
            warning = self._release_table(restaurant_id, order)
            if warning:
                warnings.append(warning)

        return OrderResult(order, warnings)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_order(self, restaurant_id: str, order_id: str) -> Order:
        return self._guard.load(self._orders, "Order", order_id, restaurant_id)

    def list_orders(
        self,
        restaurant_id: str,
        table_id: str | None = None,
        status: str | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Sequence[Order]:
        if status is not None and not validate_order_status(status):
            raise ValidationError(f"Invalid order status '{status}'", status=status)
        filters = OrderFilters(table_id=table_id, status=status, limit=limit, offset=offset)
        return self._orders.find_all(restaurant_id, filters)

    def get_active_order_by_table(self, restaurant_id: str, table_id: str) -> Order:
        """
        Raises:
            NotFoundError: Unknown table, or no active order on it
        """
        self._tables.get_table(restaurant_id, table_id)
        order = self._orders.find_active_by_table(table_id, restaurant_id)
        if order is None:
            raise NotFoundError("Active order for table", table_id, restaurant_id=restaurant_id)
        return order

    def find_orders_by_date_and_type(
        self,
        restaurant_id: str,
        day: date,
        order_type: str,
    ) -> Sequence[Order]:
        if not validate_order_type(order_type):
            raise ValidationError(f"Invalid order type '{order_type}'", order_type=order_type)
        start, end = day_bounds(day)
        return self._orders.find_by_date_and_type(restaurant_id, start, end, order_type)

    def find_orders_by_date_range_and_type(
        self,
        restaurant_id: str,
        start_day: date,
        end_day: date | None,
        order_type: str,
    ) -> Sequence[Order]:
        """
        Orders of one type created from start_day through end_day, both
        inclusive. end_day defaults to today.

        Raises:
            ValidationError: Unknown type, or start_day after end_day
        """
        if not validate_order_type(order_type):
            raise ValidationError(f"Invalid order type '{order_type}'", order_type=order_type)

        end_day = end_day or local_today()
        if start_day > end_day:
            raise ValidationError(
                "start_date must not be after end_date",
                start_date=start_day.isoformat(),
                end_date=end_day.isoformat(),
            )

        start, _ = day_bounds(start_day)
        _, end = day_bounds(end_day)
        return self._orders.find_by_date_and_type(restaurant_id, start, end, order_type)

    def find_delivery_orders_by_date(
        self,
        restaurant_id: str,
        day: date | None = None,
    ) -> Sequence[Order]:
        """Delivery orders of a day, today when no day is given."""
        start, end = day_bounds(day or local_today())
        return self._orders.find_delivery_by_date(restaurant_id, start, end)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _validate_line(self, line: OrderLine) -> OrderLine:
        if not line.product_id:
            raise ValidationError("product_id is required", field="product_id")
        try:
            validate_quantity(line.quantity)
        except ValueError as e:
            raise ValidationError(str(e), field="quantity", value=line.quantity) from e
        line.notes = sanitize_text(line.notes)
        return line

    def _validate_lines(self, lines: Sequence[OrderLine]) -> list[OrderLine]:
        if not lines:
            raise ValidationError("An order needs at least one item", field="items")
        if len(lines) > Limits.MAX_ORDER_LINES:
            raise ValidationError(
                f"An order can have at most {Limits.MAX_ORDER_LINES} lines", field="items"
            )
        return [self._validate_line(line) for line in lines]

    def _ensure_mutable(self, order: Order, action: str) -> None:
        status, order_id = order.status, order.id
        if status in OrderStatus.TERMINAL:
            self._db.rollback()  # release the row lock
            raise InvalidTransitionError("Order", status, action=action, order_id=order_id)

    def _release_table(self, restaurant_id: str, order: Order) -> str | None:
        """Free the order's table. Returns a warning instead of raising."""
        try:
            self._tables.release(restaurant_id, order.table_id, order.id)
            return None
        except (SQLAlchemyError, AppException) as e:
            self._db.rollback()
            logger.warning(
                "Order status stored but table could not be released",
                restaurant_id=restaurant_id,
                order_id=order.id,
                table_id=order.table_id,
                status=order.status,
                error=str(e),
            )
            return f"Table {order.table_id} could not be released"

    def _notify(self, order: Order) -> str | None:
        """Hand the order to the notifier; never raises."""
        try:
            self.notifier.publish(order)
            return None
        except Exception as e:
            logger.error(
                "Order notification failed",
                restaurant_id=order.restaurant_id,
                order_id=order.id,
                error=str(e),
            )
            return "Delivery notification could not be sent"
