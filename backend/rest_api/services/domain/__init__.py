"""
Domain Services - Application Layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access and hand events to notifiers.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import OrderService

    # In router
    service = OrderService(db)
    result = service.create_order(restaurant_id, draft, lines)
"""

from .tenant_guard import TenantGuard
from .code_generator import OrderCodeGenerator, get_code_generator, format_order_code
from .catalog_lookup import CatalogLookup
from .table_coordinator import TableCoordinator
from .payment_recorder import PaymentRecorder
from .notifications import (
    OrderNotifier,
    RedisOrderNotifier,
    NullOrderNotifier,
    get_order_notifier,
    shutdown_order_notifier,
)
from .order_service import OrderService, OrderDraft, OrderLine, OrderResult
from .finance_service import FinanceService, FinancialSummary

__all__ = [
    "TenantGuard",
    "OrderCodeGenerator",
    "get_code_generator",
    "format_order_code",
    "CatalogLookup",
    "TableCoordinator",
    "PaymentRecorder",
    "OrderNotifier",
    "RedisOrderNotifier",
    "NullOrderNotifier",
    "get_order_notifier",
    "shutdown_order_notifier",
    "OrderService",
    "OrderDraft",
    "OrderLine",
    "OrderResult",
    "FinanceService",
    "FinancialSummary",
]
