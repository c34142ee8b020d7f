"""
Structured logging for the backend.

Loggers accept keyword context next to the message:

    logger.info("Order created", order_id=order.id, code=order.code)
    logger.warning("Table release failed", order_id=order.id, exc_info=True)

Production renders one JSON object per line; other environments get a
coloured single-line format. Records logged while a request is being
served also carry its request id and the restaurant it addresses.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings


def _request_context(record: logging.LogRecord) -> dict[str, str]:
    context = {}
    for key in ("request_id", "restaurant_id"):
        value = getattr(record, key, None)
        if value:
            context[key] = value
    return context


class StructuredFormatter(logging.Formatter):
    """One JSON document per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **_request_context(record),
        }

        fields = getattr(record, "fields", None)
        if fields:
            payload["fields"] = fields

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        if settings.debug:
            payload["at"] = f"{record.pathname}:{record.lineno} in {record.funcName}"

        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured single-line output for a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        context = _request_context(record)
        tag = ""
        if context:
            short = [context.get("request_id", "-")[:8]]
            if "restaurant_id" in context:
                short.append(f"@{context['restaurant_id'][:8]}")
            tag = f"{self.DIM}[{' '.join(short)}]{self.RESET} "

        line = f"{color}{clock} {record.levelname:<8}{self.RESET} {tag}{record.name}: {record.getMessage()}"

        fields = getattr(record, "fields", None)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """
    Logger whose level methods take arbitrary keyword fields.

    The standard keywords (exc_info, extra, stack_info, stacklevel) keep their
    usual meaning; everything else ends up in ``record.fields``.
    """

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["fields"] = fields or None
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            # skip this frame so records point at the real caller
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """Install the stdout handler on the root logger. Call once at startup."""
    # Imported lazily: the infrastructure package imports settings too
    from shared.infrastructure.correlation import RequestContextFilter

    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(
        StructuredFormatter() if settings.environment == "production" else DevelopmentFormatter()
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy, noisy_level in (
        ("uvicorn.access", logging.WARNING),
        ("httpx", logging.WARNING),
        ("httpcore", logging.WARNING),
        ("sqlalchemy.engine", logging.WARNING),
    ):
        logging.getLogger(noisy).setLevel(noisy_level)


def get_logger(name: str) -> StructuredLogger:
    """Return the StructuredLogger registered under ``name``."""
    return logging.getLogger(name)  # type: ignore[return-value]


# =============================================================================
# Masking helpers for customer data
# =============================================================================


def mask_email(email: str | None) -> str | None:
    """Keep the first two characters of the local part: an***@example.com."""
    if not email:
        return None
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:2]}***@{domain}"


def mask_phone(phone: str | None) -> str | None:
    """Keep only the last three digits."""
    if not phone:
        return None
    return "***" if len(phone) <= 3 else f"***{phone[-3:]}"


# Module loggers
rest_api_logger = get_logger("rest_api")
orders_logger = get_logger("rest_api.orders")
tables_logger = get_logger("rest_api.tables")
finance_logger = get_logger("rest_api.finance")
security_audit_logger = get_logger("security.audit")


# =============================================================================
# Security audit
# =============================================================================


def audit_tenant_override(
    user_id: str | None,
    home_restaurant_id: str | None,
    target_restaurant_id: str,
    path: str | None = None,
    **extra: Any,
) -> None:
    """A superadmin addressed a restaurant other than the one in their token."""
    security_audit_logger.warning(
        "TENANT_AUDIT: SUPERADMIN_OVERRIDE",
        user_id=user_id,
        home_restaurant_id=home_restaurant_id,
        target_restaurant_id=target_restaurant_id,
        path=path,
        **extra,
    )


def audit_tenant_mismatch(
    entity: str,
    entity_id: str,
    requested_restaurant_id: str,
    **extra: Any,
) -> None:
    """
    A row owned by another restaurant was addressed.

    Only the requested scope is recorded, never the owning restaurant.
    """
    security_audit_logger.warning(
        "TENANT_AUDIT: CROSS_TENANT_ACCESS",
        entity=entity,
        entity_id=entity_id,
        requested_restaurant_id=requested_restaurant_id,
        **extra,
    )


def audit_auth_event(
    event_type: str,
    user_id: str | None = None,
    success: bool = True,
    reason: str | None = None,
    **extra: Any,
) -> None:
    """
    Authentication and authorization outcome (TOKEN_EXPIRED, ROLE_DENIED,
    TENANT_DENIED, ...). Failures are logged at WARNING.
    """
    security_audit_logger.log(
        logging.INFO if success else logging.WARNING,
        f"AUTH_AUDIT: {event_type}",
        event_type=event_type,
        user_id=user_id,
        success=success,
        reason=reason,
        **extra,
    )
