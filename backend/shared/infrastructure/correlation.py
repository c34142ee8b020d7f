"""
Request context for log records.

CorrelationIdMiddleware binds two values for the duration of a request:
the X-Request-ID (taken from the client or generated) and the restaurant
addressed by the URL, when the path is tenant-scoped. RequestContextFilter
copies both onto every log record so lines from one request, and from one
restaurant, can be grouped by the log aggregator.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

_TENANT_PATH = re.compile(r"^/api/restaurants/([^/]+)")

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
restaurant_id_var: ContextVar[str | None] = ContextVar("restaurant_id", default=None)


def restaurant_from_path(path: str) -> str | None:
    """Return the restaurant id of a tenant-scoped path, or None."""
    match = _TENANT_PATH.match(path)
    return match.group(1) if match else None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind request id and restaurant id; echo the request id back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        rid_token = request_id_var.set(request_id)
        tenant_token = restaurant_id_var.set(restaurant_from_path(request.url.path))
        try:
            response = await call_next(request)
        finally:
            restaurant_id_var.reset(tenant_token)
            request_id_var.reset(rid_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestContextFilter(logging.Filter):
    """Attach request_id and restaurant_id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.restaurant_id = restaurant_id_var.get()
        return True
