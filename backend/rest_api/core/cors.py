"""
HTTP middleware setup: CORS and request correlation ids.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings
from shared.infrastructure.correlation import REQUEST_ID_HEADER, CorrelationIdMiddleware


# Dashboard dev servers
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5177",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:5177",
]

ALLOWED_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]

ALLOWED_HEADERS = [
    "Authorization",
    "Content-Type",
    REQUEST_ID_HEADER,
    "Accept",
]


def get_cors_origins() -> list[str]:
    """ALLOWED_ORIGINS (comma-separated) when set, else the localhost dev servers."""
    if settings.allowed_origins:
        return [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    return DEFAULT_CORS_ORIGINS


def configure_middlewares(app: FastAPI) -> None:
    """
    Register middlewares. Starlette runs them in reverse order of
    registration, so the correlation id is set before CORS handling.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=0 if settings.environment == "development" else 600,
    )
    app.add_middleware(CorrelationIdMiddleware)
