"""
Startup and shutdown of the REST API process.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.config.settings import settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from shared.infrastructure.db import engine, get_db_context
from shared.infrastructure.events import close_redis_sync_client
from rest_api.models import Base
from rest_api.seed import seed
from rest_api.services.domain import shutdown_order_notifier


def check_configuration() -> None:
    """Refuse to boot a production process with insecure settings."""
    problems = settings.validate_production_secrets()
    if not problems:
        return

    for problem in problems:
        logger.error("Configuration error", error=problem)
    if settings.environment == "production":
        raise RuntimeError("Refusing to start: " + "; ".join(problems))


def prepare_database() -> None:
    """Create missing tables; seed the demo restaurant in development."""
    Base.metadata.create_all(bind=engine)
    logger.info("Schema ready", dialect=engine.dialect.name)

    if settings.environment == "development":
        with get_db_context() as db:
            seed(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()
    logger.info("REST API starting", env=settings.environment, port=settings.rest_api_port)
    prepare_database()

    yield

    logger.info("REST API stopping")
    # Queued order notifications are flushed before Redis is closed
    shutdown_order_notifier()
    close_redis_sync_client()
