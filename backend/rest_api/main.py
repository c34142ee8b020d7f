"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.config.logging import rest_api_logger as logger
from shared.infrastructure.db import get_db
from shared.infrastructure.events import check_redis_sync_health
from shared.utils.schemas import HealthResponse
from rest_api.core.cors import configure_middlewares
from rest_api.core.errors import register_exception_handlers
from rest_api.core.lifespan import lifespan
from rest_api.routers.orders import router as orders_router
from rest_api.routers.finance import router as finance_router


# Create FastAPI application
app = FastAPI(
    title="Jet Manager REST API",
    description="Multi-restaurant order lifecycle and ledger API",
    version="0.1.0",
    lifespan=lifespan,
)

configure_middlewares(app)
register_exception_handlers(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus dependency status.
    Returns 503 when a dependency is unreachable.
    """
    dependencies: dict[str, str] = {}

    try:
        db.execute(text("SELECT 1"))
        dependencies["database"] = "ok"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        dependencies["database"] = "unavailable"

    if settings.notifications_enabled:
        dependencies["redis"] = "ok" if check_redis_sync_health() else "unavailable"
    else:
        dependencies["redis"] = "disabled"

    healthy = all(state != "unavailable" for state in dependencies.values())
    body = HealthResponse(
        status="ok" if healthy else "degraded",
        service="rest-api",
        dependencies=dependencies,
    )
    if not healthy:
        return JSONResponse(content=body.model_dump(), status_code=503)
    return body


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(orders_router)
app.include_router(finance_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rest_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
