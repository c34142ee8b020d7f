"""
Error rendering for domain exceptions.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.utils.exceptions import AppException
from shared.utils.schemas import ErrorResponse


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    body = ErrorResponse(detail=exc.detail, code=exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every AppException as ErrorResponse."""
    app.add_exception_handler(AppException, app_exception_handler)
