import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from design_cms.exceptions import (
    ActiveThemeDeletionError,
    DesignCMSError,
    DuplicateRecordError,
    RecordNotFoundError,
    ThemeActivationConflict,
)

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS: dict[type[DesignCMSError], int] = {
    RecordNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateRecordError: status.HTTP_409_CONFLICT,
    ThemeActivationConflict: status.HTTP_409_CONFLICT,
    ActiveThemeDeletionError: status.HTTP_400_BAD_REQUEST,
}


@contextmanager
def translate_db_errors(action: str) -> Iterator[None]:
    """Log database failures and replace them with a generic `Failed to <action>` 500."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error while trying to %s: %s", action, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}",
        ) from exc


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


async def domain_exception_handler(request: Request, exc: DesignCMSError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in DOMAIN_ERROR_STATUS.items() if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DesignCMSError, domain_exception_handler)  # type: ignore[arg-type]
