from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger("forex_bureau.errors")


class StoreError(Exception):
    """Raised by an entity store when the backing storage fails."""


class RecordNotFound(StoreError):
    """Update/delete addressed a key that the entity does not hold."""

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} record '{key}' not found")
        self.entity = entity
        self.key = key


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        detail = f"No route for {request.method} {request.url.path}"
    else:
        detail = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": "not_found" if exc.status_code == 404 else "http_error",
            "detail": detail,
        },
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def store_error_handler(request: Request, exc: StoreError):  # type: ignore
    if isinstance(exc, RecordNotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "not_found", "detail": str(exc)},
        )
    logger.warning("store write failed", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "store_error", "detail": str(exc)},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
