"""Mapping of ledger errors to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from ledger.domain import logger
from ledger.shared.errors import InsufficientStock, ProtectedCategoryError


def _messages(exc):
    return getattr(exc, "messages", None) or {"_entity": [str(exc)]}


async def insufficient_stock_handler(request: Request, exc: InsufficientStock):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"errors": _messages(exc), "available": exc.available, "requested": exc.requested},
    )


async def protected_category_handler(request: Request, exc: ProtectedCategoryError):
    logger.warning("protected_category_rejected", path=request.url.path, action=exc.action)
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"errors": _messages(exc)})


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"errors": _messages(exc)})


async def not_found_handler(request: Request, exc: ObjectNotFoundError):
    # Same response whether the record is missing or owned by someone else
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"errors": {"_entity": ["Not found"]}})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(InsufficientStock, insufficient_stock_handler)
    app.add_exception_handler(ProtectedCategoryError, protected_category_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
