"""Map storefront errors onto JSON responses shaped ``{"error": ...}``."""

import pydantic
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationRequired,
    BackendError,
    BackendUnavailable,
    StockError,
    StorefrontError,
    ValidationError,
    VoucherError,
)

_STATUS_BY_ERROR: list[tuple[type[StorefrontError], int]] = [
    (ValidationError, 422),
    (VoucherError, 409),
    (StockError, 409),
    (AuthenticationRequired, 401),
    (BackendUnavailable, 503),
]


def status_for(exc: StorefrontError) -> int:
    if isinstance(exc, BackendError):
        return exc.status_code if 400 <= exc.status_code < 500 else 502
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:  # noqa: ARG001
    error = exc.messages if isinstance(exc, ValidationError) else exc.message
    return JSONResponse(status_code=status_for(exc), content={"error": error})


async def model_error_handler(request: Request, exc: pydantic.ValidationError) -> JSONResponse:  # noqa: ARG001
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "__root__"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return JSONResponse(status_code=422, content={"error": errors})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(pydantic.ValidationError, model_error_handler)
