"""
sweetshop.api.errors

HTTP mapping for the domain error taxonomy.

Responsibilities:
- Map each `ShopError` kind to a status code and a `{kind, message}` body.
- Report request-validation failures with the same body shape.
- Turn anything unexpected into a generic 500 without leaking internals.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from sweetshop.errors import (
    DuplicateIdentity,
    DuplicateName,
    Forbidden,
    InvalidCredential,
    MissingCredential,
    NotFound,
    OutOfStock,
    ShopError,
    StoreUnavailable,
    ValidationError,
)
from sweetshop.observability.logging import get_logger

log = get_logger(__name__)

HTTP_422_UNPROCESSABLE = 422

_STATUS: dict[type[ShopError], int] = {
    ValidationError: HTTP_422_UNPROCESSABLE,
    DuplicateIdentity: HTTP_409_CONFLICT,
    DuplicateName: HTTP_409_CONFLICT,
    MissingCredential: HTTP_401_UNAUTHORIZED,
    InvalidCredential: HTTP_401_UNAUTHORIZED,
    Forbidden: HTTP_403_FORBIDDEN,
    NotFound: HTTP_404_NOT_FOUND,
    OutOfStock: HTTP_409_CONFLICT,
    StoreUnavailable: HTTP_503_SERVICE_UNAVAILABLE,
}


# Framework-raised HTTP errors (routing misses, wrong method) reuse the same body shape.
_HTTP_KINDS: dict[int, str] = {
    HTTP_401_UNAUTHORIZED: MissingCredential.kind,
    HTTP_403_FORBIDDEN: Forbidden.kind,
    HTTP_404_NOT_FOUND: NotFound.kind,
    HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowed",
}


def status_for(exc: ShopError) -> int:
    # Walk the MRO so subclasses (e.g. PrincipalNotFound) inherit their parent's status.
    for cls in type(exc).__mro__:
        if cls in _STATUS:
            return _STATUS[cls]
    return HTTP_500_INTERNAL_SERVER_ERROR


def error_body(kind: str, message: str) -> dict[str, str]:
    return {"kind": kind, "message": message}


async def _shop_error_handler(_: Request, exc: ShopError) -> JSONResponse:
    status_code = status_for(exc)
    headers: dict[str, str] = {}
    if status_code == HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    if isinstance(exc, StoreUnavailable):
        headers["Retry-After"] = "1"
    return JSONResponse(
        status_code=status_code, content=error_body(exc.kind, exc.message), headers=headers
    )


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg', 'invalid')}" if where else "Invalid input"
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE,
        content=error_body(ValidationError.kind, message),
    )


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = _HTTP_KINDS.get(exc.status_code, "HTTPError")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(kind, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_handler(_: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_error", exc_info=exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("InternalError", "Internal error"),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, _shop_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_handler)


# --- Module Notes -----------------------------------------------------------
# Status codes: 401 for missing/invalid credentials, 403 for non-admins, 409 for uniqueness
# and out-of-stock conflicts, 503 (retryable) when the store fails or times out.
