"""Error taxonomy for the ledger API and the handlers that render it as JSON.

Every error leaves the app as ``{"error": message}`` with the status code
carried by the exception class.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Missing fields"


class DuplicateUsername(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Username already exists"


class InvalidCredentials(LedgerError):
    # Same message whether the username is unknown or the password is wrong.
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthorized(LedgerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Transaction not found"


class InternalError(LedgerError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_validation_errors(exc: RequestValidationError) -> str:
    """Turn pydantic's error list into a single readable line."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        if err.get("type") == "missing":
            parts.append(f"Missing field: {field}" if field else ValidationError.message)
        elif field:
            parts.append(f"{field}: {err.get('msg')}")
        else:
            parts.append(str(err.get("msg")))
    return "; ".join(parts) or ValidationError.message


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationError.status_code, describe_validation_errors(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unexpected store failure on %s %s", request.method, request.url.path)
    return error_response(InternalError.status_code, InternalError.message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
