# movie_catalog/errors.py
"""
Application error taxonomy and the FastAPI handlers that render it.

Every error reaches the client as ``{"message": ...}``. Internal details
(SQL, tracebacks, hashes) stay in the server log.
"""
from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

LOGIN_PAGE = "/login.html"


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid username or password."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists."


class InternalError(AppError):
    pass


class LoginRequired(Exception):
    """Raised by page-level guards; rendered as a redirect to the login page."""

    def __init__(self, message: str = "Please log in to continue"):
        self.message = message
        super().__init__(message)


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when the IntegrityError comes from a unique / primary key constraint.
    asyncpg and psycopg expose the SQLSTATE; sqlite only has the message text.
    """
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == "23505"
    return "unique" in str(orig).lower()


# -------- Handlers --------
async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse(
        url=f"{LOGIN_PAGE}?{urlencode({'message': exc.message})}",
        status_code=status.HTTP_302_FOUND,
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # FastAPI would answer 422; clients of this API expect 400 + message
    logger.info("Rejected malformed request %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": "Malformed request."})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": InternalError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(LoginRequired, _login_required_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
