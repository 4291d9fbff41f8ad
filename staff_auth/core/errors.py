# staff-auth/staff_auth/core/errors.py
# Error taxonomy shared by the auth service and the HTTP layer.
import logging
from enum import Enum
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class Messages(str, Enum):
    """Every user-facing message the service can return."""

    REGISTERED = "User registered successfully"
    VALIDATION_FAILED = "Validation failed"
    FIELD_REQUIRED = "This field is required"
    INVALID_DAYS_OFF = "Must be a non-negative whole number"
    INVALID_ROLE = "Unknown role"
    USERNAME_EXISTS = "Username already exists"
    # Deliberately identical for unknown user and wrong password
    INVALID_CREDENTIALS = "Invalid username or password"
    NO_TOKEN = "No token, authorization denied"
    INVALID_TOKEN = "Token is not valid"
    # The only 401 that reveals state: the token was fine, the session was not
    SESSION_EXPIRED = "Session expired, please log in again"
    USER_NOT_FOUND = "User not found"
    PROTECTED = "This is a protected resource!"
    LOGGED_OUT = "Logged out"
    REGISTRATION_FAILED = "Registration failed"
    LOGIN_FAILED = "Login failed"
    INTERNAL = "Internal server error"


class AuthServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Messages):
        super().__init__(message.value)
        self.message = message

    def to_content(self) -> dict:
        return {"message": self.message.value}


class ValidationFailed(AuthServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: Dict[str, str]):
        super().__init__(Messages.VALIDATION_FAILED)
        self.errors = errors

    def to_content(self) -> dict:
        return {"message": self.message.value, "errors": self.errors}


class Conflict(AuthServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(AuthServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(AuthServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Internal(AuthServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Messages = Messages.INTERNAL):
        super().__init__(message)


async def auth_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    headers: Optional[dict] = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"] if part != "body") or "body"
        errors[field] = err["msg"]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": Messages.VALIDATION_FAILED.value, "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": Messages.INTERNAL.value},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthServiceError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
