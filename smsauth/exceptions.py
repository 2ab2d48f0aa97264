from fastapi import Request
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for every failure the auth core reports to its caller."""

    code = "auth_error"
    status_code = 400
    message = "Authentication failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class InvalidPhoneFormat(AuthError):
    code = "invalid_phone_format"
    message = "Please enter a valid mobile phone number"


class RateLimited(AuthError):
    code = "rate_limited"
    status_code = 429
    message = "Too many requests, please try again later"


class MissingCode(AuthError):
    code = "missing_code"
    message = "Verification code is required"


class TermsNotAccepted(AuthError):
    code = "terms_not_accepted"
    message = "You must agree to the terms of service"


class NotRegistered(AuthError):
    code = "not_registered"
    status_code = 404
    message = "This phone number is not registered, please sign up first"


class WrongCode(AuthError):
    code = "wrong_code"
    message = "Incorrect verification code"


class CodeExpired(AuthError):
    code = "code_expired"
    status_code = 410
    message = "Verification code has expired, please request a new one"


class DuplicatePhone(AuthError):
    code = "duplicate_phone"
    status_code = 409
    message = "A user with this phone number already exists"


class StorageUnavailable(AuthError):
    code = "storage_unavailable"
    status_code = 503
    message = "Service temporarily unavailable"


def create_error_response(error_message: str, code: str = None) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message,
        "code": code,
    }


def create_success_response(data: dict) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }


async def auth_exception_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render an AuthError as the standard error envelope"""
    if isinstance(exc, StorageUnavailable):
        # The cause may carry driver details; keep it in the log only.
        logger.error(f"Storage failure on {request.url.path}: {exc.__cause__ or exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response(StorageUnavailable.message, exc.code)
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.message, exc.code)
    )
