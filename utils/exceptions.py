"""
Custom exceptions and error handlers for the application.
Provides structured error responses.
"""
from typing import Dict, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from constants import (
    CODE_INVALID_JSON,
    CODE_RATE_LIMIT_EXCEEDED,
    CODE_SERVER_ERROR,
    CODE_VALIDATION_ERROR,
    MESSAGE_INVALID_DATA,
    MESSAGE_INVALID_JSON,
    MESSAGE_RATE_LIMITED,
    MESSAGE_SERVER_ERROR,
    RETRY_AFTER_SECONDS,
)

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------
# Email delivery errors (raised below the HTTP layer)
# --------------------------------------------------------------------
class EmailDeliveryError(Exception):
    """Base class for failures while delivering a contact email."""


class ConfigurationError(EmailDeliveryError):
    """Credentials or addresses required for delivery are missing."""


class TransportError(EmailDeliveryError):
    """The email provider was unreachable or answered with a non-2xx status."""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider_message: Optional[str] = None,
        provider_code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.provider_message = provider_message
        self.provider_code = provider_code
        super().__init__(self.message)


# --------------------------------------------------------------------
# API exceptions (rendered by contact_exception_handler)
# --------------------------------------------------------------------
class ContactAPIException(Exception):
    """Base API exception class."""
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or f"HTTP_{status_code}"
        self.headers = headers
        super().__init__(self.message)

    def to_content(self) -> dict:
        return {"success": False, "error": self.message, "code": self.code}


class InvalidJSONException(ContactAPIException):
    """Request body could not be decoded."""
    def __init__(self, message: str = MESSAGE_INVALID_JSON):
        super().__init__(message, status_code=400, code=CODE_INVALID_JSON)


class ValidationException(ContactAPIException):
    """Validation exception."""
    def __init__(self, errors: List[dict], message: str = MESSAGE_INVALID_DATA):
        super().__init__(message, status_code=400, code=CODE_VALIDATION_ERROR)
        self.errors = errors

    def to_content(self) -> dict:
        content = super().to_content()
        content["errors"] = self.errors
        return content


class RateLimitException(ContactAPIException):
    """Too many submissions from one client within the current window."""
    def __init__(self, retry_after: int = RETRY_AFTER_SECONDS, message: str = MESSAGE_RATE_LIMITED):
        super().__init__(
            message,
            status_code=429,
            code=CODE_RATE_LIMIT_EXCEEDED,
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class ServerErrorException(ContactAPIException):
    """Sanitized server-side failure."""
    def __init__(self, message: str = MESSAGE_SERVER_ERROR):
        super().__init__(message, status_code=500, code=CODE_SERVER_ERROR)


async def contact_exception_handler(request: Request, exc: ContactAPIException):
    """Handle API exceptions."""
    logger.info(f"API Exception: {exc.message} (Code: {exc.code}, Status: {exc.status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_content(),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    logger.warning(f"HTTP Exception: {exc.detail} (Status: {exc.status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "code": f"HTTP_{exc.status_code}",
        },
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": MESSAGE_SERVER_ERROR,
            "code": CODE_SERVER_ERROR,
        },
    )
