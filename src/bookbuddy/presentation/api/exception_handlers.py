"""Centralized exception handlers for the FastAPI application.

Domain exceptions and authentication errors are mapped to HTTP responses
with a consistent error format.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }

Usage:
    from bookbuddy.presentation.api.exception_handlers import (
        setup_exception_handlers,
    )

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from bookbuddy.domain.shared.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from bookbuddy_auth import AuthError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Code to HTTP Status Mapping
# =============================================================================

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    # 400 Bad Request - validation and one-time secret errors
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OR_USED_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TOKEN_EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_OR_EXPIRED_CODE: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    # 404 Not Found
    ErrorCode.ENTITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 409 Conflict - already exists
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.USERNAME_ALREADY_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.DELETION_ALREADY_PENDING: status.HTTP_409_CONFLICT,
    # 500 Internal Server Error
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class CodedHTTPException(HTTPException):
    """HTTP error raised by request guards, rendered in the standard format.

    Dependencies that reject a request before any service runs (bearer
    authentication, origin checks, rate limits) raise this so the body still
    carries a machine-readable ``code``.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code


def _get_status_for_exception(exc: DomainException) -> int:
    """Determine HTTP status code for a domain exception.

    Uses the error code mapping, with fallback based on exception type.
    """
    if exc.code in ERROR_CODE_TO_STATUS:
        return ERROR_CODE_TO_STATUS[exc.code]

    if isinstance(exc, EntityNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST

    return status.HTTP_400_BAD_REQUEST


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "code": code,
        },
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle all domain exceptions with structured response."""
        status_code = _get_status_for_exception(exc)

        logger.warning(
            "Domain exception on %s %s: %s (code=%s, details=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
            exc.details,
        )

        return _create_error_response(
            status_code=status_code,
            message=exc.message,
            code=exc.code.value,
        )

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        """Handle authentication errors.

        Token, credential and one-time-code failures are expected traffic,
        so they are logged at info level without a traceback.
        """
        status_code = ERROR_CODE_TO_STATUS.get(
            exc.code,
            status.HTTP_401_UNAUTHORIZED,
        )

        logger.info(
            "Auth error on %s %s: %s (code=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
        )

        return _create_error_response(
            status_code=status_code,
            message=exc.message,
            code=exc.code.value,
        )

    @app.exception_handler(CodedHTTPException)
    async def coded_http_exception_handler(
        request: Request,
        exc: CodedHTTPException,
    ) -> JSONResponse:
        """Handle request guard rejections, keeping their headers."""
        logger.info(
            "Request rejected on %s %s: %s (code=%s)",
            request.method,
            request.url.path,
            exc.detail,
            exc.code.value,
        )
        return _create_error_response(
            status_code=exc.status_code,
            message=exc.detail,
            code=exc.code.value,
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format.

        This is the catch-all handler for any exceptions not handled by
        the handlers above. The traceback is logged, never returned.
        """
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="An internal error occurred",
            code=ErrorCode.INTERNAL_ERROR.value,
        )
