"""Token errors and HTTP error handling following RFC 7807 Problem Details."""

from http import HTTPStatus
from typing import Any, Final

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ERROR_TYPE: Final[str] = "about:blank"
AUTH_ERROR_TYPE: Final[str] = "urn:ietf:params:rfc:7807:auth"
VALIDATION_ERROR_TYPE: Final[str] = "urn:ietf:params:rfc:7807:validation"
RESOURCE_ERROR_TYPE: Final[str] = "urn:ietf:params:rfc:7231:status:404"
SERVER_ERROR_TYPE: Final[str] = "urn:ietf:params:rfc:7231:status:500"

MAX_INSTANCE_LENGTH: Final[int] = 255

ERROR_CODES: Final[dict[int, str]] = {
    status.HTTP_401_UNAUTHORIZED: "AUTH001",
    status.HTTP_403_FORBIDDEN: "AUTH002",
    status.HTTP_404_NOT_FOUND: "RESOURCE001",
    status.HTTP_400_BAD_REQUEST: "VALIDATION001",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "SERVER001",
}

ERROR_TYPES: Final[dict[str, str]] = {
    "AUTH": AUTH_ERROR_TYPE,
    "RESOURCE": RESOURCE_ERROR_TYPE,
    "VALIDATION": VALIDATION_ERROR_TYPE,
    "SERVER": SERVER_ERROR_TYPE,
}

EXPIRED_TOKEN_CODE: Final[str] = "AUTH003"

JSON_CONTENT_TYPE: Final[str] = "application/problem+json"

CACHE_CONTROL: Final[str] = "no-store, no-cache, must-revalidate"

BEARER_CHALLENGE: Final[str] = 'Bearer error="invalid_token"'


class AppError(Exception):
    """Base error class for application errors."""

    def __init__(self, message: str, details: Any = None) -> None:
        """Initialize error with message and optional details.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(AppError):
    """Error raised when the token service is built with unusable settings."""


class TokenError(AppError):
    """Base error class for rejected tokens."""


class InvalidTokenError(TokenError):
    """Error raised for malformed, forged or otherwise untrusted tokens."""


class TokenExpiredError(TokenError):
    """Error raised for an authentic token whose expiry time has passed."""


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "type": AUTH_ERROR_TYPE,
                    "title": "Unauthorized",
                    "status": 401,
                    "detail": "Token expired",
                    "instance": "/api/v1/users/me",
                    "code": EXPIRED_TOKEN_CODE,
                }
            ]
        }
    )

    type: str = Field(default=DEFAULT_ERROR_TYPE)
    title: str
    status: int
    detail: str
    instance: str = Field(max_length=MAX_INSTANCE_LENGTH)
    code: str | None = None


def truncate_url(url: str, max_length: int = MAX_INSTANCE_LENGTH) -> str:
    """Truncate URL to max length while preserving the path.

    Args:
        url: URL to truncate
        max_length: Maximum length allowed

    Returns:
        Truncated URL with path preserved
    """
    if len(url) <= max_length:
        return url

    path = url.split("?")[0]
    if len(path) > max_length:
        return path[:max_length-3] + "..."
    return path


def _problem_response(
    problem: ProblemDetail,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    response_headers = {
        "Content-Type": JSON_CONTENT_TYPE,
        "Cache-Control": CACHE_CONTROL,
    }
    if headers:
        response_headers.update(headers)

    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        headers=response_headers,
    )


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions by converting to RFC 7807 problem details."""
    error_type = ERROR_TYPES.get(
        ERROR_CODES.get(exc.status_code, "").split("0")[0],
        DEFAULT_ERROR_TYPE,
    )

    problem = ProblemDetail(
        type=error_type,
        title=HTTPStatus(exc.status_code).phrase,
        status=exc.status_code,
        detail=str(exc.detail),
        instance=truncate_url(str(request.url)),
        code=ERROR_CODES.get(exc.status_code),
    )

    return _problem_response(problem, exc.headers)


async def token_error_handler(request: Request, exc: TokenError) -> JSONResponse:
    """Handle rejected tokens as 401 problem details with a bearer challenge.

    Expired tokens carry their own code so clients can prompt for a new
    login instead of treating the request as forged.
    """
    expired = isinstance(exc, TokenExpiredError)

    problem = ProblemDetail(
        type=AUTH_ERROR_TYPE,
        title=HTTPStatus.UNAUTHORIZED.phrase,
        status=status.HTTP_401_UNAUTHORIZED,
        detail="Token expired" if expired else "Invalid token",
        instance=truncate_url(str(request.url)),
        code=EXPIRED_TOKEN_CODE if expired else ERROR_CODES[status.HTTP_401_UNAUTHORIZED],
    )

    return _problem_response(problem, {"WWW-Authenticate": BEARER_CHALLENGE})


__all__ = [
    "AppError",
    "ConfigurationError",
    "InvalidTokenError",
    "ProblemDetail",
    "TokenError",
    "TokenExpiredError",
    "http_error_handler",
    "token_error_handler",
]
