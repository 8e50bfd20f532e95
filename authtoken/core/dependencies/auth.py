"""Authentication dependency injection utilities."""

import logging
from typing import Annotated, Final

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from authtoken.core.config import Settings, get_settings
from authtoken.core.dependencies.token import get_token_service
from authtoken.core.errors import InvalidTokenError, TokenError
from authtoken.core.jwt import TokenService
from authtoken.schemas.token import TokenClaims

logger = logging.getLogger(__name__)

MAX_TOKEN_LENGTH: Final[int] = 1024
AUTH_SCHEME: Final[str] = "Bearer"

bearer_scheme = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token following RFC 6750",
    scheme_name=AUTH_SCHEME,
)


async def get_current_claims(
    request: Request,
    token_service: Annotated[TokenService, Depends(get_token_service)],
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> TokenClaims:
    """Verify the bearer token and return its claims.

    Args:
        request: FastAPI request
        token_service: Token service
        credentials: Bearer token credentials

    Returns:
        Verified token claims

    Raises:
        InvalidTokenError: If the token is oversized or untrusted
        TokenExpiredError: If the token has expired
    """
    token = credentials.credentials
    client = request.client.host if request.client else "unknown"

    try:
        if len(token) > MAX_TOKEN_LENGTH:
            raise InvalidTokenError("Token exceeds maximum length")
        return token_service.verify(token)
    except TokenError as e:
        logger.warning(
            "Auth failed: %s, IP: %s, UA: %s",
            e.message,
            client,
            request.headers.get("user-agent", ""),
        )
        raise


CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]


async def get_current_admin(
    claims: CurrentClaims,
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenClaims:
    """Require the bearer to be one of the configured admins.

    Args:
        claims: Verified token claims
        settings: Application settings

    Returns:
        Verified token claims of an admin

    Raises:
        HTTPException: If the user is not an admin
    """
    if claims.user_id not in settings.ADMIN_IDS:
        logger.warning("Admin access denied for user %s", claims.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return claims


CurrentAdmin = Annotated[TokenClaims, Depends(get_current_admin)]
