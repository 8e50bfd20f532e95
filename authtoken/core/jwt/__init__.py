"""JWT token service package."""

from authtoken.core.jwt.tokens import (
    ALGORITHM,
    ISSUER,
    TokenService,
)

__all__ = [
    "ALGORITHM",
    "ISSUER",
    "TokenService",
]
