"""Schemas package for Pydantic models."""

from authtoken.schemas.token import Identity, TokenClaims

__all__ = [
    # Token
    "Identity",
    "TokenClaims",
]
