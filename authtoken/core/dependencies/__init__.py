"""Core dependencies for FastAPI."""

from authtoken.core.dependencies.auth import (
    CurrentAdmin,
    CurrentClaims,
    bearer_scheme,
    get_current_admin,
    get_current_claims,
)
from authtoken.core.dependencies.token import get_token_service

__all__ = [
    "CurrentAdmin",
    "CurrentClaims",
    "bearer_scheme",
    "get_current_admin",
    "get_current_claims",
    "get_token_service",
]
