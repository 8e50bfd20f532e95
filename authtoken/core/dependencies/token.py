"""Token dependencies for FastAPI."""

from functools import lru_cache

from authtoken.core.config import get_settings
from authtoken.core.jwt import TokenService


@lru_cache
def get_token_service() -> TokenService:
    """Get the process-wide token service instance.

    Settings are read once; later changes to the environment only apply to
    a newly constructed service.

    Returns:
        Token service instance
    """
    return TokenService.from_settings(get_settings())


__all__ = ["get_token_service"]
