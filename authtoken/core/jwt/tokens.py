"""JWT session token service.

Example:
```python
service = TokenService(secret="s3cr3t", expires=timedelta(hours=1))

token = service.issue(Identity(user_id=42, username="alice", email="alice@x.com"))
assert token.count(".") == 2

claims = service.verify(token)
assert claims.username == "alice"
assert claims.exp == claims.iat + timedelta(hours=1)

renewed = service.refresh(token)
assert service.verify(renewed).identity == claims.identity
```

Critical Notes:
- Tokens are signed with HS256
- Tokens carry user_id, username, email, iat, exp and iss
- Timestamps have one second resolution
- A token is expired once the clock reaches exp
- Signature and structure are checked before expiry
- Refresh does not revoke the old token
- No state is kept between calls
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Final

from jose import JWTError, jwk, jwt
from jose.exceptions import JWKError
from jose.utils import base64url_decode, base64url_encode
from pydantic import ValidationError

from authtoken.core.config import MAX_EXPIRE_HOURS, Settings
from authtoken.core.errors import (
    ConfigurationError,
    InvalidTokenError,
    TokenExpiredError,
)
from authtoken.schemas.token import Identity, TokenClaims

logger = logging.getLogger(__name__)

# Constants
ALGORITHM: Final[str] = "HS256"
ISSUER: Final[str] = "authtoken"
TOKEN_SEGMENTS: Final[int] = 3
MAX_EXPIRES: Final[timedelta] = timedelta(hours=MAX_EXPIRE_HOURS)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _is_canonical(segment: str) -> bool:
    """Check a segment is the one base64url spelling of its bytes."""
    try:
        raw = segment.encode("ascii")
        return base64url_encode(base64url_decode(raw)) == raw
    except ValueError:
        return False


class TokenService:
    """Issues, verifies and refreshes signed session tokens.

    The secret and expiry are fixed at construction. Every operation is a
    pure function of them, the input and one clock reading, so a single
    instance can be shared between threads.
    """

    def __init__(
        self,
        secret: str | bytes,
        expires: timedelta,
        *,
        clock: Clock | None = None,
    ) -> None:
        """Validate and bind the signing configuration.

        Args:
            secret: HMAC key material
            expires: Lifetime of every issued token
            clock: Source of the current aware datetime

        Raises:
            ConfigurationError: If the secret is empty or expires is out of range
        """
        if isinstance(secret, str):
            secret = secret.encode()
        if not isinstance(secret, bytes) or not secret.strip():
            raise ConfigurationError("JWT secret must be configured")
        if not isinstance(expires, timedelta) or not timedelta(0) < expires <= MAX_EXPIRES:
            raise ConfigurationError(
                f"Token expiry must be positive and at most {MAX_EXPIRE_HOURS} hours",
                details={"expires": str(expires)},
            )

        try:
            self._key: Final = jwk.construct(secret, ALGORITHM)
        except JWKError as e:
            raise ConfigurationError(f"JWT secret is not usable: {str(e)}") from e

        self._expires: Final[timedelta] = expires
        self._clock: Final[Clock] = clock or _utcnow

    @classmethod
    def from_settings(cls, settings: Settings, *, clock: Clock | None = None) -> "TokenService":
        """Build a service from loaded settings."""
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            expires=timedelta(hours=settings.JWT_EXPIRE_HOURS),
            clock=clock,
        )

    @property
    def expires(self) -> timedelta:
        return self._expires

    def __repr__(self) -> str:
        return f"{type(self).__name__}(expires={self._expires!r})"

    def _now(self) -> datetime:
        # NumericDate claims have one second resolution
        return self._clock().astimezone(UTC).replace(microsecond=0)

    def issue(self, identity: Identity) -> str:
        """Create a signed token for an identity.

        Args:
            identity: Caller-validated principal

        Returns:
            str: Signed JWT token
        """
        now = self._now()
        claims = TokenClaims(
            **identity.model_dump(),
            iat=now,
            exp=now + self._expires,
            iss=ISSUER,
        )

        token = jwt.encode(
            claims=claims.model_dump(),
            key=self._key,
            algorithm=ALGORITHM,
        )
        logger.debug("Issued token for user %s", identity.user_id)
        return token

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a token.

        Args:
            token: JWT to verify

        Returns:
            TokenClaims: Claims embedded in the token

        Raises:
            InvalidTokenError: If structure, algorithm, signature, issuer or claims are wrong
            TokenExpiredError: If an otherwise valid token has reached its expiry
        """
        if not isinstance(token, str):
            raise InvalidTokenError("Invalid token: not a string")

        segments = token.split(".")
        if len(segments) != TOKEN_SEGMENTS or not all(segments):
            raise InvalidTokenError("Invalid token: malformed structure")
        # Unused trailing bits would let two spellings share one signature
        if not all(_is_canonical(segment) for segment in segments):
            raise InvalidTokenError("Invalid token: non-canonical encoding")

        try:
            # Signature, algorithm and issuer; expiry is judged below
            payload = jwt.decode(
                token=token,
                key=self._key,
                algorithms=[ALGORITHM],
                issuer=ISSUER,
                options={"verify_exp": False},
            )
            claims = TokenClaims.model_validate(payload)
        except JWTError as e:
            logger.debug("Token rejected: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}") from e
        except ValidationError as e:
            logger.debug("Token rejected: %d invalid claims", e.error_count())
            raise InvalidTokenError(
                "Invalid token: malformed claims",
                details=[err["loc"] for err in e.errors()],
            ) from e

        if self._now() >= claims.exp:
            logger.debug("Token for user %s expired at %s", claims.user_id, claims.exp)
            raise TokenExpiredError(
                "Token expired",
                details={"exp": claims.exp.isoformat()},
            )

        return claims

    def refresh(self, token: str) -> str:
        """Exchange a still-valid token for a newly issued one.

        The old token is not revoked and stays valid until its own expiry.

        Args:
            token: JWT to refresh

        Returns:
            str: New signed JWT token for the same identity

        Raises:
            InvalidTokenError: If the token is not trusted
            TokenExpiredError: If the token has expired
        """
        claims = self.verify(token)
        return self.issue(claims.identity)
