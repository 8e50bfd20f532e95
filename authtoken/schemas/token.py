"""JWT identity and claims schemas"""

from datetime import UTC, datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationInfo,
    field_validator,
)


class Identity(BaseModel):
    """Authenticated principal embedded verbatim in a token."""

    model_config = ConfigDict(frozen=True)

    user_id: NonNegativeInt = Field(description="Numeric user identifier")
    username: str = Field(description="Login name")
    email: str = Field(description="Email address")


class TokenClaims(Identity):
    """JWT token payload with validation.

    This model validates the JWT payload according to RFC 7519.
    Fields:
        user_id: Numeric user identifier
        username: Login name
        email: Email address
        iat: Issued at time
        exp: Expiration time
        iss: Issuer
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "user_id": 42,
                "username": "alice",
                "email": "alice@x.com",
                "iat": 1700000000,
                "exp": 1700003600,
                "iss": "authtoken",
            }
        },
    )

    iat: datetime = Field(description="Token issued at timestamp (UTC)")
    exp: datetime = Field(description="Token expiration timestamp (UTC)")
    iss: str = Field(min_length=1, description="Token issuer")

    @field_validator("iat", "exp")
    @classmethod
    def validate_timestamps(cls, v: datetime) -> datetime:
        """Ensure timestamps are UTC."""
        if v.tzinfo is None:
            raise ValueError("Timestamp must be timezone-aware")
        return v.astimezone(UTC)

    @field_validator("exp")
    @classmethod
    def validate_expiration(cls, v: datetime, info: ValidationInfo) -> datetime:
        """Ensure expiration is after issued at time."""
        if "iat" in info.data and v <= info.data["iat"]:
            raise ValueError("Expiration time must be after issued at time")
        return v

    @property
    def identity(self) -> Identity:
        return Identity(
            user_id=self.user_id,
            username=self.username,
            email=self.email,
        )


__all__ = [
    "Identity",
    "TokenClaims",
]
