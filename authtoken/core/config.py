"""Application configuration and settings."""

from functools import lru_cache
from typing import Annotated, Final

from pydantic import Field, NonNegativeInt, PositiveInt, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# exp must stay below the point where NumericDates are read back as milliseconds
MAX_EXPIRE_HOURS: Final[int] = 100 * 365 * 24

DEFAULT_ADMIN_IDS: Final[tuple[int, ...]] = (1,)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        env_ignore_empty=True,
        validate_default=True,
    )

    # Security settings
    JWT_SECRET: SecretStr
    JWT_EXPIRE_HOURS: PositiveInt = Field(default=24, le=MAX_EXPIRE_HOURS)

    # Admin access, comma separated in the environment
    ADMIN_IDS: Annotated[list[NonNegativeInt], NoDecode] = list(DEFAULT_ADMIN_IDS)

    @field_validator("ADMIN_IDS", mode="before")
    @classmethod
    def parse_admin_ids(cls, v: object) -> object:
        if isinstance(v, str):
            parts = (part.strip() for part in v.split(","))
            v = [int(part) for part in parts if part.isdecimal()]
        return v or list(DEFAULT_ADMIN_IDS)


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
