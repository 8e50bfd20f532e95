"""Test cases for settings and the cached token service."""

from collections.abc import Generator
from datetime import timedelta

import pytest
from pydantic import ValidationError

from authtoken.core.config import MAX_EXPIRE_HOURS, Settings, get_settings
from authtoken.core.dependencies import get_token_service
from authtoken.core.jwt import TokenService
from authtoken.schemas import Identity


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch]:
    """Isolate settings from the process environment and caches."""
    monkeypatch.chdir("/")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.delenv("JWT_EXPIRE_HOURS", raising=False)
    monkeypatch.delenv("ADMIN_IDS", raising=False)
    get_settings.cache_clear()
    get_token_service.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
    get_token_service.cache_clear()


def test_settings_defaults(env: pytest.MonkeyPatch) -> None:
    """Test expiry defaults to one day."""
    env.setenv("JWT_SECRET", "s3cr3t")

    settings = get_settings()

    assert settings.JWT_SECRET.get_secret_value() == "s3cr3t"
    assert settings.JWT_EXPIRE_HOURS == 24
    assert settings.ADMIN_IDS == [1]
    assert "s3cr3t" not in repr(settings)


def test_settings_require_secret(env: pytest.MonkeyPatch) -> None:
    """Test a missing secret fails at load time."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.mark.parametrize("hours", ["0", "-1"])
def test_settings_reject_non_positive_expiry(env: pytest.MonkeyPatch, hours: str) -> None:
    """Test expiry hours must be positive."""
    env.setenv("JWT_SECRET", "s3cr3t")
    env.setenv("JWT_EXPIRE_HOURS", hours)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


def test_settings_reject_unrepresentable_expiry(env: pytest.MonkeyPatch) -> None:
    """Test expiry hours are capped so exp can be read back."""
    env.setenv("JWT_SECRET", "s3cr3t")
    env.setenv("JWT_EXPIRE_HOURS", str(MAX_EXPIRE_HOURS + 1))

    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("3", [3]),
        ("1, 7,12", [1, 7, 12]),
        ("1,abc,,-4, 9", [1, 9]),
        ("abc", [1]),
        (",", [1]),
    ],
)
def test_settings_parse_admin_ids(
    env: pytest.MonkeyPatch,
    raw: str,
    expected: list[int],
) -> None:
    """Test comma separated admin ids skip bad entries and fall back to 1."""
    env.setenv("JWT_SECRET", "s3cr3t")
    env.setenv("ADMIN_IDS", raw)

    assert get_settings().ADMIN_IDS == expected


def test_from_settings() -> None:
    """Test a service is built from secret and expiry hours."""
    settings = Settings(JWT_SECRET="s3cr3t", JWT_EXPIRE_HOURS=2, _env_file=None)  # type: ignore[arg-type]

    service = TokenService.from_settings(settings)

    assert service.expires == timedelta(hours=2)


def test_token_service_is_cached(env: pytest.MonkeyPatch) -> None:
    """Test the dependency builds one service and ignores later reloads."""
    env.setenv("JWT_SECRET", "s3cr3t")
    env.setenv("JWT_EXPIRE_HOURS", "1")

    service = get_token_service()
    token = service.issue(Identity(user_id=7, username="bob", email="bob@x.com"))

    env.setenv("JWT_SECRET", "rotated")
    get_settings.cache_clear()

    assert get_token_service() is service
    assert service.verify(token).user_id == 7
    assert TokenService.from_settings(get_settings()).expires == timedelta(hours=1)
