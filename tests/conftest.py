"""Test configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
from fastapi import FastAPI

from authtoken.core.config import Settings, get_settings
from authtoken.core.dependencies import CurrentAdmin, CurrentClaims, get_token_service
from authtoken.core.jwt import TokenService
from authtoken.core.registrar import register_exception_handlers
from authtoken.schemas import Identity

SECRET = "s3cr3t"
EXPIRES = timedelta(hours=1)
START = datetime(2025, 2, 23, 10, 20, 30, tzinfo=UTC)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(START)


@pytest.fixture
def identity() -> Identity:
    return Identity(user_id=42, username="alice", email="alice@x.com")


@pytest.fixture
def token_service(clock: FrozenClock) -> TokenService:
    return TokenService(SECRET, EXPIRES, clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(JWT_SECRET=SECRET, ADMIN_IDS=[1, 7], _env_file=None)  # type: ignore[arg-type]


@pytest.fixture
def test_app(token_service: TokenService, settings: Settings) -> FastAPI:
    """Create a test FastAPI application with protected routes."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/me")
    async def me(claims: CurrentClaims) -> dict[str, str | int]:
        return {
            "user_id": claims.user_id,
            "username": claims.username,
            "email": claims.email,
        }

    @app.get("/admin")
    async def admin(claims: CurrentAdmin) -> dict[str, int]:
        return {"user_id": claims.user_id}

    app.dependency_overrides = {
        get_token_service: lambda: token_service,
        get_settings: lambda: settings,
    }

    return app


@pytest.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    """Create test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client
