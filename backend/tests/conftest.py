"""
Pytest configuration and shared fixtures for GameHub tests.

Provides an app built around an in-memory SQLite database, a fake
Completion Gateway that records calls, and an httpx AsyncClient driving the
ASGI app in-process.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
import pytest_asyncio
from decimal import Decimal
from typing import AsyncGenerator

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from database import init_db
from main import create_app

TEST_JWT_SECRET = "test-jwt-secret-for-pytest-only"
ALLOWED_ORIGIN = "http://localhost:3000"


class FakeGateway:
    """Stand-in for CompletionGateway: records prompts, returns a fixed reply or raises."""

    def __init__(self, reply: str = "Try Hades, it's a great roguelike."):
        self.reply = reply
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


# ── Settings / App Fixtures ──────────────────────────────────────────


def make_settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        openai_api_key="test-key",
        cors_origins=ALLOWED_ORIGIN,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture(scope="function")
async def app(test_settings, fake_gateway):
    """App with its own context; tables are created up front (no lifespan under ASGITransport)."""
    application = create_app(test_settings, gateway=fake_gateway)
    ctx = application.state.context
    await init_db(ctx.engine)
    ctx.db_ready = True
    yield application
    await ctx.engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture(scope="function")
async def db_session(app) -> AsyncGenerator[AsyncSession, None]:
    """A session on the same in-memory database the app uses."""
    async with app.state.context.session_factory() as session:
        yield session


# ── Test Data Fixtures ────────────────────────────────────────────────


ALICE = {"name": "Alice", "email": "a@x.com", "password": "secret1"}


@pytest_asyncio.fixture
async def registered_user(client) -> dict:
    response = await client.post("/api/register", json=ALICE)
    assert response.status_code == 200
    return dict(ALICE)


@pytest_asyncio.fixture
async def auth_token(client, registered_user) -> str:
    response = await client.post(
        "/api/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest_asyncio.fixture
async def sample_games(db_session):
    from db_models import Game

    games = [
        Game(name="Hades", genre="Roguelike", price=Decimal("24.99")),
        Game(name="Celeste", genre="Platformer", price=Decimal("19.99")),
        Game(name="Civilization VI", genre="Strategy", price=Decimal("59.99")),
    ]
    db_session.add_all(games)
    await db_session.commit()
    return games
