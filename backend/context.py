"""
Application context: the process-wide collaborators (settings, DB engine and
session factory, password hasher, completion gateway, rate limiter), built
once by the app factory and stored on app.state.

Nothing here is a module-level global: tests build their own context with an
in-memory database and a fake gateway.
"""
from dataclasses import dataclass, field

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config import Settings
from database import build_engine, build_session_factory
from middleware.rate_limit import RateLimiter
from services.completion_service import CompletionGateway
from services.password_service import PasswordHasher


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    hasher: PasswordHasher
    gateway: CompletionGateway
    rate_limiter: RateLimiter
    # Set by the lifespan hook once tables exist
    db_ready: bool = field(default=False)


def build_context(
    settings: Settings,
    gateway: CompletionGateway | None = None,
    hasher: PasswordHasher | None = None,
) -> AppContext:
    """Wire every collaborator from `settings`; `gateway` / `hasher` may be swapped for fakes."""
    engine = build_engine(settings)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        hasher=hasher or PasswordHasher(rounds=settings.bcrypt_rounds),
        gateway=gateway or CompletionGateway(settings),
        rate_limiter=RateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency: the context of the app serving this request."""
    return request.app.state.context
