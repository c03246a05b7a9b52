"""
Shared FastAPI dependencies.

Routers import from this single place: DB session, collaborators from the
app context, and the auth guard.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from context import AppContext, get_context
from middleware.auth import TokenIdentity, require_user
from services.completion_service import CompletionGateway
from services.password_service import PasswordHasher

__all__ = [
    "TokenIdentity",
    "get_context",
    "get_db",
    "get_gateway",
    "get_hasher",
    "get_settings",
    "require_user",
]


async def get_db(ctx: AppContext = Depends(get_context)) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an async session from the context pool."""
    async with ctx.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_settings(ctx: AppContext = Depends(get_context)) -> Settings:
    return ctx.settings


def get_hasher(ctx: AppContext = Depends(get_context)) -> PasswordHasher:
    return ctx.hasher


def get_gateway(ctx: AppContext = Depends(get_context)) -> CompletionGateway:
    return ctx.gateway
