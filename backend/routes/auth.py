"""
Account endpoints.

  POST /api/register  -> {message}
  POST /api/login     -> {token, expiresIn}
  GET  /api/profile   -> {name, email, phone}   (Authorization: Bearer <token>)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from deps import TokenIdentity, get_db, get_hasher, get_settings, require_user
from models import (
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    TokenResponse,
)
from services import auth_service
from services.password_service import PasswordHasher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=MessageResponse)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
):
    await auth_service.register_user(db, hasher, request)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
    settings: Settings = Depends(get_settings),
):
    token = await auth_service.authenticate(
        db, hasher, settings, email=request.email, password=request.password,
    )
    return TokenResponse(token=token, expiresIn=settings.jwt_ttl_minutes * 60)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    identity: TokenIdentity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.get_profile(db, identity.user_id)
    return ProfileResponse(name=user.name, email=user.email, phone=user.phone)
