"""
Session token helpers.

  - Login issues a short-lived HS256 JWT carrying the user id and email
    (see services/auth_service.py).
  - Protected routes depend on require_user, which reads
    `Authorization: Bearer <jwt>`, checks signature, issuer and expiry, and
    hands the decoded identity to the handler.

Tokens are stateless: nothing is stored server-side, every request is
verified on its own, and a token only dies by expiring.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt
from fastapi import Depends, Header, status

from config import Settings
from context import AppContext, get_context
from domain.constants import ACCESS_DENIED, INVALID_TOKEN, TOKEN_ALGORITHM
from domain.errors import AuthError, InternalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenIdentity:
    """Identity decoded from a verified session token."""
    user_id: int
    email: str


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _require_secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not configured; cannot sign or verify tokens")
        raise InternalError()
    return settings.jwt_secret


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def issue_access_token(
    settings: Settings,
    *,
    user_id: int,
    email: str,
    ttl: Optional[timedelta] = None,
) -> str:
    now = _now_utc()
    exp = now.replace(microsecond=0) + (ttl if ttl is not None else timedelta(minutes=settings.jwt_ttl_minutes))
    payload = {
        "iss": settings.jwt_issuer,
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, _require_secret(settings), algorithm=TOKEN_ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> TokenIdentity:
    """
    Verify a token and return its identity.

    Any failure (bad signature, expired, wrong issuer, malformed, missing
    claims) is the same AuthError so callers cannot probe which check failed.
    """
    secret = _require_secret(settings)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[TOKEN_ALGORITHM],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
        return TokenIdentity(user_id=int(payload["sub"]), email=payload.get("email", ""))
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.info(f"Rejected invalid access token: {e}")
    raise AuthError(INVALID_TOKEN, status_code=status.HTTP_403_FORBIDDEN)


async def require_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    ctx: AppContext = Depends(get_context),
) -> TokenIdentity:
    """
    Dependency for protected routes.

    - No bearer token → 401 "Access denied"
    - Token present but not verifiable → 403 "Invalid token"
    """
    token = _parse_bearer_token(authorization)
    if not token:
        raise AuthError(ACCESS_DENIED, status_code=status.HTTP_401_UNAUTHORIZED)
    return decode_access_token(ctx.settings, token)
