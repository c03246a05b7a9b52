"""
Account service: registration, login and profile lookup.

Flow:
  1) register_user   -> hash password, insert row (email unique in the DB)
  2) authenticate    -> look up by email, verify hash, issue session token
  3) get_profile     -> re-read the user named by a verified token

Login failures use one message for "unknown email" and "wrong password" so
the endpoint cannot be used to discover which emails have accounts.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from db_models import User
from domain.constants import INVALID_CREDENTIALS
from domain.errors import AuthError, ConflictError, NotFoundError, StorageError
from middleware.auth import issue_access_token
from models import RegisterRequest
from services.async_executor import run_blocking
from services.password_service import PasswordHasher

logger = logging.getLogger(__name__)


async def register_user(db: AsyncSession, hasher: PasswordHasher, request: RegisterRequest) -> User:
    """
    Create a new account.

    Raises:
        ConflictError: email already registered
        StorageError: any other database failure
        HashingError: the hashing primitive failed
    """
    user = User(
        name=request.name,
        email=request.email,
        phone=request.phone,
        password_hash=await run_blocking(hasher.hash, request.password),
    )

    try:
        db.add(user)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Registration rejected, email already in use: {request.email}")
        raise ConflictError("Email already registered")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Registration failed for {request.email}: {e}", exc_info=True)
        raise StorageError()

    logger.info(f"User registered: id={user.id}")
    return user


async def _find_by_email(db: AsyncSession, email: str) -> User | None:
    try:
        q = await db.execute(select(User).where(User.email == email))
        return q.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"User lookup failed: {e}", exc_info=True)
        raise StorageError()


async def authenticate(
    db: AsyncSession,
    hasher: PasswordHasher,
    settings: Settings,
    *,
    email: str,
    password: str,
) -> str:
    """Verify credentials and return a fresh session token."""
    user = await _find_by_email(db, email)
    if user is None:
        # Unknown email costs one bcrypt verify, same as a wrong password
        await run_blocking(hasher.dummy_verify, password)
        logger.warning(f"Login failed (unknown email): {email}")
        raise AuthError(INVALID_CREDENTIALS)

    if not await run_blocking(hasher.verify, password, user.password_hash):
        logger.warning(f"Login failed (bad password): user id={user.id}")
        raise AuthError(INVALID_CREDENTIALS)

    token = issue_access_token(settings, user_id=user.id, email=user.email)
    logger.info(f"Login successful: user id={user.id}")
    return token


async def get_profile(db: AsyncSession, user_id: int) -> User:
    """
    Load the user behind a verified token.

    Tokens are stateless, so the account may have been deleted after the
    token was issued; that is a NotFoundError, not a crash.
    """
    try:
        user = await db.get(User, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Profile lookup failed for user id={user_id}: {e}", exc_info=True)
        raise StorageError()

    if user is None:
        raise NotFoundError("User")
    return user
