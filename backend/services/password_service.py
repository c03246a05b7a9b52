"""
Password hashing (bcrypt via passlib).

Only the salted hash is ever persisted; verification runs inside passlib,
which compares digests in constant time.
"""
import logging

from passlib.context import CryptContext

from domain.errors import HashingError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Thin wrapper around a bcrypt CryptContext with a configurable cost."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        try:
            return self._context.hash(password)
        except Exception as e:
            logger.error(f"Password hashing failed: {e}", exc_info=True)
            raise HashingError()

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check `password` against a stored hash.

        A mismatch returns False; a hash the primitive cannot read raises
        HashingError since that means the stored record is corrupt.
        """
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError) as e:
            logger.error(f"Password verification failed on stored hash: {e}")
            raise HashingError()

    def dummy_verify(self, password: str) -> bool:
        """Pay the same bcrypt cost as verify() when there is no stored hash. Always False."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("gamehub-dummy-password")
        self.verify(password, self._dummy_hash)
        return False
