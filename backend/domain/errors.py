"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes and a JSON {"error": ...}
body by the exception handlers in main.py.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, headers: dict | None = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message

    @property
    def code(self) -> str:
        """snake_case error code derived from the class name (AuthError -> auth)."""
        name = self.__class__.__name__.removesuffix("Error")
        return "".join(f"_{c.lower()}" if c.isupper() else c for c in name).lstrip("_")


class ValidationError(DomainError):
    """Client input missing or malformed (400)."""
    def __init__(self, message: str, field: str | None = None):
        if field:
            message = f"{message}: {field}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class AuthError(DomainError):
    """Credential or token problem (400 bad credentials, 401 no token, 403 bad token)."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message, status_code=status_code)


class ConflictError(DomainError):
    """Duplicate unique key (400)."""
    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class NotFoundError(DomainError):
    """Resource not found (404)."""
    def __init__(self, resource_type: str, message: str | None = None):
        super().__init__(message or f"{resource_type} not found", status_code=status.HTTP_404_NOT_FOUND)


class RateLimitError(DomainError):
    """Rate limit exceeded (429)."""
    def __init__(self, message: str = "Too many requests, please try again later.", headers: dict | None = None):
        super().__init__(message, status_code=status.HTTP_429_TOO_MANY_REQUESTS, headers=headers)


class StorageError(DomainError):
    """Persistence fault (500). The underlying database error is only logged."""
    def __init__(self, message: str = "Database error"):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class GatewayError(DomainError):
    """Completion service fault (500). The upstream error is only logged."""
    def __init__(self, message: str = "Failed to generate a reply. Please try again later."):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class InternalError(DomainError):
    """Unexpected server-side fault (500); details are logged, never returned."""
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class HashingError(InternalError):
    """Password hashing primitive failed (500)."""
    pass
