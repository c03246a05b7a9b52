"""
Configuration management for the GameHub backend.

Loads settings from the environment / .env via pydantic-settings.

Security notes:
    - validate_production_settings() enforces strict CORS and required secrets
      in production; outside production it only warns.
    - Secrets (DB password, JWT secret, API key) are never logged.
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 5000

    # ── Database ────────────────────────────────────────────────────
    # An explicit DATABASE_URL wins; otherwise a MySQL URL is built
    # from the DB_* fields below.
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "gamehub"
    db_pool_size: int = 10
    db_echo: bool = False

    # ── Auth (JWT + password hashing) ───────────────────────────────
    jwt_secret: str = ""
    jwt_issuer: str = "gamehub-api"
    jwt_ttl_minutes: int = 120
    bcrypt_rounds: int = 12

    # ── Completion API (OpenAI-compatible) ──────────────────────────
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    completion_model: str = "gpt-4o-mini"
    completion_max_tokens: int = 300
    completion_temperature: float = 0.7
    completion_timeout_seconds: float = 30.0

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    # ── Rate limiting (global, per client IP) ───────────────────────
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def sqlalchemy_url(self) -> str:
        """Async SQLAlchemy URL: DATABASE_URL if given, else MySQL via aiomysql."""
        if self.database_url:
            if self.database_url.startswith("sqlite:///"):
                return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
            if self.database_url.startswith("mysql://"):
                return self.database_url.replace("mysql://", "mysql+aiomysql://", 1)
            return self.database_url
        url = URL.create(
            "mysql+aiomysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Raises ValueError in production when a
        required secret is missing or CORS is left open.
        """
        problems = []
        if "*" in self.cors_origins:
            problems.append("CORS_ORIGINS contains '*' (open access)")
        if not self.jwt_secret:
            problems.append("JWT_SECRET is not set (login and profile will fail)")
        if not self.openai_api_key:
            problems.append("OPENAI_API_KEY is not set (recommend/support will fail)")

        if self.environment == "production":
            if problems:
                raise ValueError("Invalid production settings: " + "; ".join(problems))
            logger.info("Production settings validated")
        else:
            for p in problems:
                logger.warning(p)


# Default settings instance (the app factory accepts an explicit one)
settings = Settings()
