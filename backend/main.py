"""
GameHub Backend: FastAPI Application

Account registration/login with stateless JWT sessions, a profile endpoint,
and completion-backed game recommendation and support replies.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, settings as default_settings
from context import build_context
from database import init_db
from domain.errors import DomainError, ValidationError
from middleware.rate_limit import RateLimitMiddleware
from routes import assistant, auth, health
from services.async_executor import shutdown_executor
from services.completion_service import CompletionGateway
from services.password_service import PasswordHasher

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=default_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings, create DB tables. Shutdown: stop the hashing pool, close the DB pool."""
    ctx = app.state.context
    ctx.settings.validate_production_settings()

    # A database outage must not stop the process; /health reports it
    try:
        await init_db(ctx.engine)
        ctx.db_ready = True
        logger.info("Connected to database")
    except Exception as e:
        logger.error(f"Database connection failed (running degraded): {e}")

    yield  # app runs here

    shutdown_executor()
    await ctx.engine.dispose()
    logger.info("Shutting down")


# ── Error rendering ─────────────────────────────────────────────────

def _error_body(message: str, code: str) -> dict:
    return {"error": message, "code": code}


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if first.get("type") in ("json_invalid", "model_attributes_type", "dict_type") or not loc:
        return "Invalid request body"
    field = ".".join(loc)
    if first.get("type") in ("missing", "string_too_short"):
        return f"Missing required field: {field}"
    return f"Invalid value for field: {field}"


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(DomainError)
    async def domain_exception_handler(request, exc: DomainError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc: RequestValidationError):
        """Schema failures are client errors (400), not FastAPI's default 422."""
        error = ValidationError(_validation_message(exc))
        logger.info(f"Rejected request to {request.url.path}: {error.message}")
        return JSONResponse(status_code=error.status_code, content=_error_body(error.message, error.code))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        """Router-level errors (unknown route, wrong method) in the same {error} shape."""
        detail = exc.detail
        message = detail if isinstance(detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(message, "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all for unhandled exceptions.

        Never return raw exception details to clients; the full traceback is
        logged server-side.
        """
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal server error", "internal"),
        )


# ── App Factory ─────────────────────────────────────────────────────

def create_app(
    settings: Optional[Settings] = None,
    *,
    gateway: Optional[CompletionGateway] = None,
    hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """Build the application around an explicit context (settings, pool, gateway, limiter)."""
    settings = settings or default_settings
    ctx = build_context(settings, gateway=gateway, hasher=hasher)

    app = FastAPI(
        title="GameHub API",
        description="Accounts, profile and completion-backed recommendations for the GameHub storefront",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = ctx

    # Middleware added last runs first: CORS wraps the limiter so 429s keep CORS headers
    app.add_middleware(RateLimitMiddleware, limiter=ctx.rate_limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(assistant.router)

    register_exception_handlers(app)
    return app


app = create_app()


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port, log_level=default_settings.log_level.lower())
