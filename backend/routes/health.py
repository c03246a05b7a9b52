"""
Root banner and health check endpoints.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from context import AppContext, get_context
from database import ping

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "GameHub Backend Running"


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(ctx: AppContext = Depends(get_context)):
    """
    Health check: verifies database connectivity.

    Always 200: the process keeps serving when the database is down, so the
    body reports "degraded" rather than failing the probe.
    """
    db_ok = await ping(ctx.engine)
    return {
        "status": "healthy" if db_ok and ctx.db_ready else "degraded",
        "database_connected": db_ok,
        "schema_ready": ctx.db_ready,
        "environment": ctx.settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
