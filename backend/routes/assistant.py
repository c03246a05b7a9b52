"""
Assistant endpoints (completion-backed).

  POST /api/recommend  {userMessage} -> {reply}
  POST /api/support    {message}     -> {reply}
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from deps import get_db, get_gateway
from models import RecommendRequest, ReplyResponse, SupportRequest
from services import assistant_service
from services.completion_service import CompletionGateway

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["assistant"])


@router.post("/recommend", response_model=ReplyResponse)
async def recommend(
    request: RecommendRequest,
    db: AsyncSession = Depends(get_db),
    gateway: CompletionGateway = Depends(get_gateway),
):
    reply = await assistant_service.recommend(db, gateway, request.user_message)
    return ReplyResponse(reply=reply)


@router.post("/support", response_model=ReplyResponse)
async def support(
    request: SupportRequest,
    gateway: CompletionGateway = Depends(get_gateway),
):
    reply = await assistant_service.support(gateway, request.message)
    return ReplyResponse(reply=reply)
