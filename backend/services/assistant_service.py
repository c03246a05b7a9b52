"""
Recommendation and support replies built on the Completion Gateway.

recommend() grounds the model in the live catalog; an empty catalog gets a
canned reply without calling the external service at all. support() sends
the message as-is under the support persona.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from domain.constants import NO_GAMES_REPLY, RECOMMEND_SYSTEM_PROMPT, SUPPORT_SYSTEM_PROMPT
from services.catalog_service import format_catalog, list_games
from services.completion_service import CompletionGateway

logger = logging.getLogger(__name__)


def build_recommend_prompt(user_message: str, catalog_block: str) -> str:
    return (
        f"User preferences: {user_message}\n\n"
        f"Available games:\n{catalog_block}"
    )


async def recommend(db: AsyncSession, gateway: CompletionGateway, user_message: str) -> str:
    games = await list_games(db)
    if not games:
        logger.info("Recommendation requested with an empty catalog; returning canned reply")
        return NO_GAMES_REPLY

    prompt = build_recommend_prompt(user_message, format_catalog(games))
    reply = await gateway.complete(RECOMMEND_SYSTEM_PROMPT, prompt)
    logger.info(f"Recommendation generated from {len(games)} catalog entries")
    return reply


async def support(gateway: CompletionGateway, message: str) -> str:
    return await gateway.complete(SUPPORT_SYSTEM_PROMPT, message)
