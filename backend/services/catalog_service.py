"""
Game catalog reader.

Read-only: the API never writes games (see scripts/seed_games.py for loading
a starter catalog).
"""
import logging
from decimal import Decimal
from typing import NamedTuple, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Game
from domain.errors import StorageError

logger = logging.getLogger(__name__)


class CatalogEntry(NamedTuple):
    name: str
    genre: str
    price: Decimal


async def list_games(db: AsyncSession) -> list[CatalogEntry]:
    """Return every game as (name, genre, price), ordered by id."""
    try:
        q = await db.execute(select(Game.name, Game.genre, Game.price).order_by(Game.id))
    except SQLAlchemyError as e:
        logger.error(f"Game catalog query failed: {e}", exc_info=True)
        raise StorageError()
    return [CatalogEntry(name, genre, Decimal(price)) for name, genre, price in q.all()]


def format_catalog(games: Sequence[CatalogEntry]) -> str:
    """One line per game, in the order given: '- Name (Genre) - $12.34'."""
    return "\n".join(
        f"- {g.name} ({g.genre}) - ${Decimal(g.price):.2f}" for g in games
    )
