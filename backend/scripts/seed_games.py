"""
Seed the games catalog with a starter list.

The API never writes games, so a fresh database has an empty catalog (and
/api/recommend answers with the canned "no games" reply). This script creates
the tables if needed and inserts the starter list only when the games table
is empty.

Run from the backend/ directory:
    python scripts/seed_games.py
"""
import asyncio
import logging
import os
import sys
from decimal import Decimal

# Add backend/ to path so we can import config
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from sqlalchemy import func, select

from config import Settings, settings as default_settings
from database import build_engine, build_session_factory, init_db
from db_models import Game

logger = logging.getLogger("seed_games")

STARTER_GAMES = [
    ("Elden Ring", "Action RPG", Decimal("59.99")),
    ("Stardew Valley", "Simulation", Decimal("14.99")),
    ("Hades", "Roguelike", Decimal("24.99")),
    ("Celeste", "Platformer", Decimal("19.99")),
    ("Civilization VI", "Strategy", Decimal("59.99")),
    ("Forza Horizon 5", "Racing", Decimal("59.99")),
    ("Hollow Knight", "Metroidvania", Decimal("14.99")),
    ("Among Us", "Party", Decimal("4.99")),
]


async def seed(settings: Settings | None = None) -> int:
    """Insert STARTER_GAMES into an empty catalog. Returns the number inserted."""
    engine = build_engine(settings or default_settings)
    try:
        await init_db(engine)
        session_factory = build_session_factory(engine)
        async with session_factory() as db:
            count = (await db.execute(select(func.count()).select_from(Game))).scalar_one()
            if count:
                logger.info(f"Catalog already has {count} games. Nothing to do.")
                return 0
            db.add_all(Game(name=name, genre=genre, price=price) for name, genre, price in STARTER_GAMES)
            await db.commit()
            logger.info(f"Inserted {len(STARTER_GAMES)} games")
            return len(STARTER_GAMES)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(seed())
