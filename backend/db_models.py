"""
SQLAlchemy ORM models for the GameHub backend.

Tables:
    users: registered accounts (email is unique; only the bcrypt hash is stored)
    games: storefront catalog, read-only from the API's point of view
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Numeric, DateTime

from database import Base


class User(Base):
    """Registered GameHub account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(30), nullable=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        # Keep the hash out of logs and tracebacks
        return f"<User id={self.id} email={self.email!r}>"


class Game(Base):
    """A game listed in the storefront catalog."""
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    genre = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
