"""Database configuration and session management."""

from app.db.base import Base
from app.db.session import AsyncSessionLocal, engine, get_db

__all__ = ["Base", "AsyncSessionLocal", "engine", "get_db"]
