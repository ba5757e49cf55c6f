"""Persistence: database engine and sessions.

Repositories live in ``reviewpool.core.storage.repositories``.
"""
from .database import Base, Database, get_db, init_db

__all__ = [
    "Base",
    "Database",
    "get_db",
    "init_db",
]
