"""Database package - all database-related code."""
from openversion.db.connection import init_db, get_db_session, close_db
from openversion.db.models import Base, VersionModel

__all__ = [
    "init_db",
    "get_db_session",
    "close_db",
    "Base",
    "VersionModel",
]
