"""Repositories - SQLAlchemy implementations of the core storage interfaces."""
from openversion.repositories.version_repository import VersionRepository

__all__ = ["VersionRepository"]
