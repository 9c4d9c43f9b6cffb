"""
SQLAlchemy ORM models for database tables.

One table: versions - one row per (project_id, identifier_name).
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import declarative_base

from openversion.domain.value_objects import DomainVersion

Base = declarative_base()

# BIGINT is not an alias of SQLite's rowid, so autoincrement needs INTEGER there
BigIntegerId = BigInteger().with_variant(Integer(), "sqlite")


def _new_concurrency_token(current_token=None) -> str:
    """Fresh opaque token for every insert and update"""
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VersionModel(Base):
    """
    Versions table - current release number of each branch identifier.

    concurrency_token is the mapper's version_id_col: SQLAlchemy writes a new
    token on every flush and issues updates as
        UPDATE versions SET ... WHERE id = ? AND concurrency_token = ?
    so a row modified by another writer since it was loaded updates zero rows
    and raises StaleDataError.
    """
    __tablename__ = "versions"

    id = Column(BigIntegerId, primary_key=True, autoincrement=True)
    project_id = Column(BigInteger, nullable=False)
    identifier_name = Column(String(200), nullable=False)  # Branch identifier: main, qa, feature/x
    release_number = Column(String(100), nullable=False)  # major.minor.qa.feature
    meta = Column(String(200), nullable=True)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    concurrency_token = Column(String(32), nullable=False)

    __table_args__ = (
        Index('ix_versions_project_id_identifier_name', 'project_id', 'identifier_name', unique=True),
    )

    __mapper_args__ = {
        "version_id_col": concurrency_token,
        "version_id_generator": _new_concurrency_token,
    }

    @classmethod
    def from_domain(cls, version: DomainVersion) -> "VersionModel":
        """
        Create a row for insertion.

        id is left to the database when the domain version is not persisted yet (id 0).
        """
        return cls(
            id=version.id or None,
            project_id=version.project_id,
            identifier_name=version.identifier_name,
            release_number=version.release_number,
            meta=version.meta,
            last_updated=_utcnow(),
        )

    def update_from(self, version: DomainVersion):
        """Copy new release data; id and key columns never change"""
        self.release_number = version.release_number
        self.meta = version.meta
        self.last_updated = _utcnow()

    def to_domain(self) -> DomainVersion:
        return DomainVersion(
            id=self.id,
            project_id=self.project_id,
            identifier_name=self.identifier_name,
            release_number=self.release_number,
            meta=self.meta,
        )

    def __repr__(self) -> str:
        return (
            f"VersionModel(id={self.id}, project_id={self.project_id}, "
            f"identifier_name={self.identifier_name!r}, release_number={self.release_number!r})"
        )
