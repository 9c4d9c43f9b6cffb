"""
Version repository implementation using SQLAlchemy.

Optimistic concurrency:
- get_current_versions() loads the project's rows into the session and
  remembers them as the snapshot (identity map refreshed on every call)
- save_version() updates the snapshot row, so the UPDATE is guarded by the
  concurrency token read with the snapshot, not by a token re-read at save time
- a key the snapshot did not contain is always INSERTed; a concurrent insert
  of the same key hits the unique index

Both StaleDataError (token changed) and IntegrityError on insert (key created
concurrently) are reported as VersionConcurrencyError so the caller re-fetches
and recomputes.
"""

from typing import Dict, Optional, Set, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
import logging

from openversion.core.interfaces import IVersionRepository
from openversion.db.models import VersionModel
from openversion.domain.errors import ApplicationError, VersionConcurrencyError
from openversion.domain.result import Result
from openversion.domain.value_objects import DomainVersion

logger = logging.getLogger(__name__)

REPOSITORY_ERROR = "RepositoryError"


class VersionRepository(IVersionRepository):
    """
    SQLAlchemy implementation of IVersionRepository.

    One instance per session (per request). Not safe to share between
    concurrent tasks.
    """

    def __init__(self, db_session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            db_session: SQLAlchemy async session
        """
        self._db = db_session
        self._rows: Dict[Tuple[int, str], VersionModel] = {}
        self._snapshot_projects: Set[int] = set()

    async def get_current_versions(self, project_id: int) -> Result[Dict[str, DomainVersion]]:
        """
        Fetch all stored versions of a project.

        Returns an empty mapping when the project has no rows.
        """
        try:
            stmt = (
                select(VersionModel)
                .where(VersionModel.project_id == project_id)
                # Overwrite identity-mapped rows, including their concurrency tokens
                .execution_options(populate_existing=True)
            )
            result = await self._db.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load versions for project {project_id}: {e}")
            return Result.failure(ApplicationError(REPOSITORY_ERROR, str(e), e))

        for key in [key for key in self._rows if key[0] == project_id]:
            del self._rows[key]
        for row in rows:
            self._rows[(row.project_id, row.identifier_name)] = row
        self._snapshot_projects.add(project_id)

        versions = {row.identifier_name: row.to_domain() for row in rows}
        logger.debug(f"Loaded {len(versions)} version(s) for project {project_id}")
        return Result.success(versions)

    async def save_version(self, version: DomainVersion) -> Result[None]:
        """
        Insert or update a version by (project_id, identifier_name) and commit.

        Returns:
            Success, VersionConcurrencyError on an optimistic-lock failure,
            or ApplicationError for any other storage failure
        """
        key = (version.project_id, version.identifier_name)
        inserting = False

        try:
            row = self._rows.get(key)
            if row is None and version.project_id not in self._snapshot_projects:
                # No snapshot taken: plain upsert against current state
                row = await self._find(version.project_id, version.identifier_name)

            if row is None:
                inserting = True
                row = VersionModel.from_domain(version)
                self._db.add(row)
            else:
                row.update_from(version)

            await self._db.commit()

        except StaleDataError as e:
            await self._reset()
            logger.warning(
                f"Concurrency token mismatch saving {version.identifier_name} "
                f"(project {version.project_id})"
            )
            return Result.failure(VersionConcurrencyError(version, e))

        except IntegrityError as e:
            await self._reset()
            if inserting:
                logger.warning(
                    f"{version.identifier_name} (project {version.project_id}) "
                    f"was created concurrently"
                )
                return Result.failure(VersionConcurrencyError(version, e))
            logger.error(f"Integrity error saving {version}: {e}")
            return Result.failure(ApplicationError(REPOSITORY_ERROR, str(e), e))

        except SQLAlchemyError as e:
            await self._reset()
            logger.error(f"Failed to save version {version}: {e}")
            return Result.failure(ApplicationError(REPOSITORY_ERROR, str(e), e))

        self._rows[key] = row
        logger.info(
            f"💾 Saved {version.identifier_name}={version.display} "
            f"(project {version.project_id}, id {row.id})"
        )
        return Result.success()

    async def _find(self, project_id: int, identifier_name: str) -> Optional[VersionModel]:
        result = await self._db.execute(
            select(VersionModel).where(
                VersionModel.project_id == project_id,
                VersionModel.identifier_name == identifier_name
            )
        )
        return result.scalar_one_or_none()

    async def _reset(self):
        """Roll back the failed transaction; the snapshot is no longer valid"""
        await self._db.rollback()
        self._rows.clear()
        self._snapshot_projects.clear()
