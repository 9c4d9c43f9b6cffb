"""
Version Service - compute-next-version orchestration.

Cycle per attempt:
    fetch snapshot -> bump -> save
    - save succeeded: done
    - VersionConcurrencyError: start over with a fresh snapshot
    - any other failure: stop

The bump is re-derived from the freshly fetched snapshot on every attempt,
so a writer that lost a race recomputes against the winner's committed value
instead of re-saving a stale increment. The request context is reused as-is.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional
import logging

from openversion.core.interfaces import IVersionBumper, IVersionRepository
from openversion.domain.errors import UnexpectedError, ValidationError, VersionConcurrencyError
from openversion.domain.result import Result
from openversion.domain.value_objects import DomainVersion, format_version

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_ID = 1
DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class ComputeNextVersionInput:
    """Compute request: branch, owning project and free-form context (e.g. isMajor)"""
    branch_name: str
    project_id: int = DEFAULT_PROJECT_ID
    context: Optional[Mapping[str, Optional[str]]] = None


@dataclass(frozen=True)
class ComputeNextVersionOutput:
    next_version: str
    version: DomainVersion


@dataclass(frozen=True)
class ProjectVersions:
    project_id: int
    versions: List[DomainVersion] = field(default_factory=list)


class VersionService:
    """
    Application service for version operations.

    Holds no per-request state: one instance may serve any number of
    sequential calls on the same repository.
    """

    def __init__(
        self,
        repository: IVersionRepository,
        bumper: IVersionBumper,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ):
        """
        Args:
            repository: Version storage
            bumper: Rule selection
            max_attempts: Fetch-bump-save cycles before a concurrency conflict is surfaced
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.repository = repository
        self.bumper = bumper
        self.max_attempts = max_attempts

    async def compute_next_version(self, request: ComputeNextVersionInput) -> Result[ComputeNextVersionOutput]:
        """
        Compute, persist and format the next version of a branch.

        Args:
            request: Branch name, project id and optional context

        Returns:
            Result with the formatted version string and the stored version.
            Failures carry ValidationError, UnsupportedBranchError,
            InvalidReleaseNumberError, VersionConcurrencyError (after
            max_attempts conflicts), ApplicationError or UnexpectedError.

        Raises:
            asyncio.CancelledError: Cancellation is never converted into a result
        """
        validation = self._validate(request)
        if validation is not None:
            logger.warning(f"Rejected compute request: {validation.message}")
            return Result.failure(validation)

        try:
            return await self._compute_with_retry(request)
        except Exception as e:
            logger.exception(f"❌ Unexpected error computing version for '{request.branch_name}'")
            return Result.failure(UnexpectedError(
                f"An unexpected error occurred while computing the next version: {e}", e
            ))

    async def get_project_versions(self, project_id: int) -> Result[ProjectVersions]:
        """
        List all stored versions of a project.

        Versions are sorted by identifier name, case-insensitive ordinal.
        """
        if project_id < 1:
            return Result.failure(ValidationError.for_field("projectId", project_id, "must be >= 1"))

        try:
            result = await self.repository.get_current_versions(project_id)
            if result.is_failure:
                return Result.failure(result.error)

            versions = sorted(
                result.value.values(),
                key=lambda v: (v.identifier_name.upper(), v.identifier_name)
            )
            return Result.success(ProjectVersions(project_id=project_id, versions=versions))
        except Exception as e:
            logger.exception(f"❌ Unexpected error listing versions of project {project_id}")
            return Result.failure(UnexpectedError(
                f"An unexpected error occurred while listing versions: {e}", e
            ))

    async def _compute_with_retry(self, request: ComputeNextVersionInput) -> Result[ComputeNextVersionOutput]:
        last_conflict = None

        for attempt in range(1, self.max_attempts + 1):
            # Never reuse a snapshot across attempts
            current = await self.repository.get_current_versions(request.project_id)
            if current.is_failure:
                return Result.failure(current.error)

            bumped = await self.bumper.calculate_next_version(
                request.branch_name,
                request.project_id,
                current.value,
                request.context
            )
            if bumped.is_failure:
                return Result.failure(bumped.error)

            version = bumped.value
            saved = await self.repository.save_version(version)

            if saved.is_success:
                next_version = format_version(version.release_number, version.meta)
                logger.info(
                    f"✅ Next version for '{request.branch_name}' "
                    f"(project {request.project_id}): {next_version}"
                )
                return Result.success(ComputeNextVersionOutput(next_version=next_version, version=version))

            if not isinstance(saved.error, VersionConcurrencyError):
                return Result.failure(saved.error)

            last_conflict = saved.error
            if attempt == self.max_attempts:
                break
            logger.warning(
                f"⚠️ Concurrency conflict saving '{request.branch_name}' "
                f"(attempt {attempt}/{self.max_attempts}), retrying with a fresh snapshot"
            )

        logger.error(
            f"❌ Giving up on '{request.branch_name}' (project {request.project_id}) "
            f"after {self.max_attempts} concurrency conflicts"
        )
        return Result.failure(last_conflict)

    @staticmethod
    def _validate(request: ComputeNextVersionInput) -> Optional[ValidationError]:
        if request.branch_name is None or not request.branch_name.strip():
            return ValidationError("Branch name cannot be empty.", field="branchName", value=request.branch_name)
        if request.project_id is None or request.project_id < 1:
            return ValidationError.for_field("projectId", request.project_id, "must be >= 1")
        return None
