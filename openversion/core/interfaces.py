"""
Core interfaces for version computation.

The orchestrator depends only on these contracts:
- IVersionRule: one branch-naming convention's bump policy
- IVersionBumper: picks the rule for a branch and delegates to it
- IVersionRepository: snapshot read + optimistic-concurrency write

Cancellation is asyncio task cancellation; no explicit token is passed.
"""
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from openversion.domain.result import Result
from openversion.domain.value_objects import DomainVersion

# identifier_name -> version, scoped to one project
CurrentVersions = Mapping[str, DomainVersion]
# free-form request context, e.g. {"isMajor": "true"}
VersionContext = Mapping[str, Optional[str]]


class IVersionRule(ABC):
    """
    Interface for a single bump rule.

    Implementations must keep can_apply() pure and fast, and must not
    perform I/O in apply() beyond what is passed in.
    """

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lower runs first"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Diagnostic identifier"""
        pass

    @abstractmethod
    def can_apply(
        self,
        branch_name: str,
        current_versions: CurrentVersions,
        context: Optional[VersionContext] = None
    ) -> bool:
        """
        Check whether this rule handles the branch.

        Args:
            branch_name: Branch identifier (e.g. "main", "feature/x")
            current_versions: Current snapshot of the project
            context: Optional request context

        Returns:
            True if apply() should compute the next version
        """
        pass

    @abstractmethod
    async def apply(
        self,
        branch_name: str,
        project_id: int,
        current_versions: CurrentVersions,
        context: Optional[VersionContext] = None
    ) -> Result[DomainVersion]:
        """
        Compute the next version for the branch.

        Returns:
            Result with a new DomainVersion (id 0), or a failed result
        """
        pass


class IVersionBumper(ABC):
    """Interface for rule selection"""

    @abstractmethod
    async def calculate_next_version(
        self,
        branch_name: str,
        project_id: int,
        current_versions: CurrentVersions,
        context: Optional[VersionContext] = None
    ) -> Result[DomainVersion]:
        """
        Compute the next version with the first applicable rule.

        Returns:
            Result of the selected rule, or a failed result carrying
            UnsupportedBranchError when no rule applies
        """
        pass


class IVersionRepository(ABC):
    """
    Interface for version storage.

    Implementations must:
    - Return an empty mapping (not an error) when a project has no rows
    - Upsert by (project_id, identifier_name)
    - Report optimistic-lock failures as VersionConcurrencyError,
      distinct from other storage errors
    """

    @abstractmethod
    async def get_current_versions(self, project_id: int) -> Result[Dict[str, DomainVersion]]:
        """
        Fetch all stored versions of a project.

        Args:
            project_id: Owning project

        Returns:
            Result with identifier_name -> DomainVersion
        """
        pass

    @abstractmethod
    async def save_version(self, version: DomainVersion) -> Result[None]:
        """
        Insert or update a version and refresh its concurrency token.

        Args:
            version: Version to persist

        Returns:
            Successful result, or a failed result carrying
            VersionConcurrencyError / ApplicationError
        """
        pass
