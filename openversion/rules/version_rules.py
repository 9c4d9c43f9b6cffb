"""
Version bump rules - one class per branch-naming convention.

Release numbers follow major.minor.qa.feature:

| Rule              | Branch           | Base lookup          | Bump     | Meta            |
|-------------------|------------------|----------------------|----------|-----------------|
| MainMajorBumpRule | main + isMajor   | main                 | major    | none            |
| MainMinorBumpRule | main             | main                 | minor    | "minor"         |
| QaBumpRule        | qa*              | self, then main      | qa       | "qa"            |
| FeatureBumpRule   | feature/*        | self, then main      | feature  | feature-<name>  |
| FixBumpRule       | fix/*            | self, then main      | feature  | fix-<name>      |

When no base version exists the rule returns its seed value instead.
"""
import logging
from typing import Optional, Tuple

from openversion.core.interfaces import CurrentVersions, IVersionRule, VersionContext
from openversion.domain.errors import InvalidReleaseNumberError
from openversion.domain.result import Result
from openversion.domain.value_objects import DomainVersion, ReleaseNumber

logger = logging.getLogger(__name__)

MAIN_BRANCH = "main"
IS_MAJOR_KEY = "isMajor"


def is_true(context: Optional[VersionContext], key: str) -> bool:
    """True if context[key] is "true" (case-insensitive)"""
    if not context:
        return False
    value = context.get(key)
    return value is not None and value.lower() == "true"


class BumpRule(IVersionRule):
    """
    Shared apply() for all rules.

    Subclasses declare:
    - priority / name / can_apply()
    - base_lookup: identifiers tried in order ("{self}" is the branch itself)
    - seed: release number used when no base version exists
    - bump(): how the base release number advances
    - meta_for(): meta suffix for the resulting version
    """

    base_lookup: Tuple[str, ...] = ("{self}", MAIN_BRANCH)
    seed: ReleaseNumber = ReleaseNumber()

    @property
    def name(self) -> str:
        return type(self).__name__

    def bump(self, current: ReleaseNumber) -> ReleaseNumber:
        raise NotImplementedError

    def meta_for(self, branch_name: str) -> Optional[str]:
        return None

    def base_version(self, branch_name: str, current_versions: CurrentVersions) -> Optional[DomainVersion]:
        for identifier in self.base_lookup:
            key = branch_name if identifier == "{self}" else identifier
            version = current_versions.get(key)
            if version is not None:
                return version
        return None

    async def apply(
        self,
        branch_name: str,
        project_id: int,
        current_versions: CurrentVersions,
        context: Optional[VersionContext] = None
    ) -> Result[DomainVersion]:
        base = self.base_version(branch_name, current_versions)

        if base is None:
            release = self.seed
            logger.debug(f"{self.name}: no base version for '{branch_name}', seeding {release}")
        else:
            try:
                current = ReleaseNumber.parse(base.release_number)
            except ValueError as e:
                logger.error(f"{self.name}: cannot parse stored version {base}: {e}")
                return Result.failure(InvalidReleaseNumberError(base, e))
            release = self.bump(current)
            logger.debug(f"{self.name}: {base.identifier_name} {current} -> {release}")

        return Result.success(DomainVersion(
            id=0,
            project_id=project_id,
            identifier_name=branch_name,
            release_number=str(release),
            meta=self.meta_for(branch_name)
        ))


class MainMajorBumpRule(BumpRule):
    """main with context isMajor=true: (a+1).0.0.0"""

    base_lookup = (MAIN_BRANCH,)
    seed = ReleaseNumber(1, 0, 0, 0)

    @property
    def priority(self) -> int:
        return 10

    def can_apply(self, branch_name, current_versions, context=None) -> bool:
        return branch_name == MAIN_BRANCH and is_true(context, IS_MAJOR_KEY)

    def bump(self, current: ReleaseNumber) -> ReleaseNumber:
        return current.bump_major()


class MainMinorBumpRule(BumpRule):
    """main without isMajor: a.(b+1).0.0+minor"""

    base_lookup = (MAIN_BRANCH,)
    seed = ReleaseNumber(0, 1, 0, 0)

    @property
    def priority(self) -> int:
        return 15  # after major rule

    def can_apply(self, branch_name, current_versions, context=None) -> bool:
        return branch_name == MAIN_BRANCH and not is_true(context, IS_MAJOR_KEY)

    def bump(self, current: ReleaseNumber) -> ReleaseNumber:
        return current.bump_minor()

    def meta_for(self, branch_name: str) -> Optional[str]:
        return "minor"


class QaBumpRule(BumpRule):
    """qa*: a.b.(c+1).0+qa"""

    seed = ReleaseNumber(0, 0, 1, 0)

    @property
    def priority(self) -> int:
        return 20

    def can_apply(self, branch_name, current_versions, context=None) -> bool:
        return branch_name.startswith("qa")

    def bump(self, current: ReleaseNumber) -> ReleaseNumber:
        return current.bump_qa()

    def meta_for(self, branch_name: str) -> Optional[str]:
        return "qa"


class FeatureBumpRule(BumpRule):
    """feature/*: a.b.c.(d+1)+feature-<name>"""

    prefix = "feature/"
    seed = ReleaseNumber(0, 0, 0, 1)

    @property
    def priority(self) -> int:
        return 30

    def can_apply(self, branch_name, current_versions, context=None) -> bool:
        return branch_name.startswith(self.prefix)

    def bump(self, current: ReleaseNumber) -> ReleaseNumber:
        return current.bump_feature()

    def meta_for(self, branch_name: str) -> Optional[str]:
        # feature/card-123 -> feature-card-123
        return branch_name.replace(self.prefix, self.prefix.rstrip("/") + "-")


class FixBumpRule(FeatureBumpRule):
    """fix/*: a.b.c.(d+1)+fix-<name>"""

    prefix = "fix/"

    @property
    def priority(self) -> int:
        return 40
