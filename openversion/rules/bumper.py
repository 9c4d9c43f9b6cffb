"""
Version bumper - ordered rule evaluation.

Rules are sorted by priority once at construction; the list is read-only
afterwards and safe to share between concurrent requests.
"""
import logging
from typing import Iterable, List, Optional

from openversion.core.interfaces import CurrentVersions, IVersionBumper, IVersionRule, VersionContext
from openversion.domain.errors import UnsupportedBranchError
from openversion.domain.result import Result
from openversion.domain.value_objects import DomainVersion
from openversion.rules.version_rules import (
    FeatureBumpRule,
    FixBumpRule,
    MainMajorBumpRule,
    MainMinorBumpRule,
    QaBumpRule,
)

logger = logging.getLogger(__name__)


def default_rules() -> List[IVersionRule]:
    """Production rule set"""
    return [
        MainMajorBumpRule(),
        MainMinorBumpRule(),
        QaBumpRule(),
        FeatureBumpRule(),
        FixBumpRule(),
    ]


class VersionBumper(IVersionBumper):
    """Selects the first applicable rule (lowest priority) and delegates to it"""

    def __init__(self, rules: Optional[Iterable[IVersionRule]] = None):
        """
        Args:
            rules: Rule set to use; defaults to default_rules().
                   Sorting is stable, so equal priorities keep their given order.
        """
        if rules is None:
            rules = default_rules()
        self._rules = tuple(sorted(rules, key=lambda rule: rule.priority))

    @property
    def rules(self) -> tuple:
        return self._rules

    async def calculate_next_version(
        self,
        branch_name: str,
        project_id: int,
        current_versions: CurrentVersions,
        context: Optional[VersionContext] = None
    ) -> Result[DomainVersion]:
        for rule in self._rules:
            if rule.can_apply(branch_name, current_versions, context):
                logger.debug(f"Rule {rule.name} (priority {rule.priority}) selected for '{branch_name}'")
                # First match wins, even when it fails
                return await rule.apply(branch_name, project_id, current_versions, context)

        logger.info(f"No rule applies to branch '{branch_name}'")
        return Result.failure(UnsupportedBranchError(branch_name))
