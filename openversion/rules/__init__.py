"""
Branch-naming bump rules and the bumper that orders them.

To add a rule, subclass BumpRule in version_rules.py and list it
in bumper.default_rules().
"""
from openversion.rules.bumper import VersionBumper, default_rules
from openversion.rules.version_rules import (
    BumpRule,
    FeatureBumpRule,
    FixBumpRule,
    MainMajorBumpRule,
    MainMinorBumpRule,
    QaBumpRule,
)

__all__ = [
    "VersionBumper",
    "default_rules",
    "BumpRule",
    "MainMajorBumpRule",
    "MainMinorBumpRule",
    "QaBumpRule",
    "FeatureBumpRule",
    "FixBumpRule",
]
