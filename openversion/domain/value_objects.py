"""
Value Objects for version handling.

Value objects are immutable and carry no identity of their own. Two shapes
live here:
- ReleaseNumber: the four-component counter major.minor.qa.feature
- DomainVersion: a stored (or to-be-stored) version of one branch identifier

ReleaseNumber is deliberately NOT a semver parser. Every bump rule assumes
exactly four dot-separated non-negative integers.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReleaseNumber:
    """
    Four-component release counter.

    Format: major.minor.qa.feature
    Example: 1.4.2.7

    Bumping a component resets every component to its right:
    - major: (a+1).0.0.0
    - minor: a.(b+1).0.0
    - qa:    a.b.(c+1).0
    - feature: a.b.c.(d+1)
    """

    major: int = 0
    minor: int = 0
    qa: int = 0
    feature: int = 0

    def __post_init__(self):
        for name in ("major", "minor", "qa", "feature"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"ReleaseNumber {name} must be >= 0, got {value}")

    @classmethod
    def parse(cls, text: str) -> "ReleaseNumber":
        """
        Parse release number from its dotted string form.

        Args:
            text: String like "1.4.2.7"

        Returns:
            ReleaseNumber instance

        Raises:
            ValueError: If the text is not exactly four non-negative integers
        """
        if text is None:
            raise ValueError("Release number cannot be empty")

        parts = text.split(".")
        if len(parts) != 4:
            raise ValueError(
                f"Invalid release number format: '{text}'. "
                f"Expected format: major.minor.qa.feature"
            )

        numbers = []
        for part in parts:
            # int() would accept " 1" and "+1"; stored values must be plain digits
            if not part.isdigit():
                raise ValueError(
                    f"Invalid release number component in '{text}': "
                    f"'{part}' is not a non-negative integer"
                )
            numbers.append(int(part))

        return cls(*numbers)

    def bump_major(self) -> "ReleaseNumber":
        return ReleaseNumber(self.major + 1, 0, 0, 0)

    def bump_minor(self) -> "ReleaseNumber":
        return ReleaseNumber(self.major, self.minor + 1, 0, 0)

    def bump_qa(self) -> "ReleaseNumber":
        return ReleaseNumber(self.major, self.minor, self.qa + 1, 0)

    def bump_feature(self) -> "ReleaseNumber":
        return ReleaseNumber(self.major, self.minor, self.qa, self.feature + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.qa}.{self.feature}"

    def __repr__(self) -> str:
        return f"ReleaseNumber('{self}')"


def format_version(release_number: str, meta: Optional[str] = None) -> str:
    """
    Render a version for display.

    The meta suffix is appended with a '+' separator only when it carries
    non-whitespace text.

    Examples:
        format_version("1.0.0.0") -> "1.0.0.0"
        format_version("0.1.0.0", "minor") -> "0.1.0.0+minor"
        format_version("0.1.0.0", "  ") -> "0.1.0.0"
    """
    if meta is None or not meta.strip():
        return release_number
    return f"{release_number}+{meta}"


@dataclass(frozen=True)
class DomainVersion:
    """
    Version of one branch identifier within a project.

    (project_id, identifier_name) is unique per stored row. Uniqueness is
    enforced by storage, not here.

    id == 0 means "not persisted yet"; rules always build versions with id 0
    and the repository upserts them by (project_id, identifier_name).

    release_number is kept as the raw stored string. Rules parse it with
    ReleaseNumber.parse() so a malformed stored value surfaces when it is
    bumped instead of when it is listed.
    """

    id: int
    project_id: int
    identifier_name: str
    release_number: str
    meta: Optional[str] = None

    def __post_init__(self):
        if not self.identifier_name:
            raise ValueError("DomainVersion identifier_name cannot be empty")

    @property
    def display(self) -> str:
        """Release number with '+meta' suffix when meta is present"""
        return format_version(self.release_number, self.meta)

    def with_release(self, release_number: str) -> "DomainVersion":
        return DomainVersion(self.id, self.project_id, self.identifier_name, release_number, self.meta)

    def with_meta(self, meta: Optional[str]) -> "DomainVersion":
        return DomainVersion(self.id, self.project_id, self.identifier_name, self.release_number, meta)

    def __str__(self) -> str:
        return f"{self.identifier_name}={self.display}"
