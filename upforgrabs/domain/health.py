"""
Repository health outcomes.

Each variant is its own frozen dataclass; HealthResult is the closed
union of them. Dispatch with isinstance, and use `kind` for output.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Any, Union


@dataclass(frozen=True)
class Active:
    """Repository exists, is not archived, and lives where the record says."""
    canonical: str
    kind: ClassVar[str] = "active"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'repository': self.canonical}


@dataclass(frozen=True)
class Archived:
    """Owner archived the repository."""
    kind: ClassVar[str] = "archived"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind}


@dataclass(frozen=True)
class Missing:
    """GitHub reports the repository as not found."""
    kind: ClassVar[str] = "missing"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind}


@dataclass(frozen=True)
class Moved:
    """Repository was renamed or transferred to `canonical`."""
    canonical: str
    kind: ClassVar[str] = "moved"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'repository': self.canonical}


@dataclass(frozen=True)
class RateLimited:
    """No API budget was left to ask."""
    kind: ClassVar[str] = "rate_limited"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind}


@dataclass(frozen=True)
class Error:
    """Transport or parse failure while asking."""
    message: str
    kind: ClassVar[str] = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'message': self.message}


@dataclass(frozen=True)
class SkippedNoIdentifier:
    """Record has no GitHub repository; it is hosted elsewhere."""
    kind: ClassVar[str] = "skipped"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind}


HealthResult = Union[Active, Archived, Missing, Moved, RateLimited, Error, SkippedNoIdentifier]

# Classifications that lead to a deprecation pull request, with their reason
DEPRECATION_REASONS = {
    Archived: "archived",
    Missing: "missing",
}
