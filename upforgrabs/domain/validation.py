"""
Pull request validation outcomes.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Any, Tuple, Union


@dataclass(frozen=True)
class Valid:
    kind: ClassVar[str] = "valid"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind}


@dataclass(frozen=True)
class SchemaInvalid:
    """The file could not be parsed or does not satisfy the schema."""
    errors: Tuple[str, ...]
    kind: ClassVar[str] = "validation"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'errors': list(self.errors)}


@dataclass(frozen=True)
class RepositoryProblem:
    """The referenced repository is archived, missing, moved or unreachable."""
    message: str
    kind: ClassVar[str] = "repository"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'message': self.message}


@dataclass(frozen=True)
class LabelProblem:
    """The declared contribution label is absent or its link is stale."""
    message: str
    kind: ClassVar[str] = "label"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'message': self.message}


ValidationResult = Union[Valid, SchemaInvalid, RepositoryProblem, LabelProblem]
