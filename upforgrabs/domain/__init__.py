"""
Domain layer for upforgrabs.

Contains pure domain objects with no I/O or side effects:
- Record: One registry entry loaded from a YAML file
- HealthResult: Classification of a referenced repository
- DeprecationOutcome: What happened when retiring a record
- ValidationResult: Verdict on a record changed by a pull request

Outcomes are closed unions of frozen dataclasses, one per variant.
"""

from .record import Record, RecordParseError
from .health import (
    HealthResult,
    Active,
    Archived,
    Missing,
    Moved,
    RateLimited,
    Error,
    SkippedNoIdentifier,
)
from .deprecation import (
    DeprecationOutcome,
    PullRequestRef,
    Created,
    AlreadyOpen,
    Skipped,
    Failed,
    deprecation_branch_name,
)
from .validation import (
    ValidationResult,
    Valid,
    SchemaInvalid,
    RepositoryProblem,
    LabelProblem,
)

__all__ = [
    'Record',
    'RecordParseError',
    'HealthResult',
    'Active',
    'Archived',
    'Missing',
    'Moved',
    'RateLimited',
    'Error',
    'SkippedNoIdentifier',
    'DeprecationOutcome',
    'PullRequestRef',
    'Created',
    'AlreadyOpen',
    'Skipped',
    'Failed',
    'deprecation_branch_name',
    'ValidationResult',
    'Valid',
    'SchemaInvalid',
    'RepositoryProblem',
    'LabelProblem',
]
