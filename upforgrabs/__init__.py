"""
upforgrabs - Tooling that keeps the Up For Grabs project registry honest.

The registry is a directory of small YAML files, one per project. This
package checks each project's GitHub repository under the API rate
limit and retires dead entries through pull requests.

Quick Start:
    from upforgrabs import GitHubClient, RegistrySweeper
    from upforgrabs import DeprecationPublisher, RepositoryHealthClassifier
    from upforgrabs.infra import load_records

    client = GitHubClient(token="...")
    sweeper = RegistrySweeper(
        RepositoryHealthClassifier(client),
        DeprecationPublisher(client, sha="..."),
        "up-for-grabs/up-for-grabs.net",
    )
    records, errors = load_records("~/up-for-grabs.net")
    report = sweeper.sweep(records, errors)

Domain Objects:
    Record - One registry entry
    HealthResult - Active, Archived, Missing, Moved, RateLimited, Error, SkippedNoIdentifier
    DeprecationOutcome - Created, AlreadyOpen, Skipped, Failed
    ValidationResult - Valid, SchemaInvalid, RepositoryProblem, LabelProblem

Services:
    RepositoryHealthClassifier - One API call, one verdict
    DeprecationPublisher - Idempotent removal pull requests
    RegistrySweeper - The scheduled sweep
    PullRequestValidator - Checks for changed records
"""

__version__ = "0.3.0"

from .domain import Record, deprecation_branch_name
from .infra import GitHubClient, RateBudgetGate
from .services import (
    locate,
    RepositoryHealthClassifier,
    DeprecationPublisher,
    RegistrySweeper,
    PullRequestValidator,
)
from .config import load_config

__all__ = [
    "__version__",
    "Record",
    "deprecation_branch_name",
    "GitHubClient",
    "RateBudgetGate",
    "locate",
    "RepositoryHealthClassifier",
    "DeprecationPublisher",
    "RegistrySweeper",
    "PullRequestValidator",
    "load_config",
]
