"""
Service layer for upforgrabs.

Contains the reconciliation workflow, built on the GitHub gateway:
- locate: Find the GitHub repository a record refers to
- RepositoryHealthClassifier: Active, archived, missing or moved
- DeprecationPublisher: Idempotent removal pull requests
- RegistrySweeper: The scheduled sweep over every record
- PullRequestValidator: Checks for records changed in a pull request

Services are the primary API for commands to use.
"""

from .locator import locate, find_github_identifier
from .health_service import RepositoryHealthClassifier
from .deprecation_service import DeprecationPublisher, OpenRemovalIndex
from .sweep_service import RegistrySweeper, SweepReport, SweepEntry
from .validation_service import PullRequestValidator

__all__ = [
    'locate',
    'find_github_identifier',
    'RepositoryHealthClassifier',
    'DeprecationPublisher',
    'OpenRemovalIndex',
    'RegistrySweeper',
    'SweepReport',
    'SweepEntry',
    'PullRequestValidator',
]
