"""
Infrastructure layer for upforgrabs.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access, carrying its RateBudgetGate
- RateBudgetGate: Go/no-go decisions on the API quota
- record_store: Reading record files and the registry schema

These provide clean interfaces that can be mocked for testing.
"""

from .rate_budget import RateBudget, RateBudgetGate, BudgetStatus
from .github_client import (
    GitHubClient,
    GitHubRepo,
    GitHubError,
    GitHubNotFound,
    GitHubRateLimited,
    GitHubAPIError,
)
from .record_store import load_record, load_records, load_schema

__all__ = [
    'RateBudget',
    'RateBudgetGate',
    'BudgetStatus',
    'GitHubClient',
    'GitHubRepo',
    'GitHubError',
    'GitHubNotFound',
    'GitHubRateLimited',
    'GitHubAPIError',
    'load_record',
    'load_records',
    'load_schema',
]
