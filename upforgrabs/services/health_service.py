"""
Repository health classification.

One GitHub call per identifier, checked against the rate budget first.
Every failure becomes a HealthResult; nothing is raised to the caller,
so one bad record cannot abort a sweep.
"""

import logging

import requests

from ..domain.health import (
    HealthResult,
    Active,
    Archived,
    Missing,
    Moved,
    RateLimited,
    Error,
)
from ..infra.github_client import GitHubClient, GitHubError, GitHubNotFound, GitHubRateLimited
from ..infra.rate_budget import BudgetStatus

logger = logging.getLogger(__name__)


class RepositoryHealthClassifier:
    """
    Classifies a repository as active, archived, missing, moved or error.

    No retries and no caching: calling twice for an unchanged repository
    asks GitHub twice and gets the same answer.

    Example:
        classifier = RepositoryHealthClassifier(client)
        result = classifier.classify("foo/bar")
        if isinstance(result, Moved):
            print(f"now at {result.canonical}")
    """

    def __init__(self, client: GitHubClient):
        self.client = client

    def classify(self, identifier: str) -> HealthResult:
        try:
            if self.client.gate.check() is BudgetStatus.EXHAUSTED:
                return RateLimited()

            repo = self.client.get_repo(identifier)
        except GitHubNotFound:
            return Missing()
        except GitHubRateLimited:
            return RateLimited()
        except (GitHubError, requests.RequestException, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unable to query repository {identifier}: {e}")
            return Error(str(e) or e.__class__.__name__)

        # archival wins over rename detection
        if repo.archived:
            return Archived()

        if identifier.lower() != repo.full_name.lower():
            return Moved(repo.full_name)

        return Active(identifier)
