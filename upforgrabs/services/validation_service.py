"""
Pull request validation for upforgrabs.

Checks a changed record in a fixed order, cheapest first, and stops at
the first problem:

1. Schema (no API calls)
2. Repository health
3. Contribution label
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from ..domain.health import Archived, Missing, Moved, RateLimited, Error
from ..domain.record import Record
from ..domain.validation import (
    ValidationResult,
    Valid,
    SchemaInvalid,
    RepositoryProblem,
    LabelProblem,
)
from ..exit_codes import RateLimitExhausted
from ..infra.github_client import GitHubClient, GitHubError, GitHubNotFound, GitHubRateLimited
from .health_service import RepositoryHealthClassifier
from .locator import find_github_identifier, locate

logger = logging.getLogger(__name__)


def schema_errors(schema: Any, data: Any) -> List[str]:
    """
    Validation errors from a jsonschema-style validator, as text.

    Each error reads "<dotted.path>: <message>", ordered by path.
    """
    errors = sorted(schema.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    messages = []
    for error in errors:
        location = '.'.join(str(p) for p in error.absolute_path) or '(root)'
        messages.append(f"{location}: {error.message}")
    return messages


def canonical_label_url(identifier: str, label_name: str) -> str:
    """The github.com page listing issues for a label."""
    return f"https://github.com/{identifier}/labels/{quote(label_name, safe='')}"


def repository_message(identifier: str, result: Any) -> Optional[str]:
    """Message for a repository problem, or None when the repository is fine."""
    if isinstance(result, Archived):
        return (
            f"The GitHub repository '{identifier}' has been marked as archived, "
            f"which suggests it is not active."
        )
    if isinstance(result, Missing):
        return (
            f"The GitHub repository '{identifier}' cannot be found. "
            f"Please confirm the location of the project."
        )
    if isinstance(result, Moved):
        return (
            f"The GitHub repository '{identifier}' is now at '{result.canonical}'. "
            f"Please update this project before this is merged."
        )
    if isinstance(result, Error):
        return (
            f"The GitHub repository '{identifier}' could not be confirmed. "
            f"Error details: {result.message}"
        )
    return None


class PullRequestValidator:
    """
    Validates records changed by a pull request.

    Example:
        validator = PullRequestValidator(client)
        result = validator.validate(record, load_schema("schema.json"))
    """

    def __init__(self, client: GitHubClient, classifier: Optional[RepositoryHealthClassifier] = None):
        self.client = client
        self.classifier = classifier or RepositoryHealthClassifier(client)

    def validate(self, record: Record, schema: Any) -> ValidationResult:
        """
        Validate one record.

        Args:
            record: The changed record
            schema: Validator exposing iter_errors(instance)

        Returns:
            The first problem found, or Valid

        Raises:
            RateLimitExhausted: the budget ran out before the checks finished
        """
        errors = schema_errors(schema, record.data)
        if errors:
            return SchemaInvalid(tuple(errors))

        identifier = locate(record)
        if identifier is None:
            logger.info(f"{record.relative_path} is not hosted on GitHub, skipping repository checks")
            return Valid()

        result = self.classifier.classify(identifier)
        if isinstance(result, RateLimited):
            raise RateLimitExhausted()

        message = repository_message(identifier, result)
        if message is not None:
            return RepositoryProblem(message)

        message = self.label_check(record, identifier)
        if message is not None:
            return LabelProblem(message)

        return Valid()

    def label_check(self, record: Record, identifier: str) -> Optional[str]:
        """
        Message for a label problem, or None when the label checks out.

        Labels are looked up on the repository named by `upforgrabs.link`,
        which may differ from the one named by `site`.
        """
        label = record.label_name or ''
        link_identifier = find_github_identifier(record.label_link_url)

        try:
            if link_identifier and link_identifier.lower() != identifier.lower():
                self.client.gate.require()
                try:
                    self.client.get_repo(link_identifier)
                except GitHubNotFound:
                    return (
                        f"I couldn't find the GitHub repository '{link_identifier}' that was used in "
                        f"the `upforgrabs.link` value. Please confirm this is correct or hasn't been mis-typed."
                    )
                identifier = link_identifier
            elif link_identifier:
                # same repository, spelled the way the link spells it
                identifier = link_identifier

            self.client.gate.require()
            found = self.client.get_label(identifier, label)
        except GitHubRateLimited as e:
            raise RateLimitExhausted() from e
        except GitHubNotFound:
            found = None
        except (GitHubError, requests.RequestException, KeyError, TypeError, ValueError) as e:
            return (
                f"The label '{label}' for GitHub repository '{identifier}' could not be confirmed. "
                f"Error details: {e}"
            )

        if found is None:
            return (
                f"The `upforgrabs.name` value '{label}' isn't in use on the project in GitHub. "
                f"This might just be a mistake due to copy-pasting the reference template or be mis-typed. "
                f"Please check the list of labels at https://github.com/{identifier}/labels "
                f"and update the project file to use the correct label."
            )

        url = canonical_label_url(identifier, found.get('name') or label)
        link = record.label_link_url or ''

        if link != url and '/labels/' in link:
            return (
                f"The label '{label}' for GitHub repository '{identifier}' does not match "
                f"the specified `upforgrabs.link` value. Please update it to `{url}`."
            )

        return None
