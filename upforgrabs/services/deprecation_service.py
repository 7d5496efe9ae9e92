"""
Deprecation publishing for upforgrabs.

Retires a dead record by committing its removal on a dedicated branch
and opening a pull request against the publishing branch:

1. Create `projects/deprecated/<stem>` at the current commit, or
   force-update it there if it already exists
2. Read the record's blob sha from the publishing branch
3. Delete the record on the deprecation branch
4. Skip if an open pull request already removes the record
5. Otherwise open the pull request

Every step checks the rate budget first. Quota exhaustion is raised as
RateLimitExhausted and ends the run; any other failure only fails the
record at hand.
"""

import logging
from typing import Dict, Optional

import requests

from ..domain.deprecation import (
    COMMIT_MESSAGE,
    DeprecationOutcome,
    PullRequestRef,
    Created,
    AlreadyOpen,
    Skipped,
    Failed,
    deprecation_branch_name,
    pull_request_title,
    pull_request_body,
)
from ..exit_codes import RateLimitExhausted
from ..infra.github_client import GitHubClient, GitHubError, GitHubRateLimited

logger = logging.getLogger(__name__)

GENERIC_REASON = "deprecated"

_FAILURES = (GitHubError, requests.RequestException, KeyError, TypeError, ValueError)


class OpenRemovalIndex:
    """
    Map of record path to the open pull request that removes it.

    Built on first use by scanning every open pull request's changed
    files once, so the scan costs one pass per run instead of one pass
    per deprecated record. The budget is checked before each pull
    request inspected.
    """

    def __init__(self, client: GitHubClient, repository: str):
        self.client = client
        self.repository = repository
        self._removals: Optional[Dict[str, PullRequestRef]] = None

    def _build(self) -> Dict[str, PullRequestRef]:
        removals: Dict[str, PullRequestRef] = {}

        self.client.gate.require()
        pulls = self.client.list_open_pull_requests(self.repository)

        for pull in pulls:
            self.client.gate.require()
            pull_request = PullRequestRef.from_api_response(pull)
            for changed in self.client.list_pull_request_files(self.repository, pull_request.number):
                if changed.get('status') == 'removed':
                    removals.setdefault(changed.get('filename'), pull_request)

        logger.debug(f"Indexed {len(removals)} pending removals across {len(pulls)} open pull requests")
        return removals

    def find(self, path: str) -> Optional[PullRequestRef]:
        if self._removals is None:
            self._removals = self._build()
        return self._removals.get(path)

    def add(self, path: str, pull_request: PullRequestRef) -> None:
        if self._removals is not None:
            self._removals.setdefault(path, pull_request)


class DeprecationPublisher:
    """
    Opens at most one deprecation pull request per record.

    Example:
        publisher = DeprecationPublisher(client, sha=os.environ['GITHUB_SHA'])
        outcome = publisher.publish("owner/registry", "_data/projects/foo.yml", "archived")
    """

    def __init__(
        self,
        client: GitHubClient,
        sha: Optional[str] = None,
        publishing_branch: str = "gh-pages",
        dry_run: bool = False,
    ):
        """
        Initialize DeprecationPublisher.

        Args:
            client: GitHub gateway
            sha: Commit the deprecation branches start from (defaults to
                the head of the publishing branch)
            publishing_branch: Branch serving the live registry
            dry_run: Look, but change nothing
        """
        self.client = client
        self.sha = sha
        self.publishing_branch = publishing_branch
        self.dry_run = dry_run
        self._indexes: Dict[str, OpenRemovalIndex] = {}

    def open_removals(self, repository: str) -> OpenRemovalIndex:
        if repository not in self._indexes:
            self._indexes[repository] = OpenRemovalIndex(self.client, repository)
        return self._indexes[repository]

    def _current_sha(self, repository: str) -> str:
        if not self.sha:
            self.client.gate.require()
            ref = self.client.get_ref(repository, f"heads/{self.publishing_branch}")
            if ref is None:
                raise GitHubError(f"Publishing branch '{self.publishing_branch}' not found in {repository}")
            self.sha = ref['object']['sha']
        return self.sha

    def _refresh_branch(self, repository: str, branch: str) -> None:
        short_ref = f"heads/{branch}"
        sha = self._current_sha(repository)

        self.client.gate.require()
        found = self.client.get_ref(repository, short_ref)

        self.client.gate.require()
        if found is None:
            logger.info(f"Creating ref for '{short_ref}' to point to '{sha}'")
            self.client.create_ref(repository, short_ref, sha)
        else:
            logger.info(f"Updating ref for '{short_ref}' from {found['object']['sha']} to '{sha}'")
            self.client.update_ref(repository, short_ref, sha, force=True)

    def publish(self, repository: str, record_path: str, reason: str = GENERIC_REASON) -> DeprecationOutcome:
        """
        Retire one record.

        Args:
            repository: The registry repository (owner/repo)
            record_path: Record path relative to the repository root
            reason: "archived", "missing", or anything else for the generic text

        Returns:
            Created, AlreadyOpen, Skipped or Failed

        Raises:
            RateLimitExhausted: the budget ran out mid-way
        """
        branch = deprecation_branch_name(record_path)

        try:
            if self.dry_run:
                existing = self.open_removals(repository).find(record_path)
                if existing is not None:
                    return AlreadyOpen(existing)
                logger.info(f"[DRY RUN] Would open pull request from '{branch}' removing '{record_path}'")
                return Skipped("dry run")

            logger.info(f"Creating new pull request for path '{record_path}'")
            self._refresh_branch(repository, branch)

            self.client.gate.require()
            content = self.client.get_contents(repository, record_path, ref=self.publishing_branch)

            self.client.gate.require()
            self.client.delete_file(repository, record_path, COMMIT_MESSAGE, content['sha'], branch)

            existing = self.open_removals(repository).find(record_path)
            if existing is not None:
                logger.info(f"Pull request #{existing.number} already removes '{record_path}'")
                return AlreadyOpen(existing)

            self.client.gate.require()
            pull_request = self.client.create_pull_request(
                repository,
                self.publishing_branch,
                branch,
                pull_request_title(record_path),
                pull_request_body(reason),
            )
        except GitHubRateLimited as e:
            raise RateLimitExhausted() from e
        except _FAILURES as e:
            logger.error(f"Unable to create pull request to remove project {record_path} - '{e}'")
            return Failed(str(e) or e.__class__.__name__)

        self.open_removals(repository).add(record_path, pull_request)
        return Created(pull_request)
