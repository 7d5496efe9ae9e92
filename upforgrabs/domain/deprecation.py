"""
Deprecation outcomes and the pure helpers behind deprecation pull requests.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import ClassVar, Dict, Any, Optional, Union

BRANCH_PREFIX = "projects/deprecated/"

COMMIT_MESSAGE = "Removing deprecated project from list"

PULL_REQUEST_BODIES = {
    "archived": (
        "This project has been marked as deprecated as the owner has archived "
        "the repository, meaning it will not accept new contributions."
    ),
    "missing": (
        "This project has been marked as deprecated as it is not reachable "
        "via the GitHub API."
    ),
}

GENERIC_BODY = "This project has been marked as deprecated and can be removed from the list."


@dataclass(frozen=True)
class PullRequestRef:
    """Reference to a pull request."""
    number: int
    html_url: str = ""

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'PullRequestRef':
        return cls(number=int(data['number']), html_url=data.get('html_url', ''))

    def to_dict(self) -> Dict[str, Any]:
        return {'number': self.number, 'url': self.html_url}


def deprecation_branch_name(record_path: str) -> str:
    """
    Branch that carries the removal of one record.

    The branch name is the natural key tying a record to at most one
    open deprecation pull request.

    >>> deprecation_branch_name("_data/projects/foo.yml")
    'projects/deprecated/foo'
    """
    return BRANCH_PREFIX + PurePosixPath(record_path).stem


def pull_request_title(record_path: str) -> str:
    return f"Deprecated project: {PurePosixPath(record_path).name}"


def pull_request_body(reason: Optional[str]) -> str:
    return PULL_REQUEST_BODIES.get(reason or "", GENERIC_BODY)


@dataclass(frozen=True)
class Created:
    """A new deprecation pull request was opened."""
    pull_request: PullRequestRef
    kind: ClassVar[str] = "created"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'pull_request': self.pull_request.to_dict()}


@dataclass(frozen=True)
class AlreadyOpen:
    """An open pull request already removes this record."""
    pull_request: PullRequestRef
    kind: ClassVar[str] = "already_open"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'pull_request': self.pull_request.to_dict()}


@dataclass(frozen=True)
class Skipped:
    """Nothing was published, deliberately."""
    reason: str
    kind: ClassVar[str] = "skipped"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'reason': self.reason}


@dataclass(frozen=True)
class Failed:
    """An API step failed; only this record is affected."""
    message: str
    kind: ClassVar[str] = "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'message': self.message}


DeprecationOutcome = Union[Created, AlreadyOpen, Skipped, Failed]
