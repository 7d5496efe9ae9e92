"""
GitHub API client infrastructure for upforgrabs.

Provides a thin abstraction over the GitHub REST API:
- One requests.Session per client, token auth when configured
- Rate limit headers from every response are fed to a RateBudgetGate
- 404 and quota exhaustion surface as distinct exceptions

The client never retries. Budget decisions belong to the gate and
backoff policy belongs to the callers.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, List, Dict, Any
from urllib.parse import quote

import requests

from ..domain.deprecation import PullRequestRef
from .rate_budget import RateBudget, RateBudgetGate

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# Page size for list endpoints (GitHub maximum)
PAGE_SIZE = 100


class GitHubError(Exception):
    """Base class for GitHub API failures."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubNotFound(GitHubError):
    """The requested resource does not exist (HTTP 404)."""


class GitHubRateLimited(GitHubError):
    """The API refused the request because the quota is used up."""


class GitHubAPIError(GitHubError):
    """Any other non-success response."""


@dataclass(frozen=True)
class GitHubRepo:
    """The repository metadata this tool cares about."""
    full_name: str
    archived: bool = False
    html_url: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubRepo':
        """Create from GitHub API response."""
        return cls(
            full_name=data['full_name'],
            archived=bool(data.get('archived', False)),
            html_url=data.get('html_url'),
        )


def _encode_path(path: str) -> str:
    """Percent-encode a repository path, keeping the slashes."""
    return quote(path.lstrip('/'), safe='/')


class GitHubClient:
    """
    GitHub API client carrying its own rate budget.

    The gate travels with the transport, so every component that is
    handed a client also sees the same budget.

    Example:
        client = GitHubClient(token="...")
        client.gate.require()
        repo = client.get_repo("owner/repo")
        print(repo.archived)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 30,
        gate: Optional[RateBudgetGate] = None,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (anonymous access when empty)
            api_url: API base URL
            timeout: HTTP request timeout in seconds
            gate: Rate budget gate (a new one seeded from /rate_limit by default)
        """
        self.api_url = (api_url or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'upforgrabs',
        })
        if token:
            self.session.headers['Authorization'] = f'token {token}'

        self.gate = gate or RateBudgetGate()
        if self.gate.fetch_budget is None:
            self.gate.fetch_budget = self.get_rate_limit

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        Send one request and decode the JSON body.

        Raises:
            GitHubNotFound: on 404
            GitHubRateLimited: on 403/429 with no remaining quota
            GitHubAPIError: on any other error status
            requests.RequestException: on transport failure
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)

        self.gate.observe(RateBudget.from_headers(response.headers))

        if response.status_code == 404:
            raise GitHubNotFound(f"Not found: {method} {endpoint}", 404)

        if response.status_code in (403, 429) and response.headers.get('X-RateLimit-Remaining') == '0':
            raise GitHubRateLimited(f"Rate limited: {method} {endpoint}", response.status_code)

        if response.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {method} {endpoint}: {_error_message(response)}",
                response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _paginate(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Collect every page of a list endpoint.

        Callers check the budget before the first page; later pages are
        checked here.

        Raises:
            RateLimitExhausted: the budget ran out between pages
        """
        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            if page > 1:
                self.gate.require()
            page_params = dict(params or {}, per_page=PAGE_SIZE, page=page)
            data = self._request('GET', endpoint, params=page_params) or []
            items.extend(data)
            if len(data) < PAGE_SIZE:
                break
            page += 1

        return items

    def get_rate_limit(self) -> RateBudget:
        """Fetch the core rate limit (this endpoint does not cost quota)."""
        data = self._request('GET', 'rate_limit') or {}
        core = data.get('resources', {}).get('core') or data.get('rate', {})
        reset_at = int(core.get('reset', 0))
        return RateBudget(
            remaining=int(core.get('remaining', 0)),
            limit=int(core.get('limit', 0)),
            reset_seconds=max(0, reset_at - int(time.time())),
        )

    def get_repo(self, full_name: str) -> GitHubRepo:
        """
        Get repository metadata.

        GitHub follows renames, so the returned full_name may differ
        from the one requested.
        """
        return GitHubRepo.from_api_response(self._request('GET', f"repos/{full_name}"))

    def get_ref(self, full_name: str, ref: str) -> Optional[Dict[str, Any]]:
        """Get a git ref such as 'heads/main', or None when absent."""
        try:
            return self._request('GET', f"repos/{full_name}/git/ref/{ref}")
        except GitHubNotFound:
            return None

    def create_ref(self, full_name: str, ref: str, sha: str) -> Dict[str, Any]:
        """Create 'refs/<ref>' pointing at sha."""
        return self._request('POST', f"repos/{full_name}/git/refs", json={
            'ref': f"refs/{ref}",
            'sha': sha,
        })

    def update_ref(self, full_name: str, ref: str, sha: str, force: bool = False) -> Dict[str, Any]:
        """Move an existing ref to sha."""
        return self._request('PATCH', f"repos/{full_name}/git/refs/{ref}", json={
            'sha': sha,
            'force': force,
        })

    def get_contents(self, full_name: str, path: str, ref: Optional[str] = None) -> Dict[str, Any]:
        """Get file metadata (including its blob sha) at a ref."""
        params = {'ref': ref} if ref else None
        return self._request('GET', f"repos/{full_name}/contents/{_encode_path(path)}", params=params)

    def delete_file(self, full_name: str, path: str, message: str, sha: str, branch: str) -> Dict[str, Any]:
        """Commit the removal of a file on a branch."""
        return self._request('DELETE', f"repos/{full_name}/contents/{_encode_path(path)}", json={
            'message': message,
            'sha': sha,
            'branch': branch,
        })

    def list_open_pull_requests(self, full_name: str) -> List[Dict[str, Any]]:
        """List open pull requests."""
        return self._paginate(f"repos/{full_name}/pulls", {'state': 'open'})

    def list_pull_request_files(self, full_name: str, number: int) -> List[Dict[str, Any]]:
        """List the files changed by a pull request."""
        return self._paginate(f"repos/{full_name}/pulls/{number}/files")

    def create_pull_request(self, full_name: str, base: str, head: str, title: str, body: str) -> PullRequestRef:
        """Open a pull request from head into base."""
        data = self._request('POST', f"repos/{full_name}/pulls", json={
            'base': base,
            'head': head,
            'title': title,
            'body': body,
        })
        return PullRequestRef.from_api_response(data)

    def get_label(self, full_name: str, name: str) -> Dict[str, Any]:
        """Get a repository label by name (GitHub matches case-insensitively)."""
        return self._request('GET', f"repos/{full_name}/labels/{quote(name, safe='')}")


def _error_message(response: requests.Response) -> str:
    """Best-effort message from an error response body."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict):
        return str(data.get('message', data))
    return str(data)
