"""
Shared fixtures for upforgrabs tests.

FakeGitHub stands in for GitHubClient: same method surface, a real
RateBudgetGate, and in-memory repositories, refs, pull requests and
labels. Every call costs one unit of budget, like the real API.
"""

from typing import Any, Dict, List, Optional

import pytest

from upforgrabs.domain.deprecation import PullRequestRef
from upforgrabs.domain.record import Record
from upforgrabs.infra.github_client import GitHubNotFound, GitHubRepo
from upforgrabs.infra.rate_budget import RateBudget, RateBudgetGate


class FakeGitHub:
    """In-memory GitHub with a shrinking rate budget."""

    def __init__(self, remaining: int = 5000, limit: int = 5000):
        self.gate = RateBudgetGate(fetch_budget=lambda: RateBudget(remaining, limit, 3600))
        self.repos: Dict[str, GitHubRepo] = {}
        self.refs: Dict[str, Dict[str, Any]] = {}
        self.pulls: List[Dict[str, Any]] = []
        self.pull_files: Dict[int, List[Dict[str, Any]]] = {}
        self.labels: Dict[str, List[str]] = {}
        self.deleted: List[Dict[str, Any]] = []
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self._next_number = 100

    def _spend(self, name: str) -> None:
        self.calls.append(name)
        failure = self.failures.get(name)
        if failure is not None:
            raise failure
        budget = self.gate.budget
        if budget is not None:
            self.gate.observe(RateBudget(budget.remaining - 1, budget.limit, budget.reset_seconds))

    def calls_to(self, name: str) -> int:
        return self.calls.count(name)

    def add_repo(self, full_name: str, archived: bool = False, canonical: Optional[str] = None) -> None:
        self.repos[full_name.lower()] = GitHubRepo(full_name=canonical or full_name, archived=archived)

    def add_removal_pull(self, number: int, path: str) -> None:
        self.pulls.append({'number': number, 'html_url': f'https://github.com/owner/registry/pull/{number}'})
        self.pull_files[number] = [{'filename': path, 'status': 'removed'}]

    # GitHubClient surface

    def get_rate_limit(self) -> RateBudget:
        return self.gate.budget

    def get_repo(self, full_name: str) -> GitHubRepo:
        self._spend('get_repo')
        repo = self.repos.get(full_name.lower())
        if repo is None:
            raise GitHubNotFound(f"Not found: GET repos/{full_name}", 404)
        return repo

    def get_ref(self, full_name: str, ref: str) -> Optional[Dict[str, Any]]:
        self._spend('get_ref')
        return self.refs.get(ref)

    def create_ref(self, full_name: str, ref: str, sha: str) -> Dict[str, Any]:
        self._spend('create_ref')
        self.refs[ref] = {'ref': f'refs/{ref}', 'object': {'sha': sha}}
        return self.refs[ref]

    def update_ref(self, full_name: str, ref: str, sha: str, force: bool = False) -> Dict[str, Any]:
        self._spend('update_ref')
        self.refs[ref] = {'ref': f'refs/{ref}', 'object': {'sha': sha}, 'forced': force}
        return self.refs[ref]

    def get_contents(self, full_name: str, path: str, ref: Optional[str] = None) -> Dict[str, Any]:
        self._spend('get_contents')
        return {'path': path, 'sha': f'blob-{path}'}

    def delete_file(self, full_name: str, path: str, message: str, sha: str, branch: str) -> Dict[str, Any]:
        self._spend('delete_file')
        change = {'path': path, 'message': message, 'sha': sha, 'branch': branch}
        self.deleted.append(change)
        return {'commit': {'sha': 'c0ffee'}}

    def list_open_pull_requests(self, full_name: str) -> List[Dict[str, Any]]:
        self._spend('list_open_pull_requests')
        return list(self.pulls)

    def list_pull_request_files(self, full_name: str, number: int) -> List[Dict[str, Any]]:
        self._spend('list_pull_request_files')
        return list(self.pull_files.get(number, []))

    def create_pull_request(self, full_name: str, base: str, head: str, title: str, body: str) -> PullRequestRef:
        self._spend('create_pull_request')
        self._next_number += 1
        number = self._next_number
        self.pulls.append({
            'number': number,
            'html_url': f'https://github.com/{full_name}/pull/{number}',
            'base': base,
            'head': head,
            'title': title,
            'body': body,
        })
        removed = [{'filename': d['path'], 'status': 'removed'} for d in self.deleted if d['branch'] == head]
        self.pull_files[number] = removed[-1:]
        return PullRequestRef(number, f'https://github.com/{full_name}/pull/{number}')

    def get_label(self, full_name: str, name: str) -> Dict[str, Any]:
        self._spend('get_label')
        for label in self.labels.get(full_name.lower(), []):
            if label.lower() == name.lower():
                return {'name': label}
        raise GitHubNotFound(f"Not found: GET repos/{full_name}/labels/{name}", 404)


@pytest.fixture
def github():
    return FakeGitHub()


def make_record(path: str = "_data/projects/foo.yml", site: Optional[str] = None,
                link: Optional[str] = "https://github.com/foo/bar/labels/help-wanted",
                name: Optional[str] = "help-wanted", **extra) -> Record:
    """Build a Record the way the loader would from a YAML mapping."""
    data: Dict[str, Any] = dict(extra)
    data.setdefault('name', 'Foo')
    data.setdefault('desc', 'A project')
    if site is not None:
        data['site'] = site
    upforgrabs = {}
    if link is not None:
        upforgrabs['link'] = link
    if name is not None:
        upforgrabs['name'] = name
    data['upforgrabs'] = upforgrabs
    return Record.from_mapping(path, data)


@pytest.fixture
def record_factory():
    return make_record
