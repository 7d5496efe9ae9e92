"""
Tests for the registry sweep.
"""

from upforgrabs.domain.deprecation import Created, Failed
from upforgrabs.domain.health import Active, Archived, Missing, Moved, SkippedNoIdentifier
from upforgrabs.domain.record import RecordParseError
from upforgrabs.infra.github_client import GitHubAPIError, GitHubRateLimited
from upforgrabs.infra.rate_budget import RateBudget
from upforgrabs.services.deprecation_service import DeprecationPublisher
from upforgrabs.services.health_service import RepositoryHealthClassifier
from upforgrabs.services.sweep_service import RegistrySweeper, SweepEntry

from conftest import FakeGitHub, make_record

REGISTRY = 'owner/registry'


def make_sweeper(github, **publisher_options):
    publisher = DeprecationPublisher(github, sha='abc123', **publisher_options)
    return RegistrySweeper(RepositoryHealthClassifier(github), publisher, REGISTRY)


class TestRegistrySweeper:

    def test_archived_record_is_deprecated(self, github):
        github.add_repo('foo/bar', archived=True)
        record = make_record('_data/projects/foo.yml', site='https://github.com/foo/bar')

        report = make_sweeper(github).sweep([record])

        entry = report.entries[0]
        assert entry.classification == Archived()
        assert isinstance(entry.outcome, Created)
        assert github.pulls[-1]['head'] == 'projects/deprecated/foo'
        assert 'archived the repository' in github.pulls[-1]['body']
        assert entry.ok
        assert not report.inconclusive

    def test_missing_record_is_deprecated(self, github):
        record = make_record('_data/projects/gone.yml', site='https://github.com/foo/gone')

        report = make_sweeper(github).sweep([record])

        assert report.entries[0].classification == Missing()
        assert isinstance(report.entries[0].outcome, Created)
        assert 'not reachable via the GitHub API' in github.pulls[-1]['body']

    def test_externally_hosted_makes_no_api_calls(self, github):
        record = make_record(site='https://example.com/project',
                             link='https://example.com/project/issues?label=help')

        report = make_sweeper(github).sweep([record])

        assert report.entries[0].classification == SkippedNoIdentifier()
        assert report.entries[0].ok
        assert github.calls == []

    def test_active_record_left_alone(self, github):
        github.add_repo('foo/bar')

        report = make_sweeper(github).sweep([make_record()])

        assert report.entries[0].classification == Active('foo/bar')
        assert report.entries[0].outcome is None
        assert report.deprecations == []
        assert len(report.successes) == 1

    def test_moved_is_flagged_not_published(self, github):
        github.add_repo('foo/bar', canonical='foo/baz')

        report = make_sweeper(github).sweep([make_record()])

        entry = report.entries[0]
        assert entry.classification == Moved('foo/baz')
        assert entry.outcome is None
        assert entry.error == "Repository foo/bar now lives at foo/baz and should be updated"
        assert github.calls_to('create_pull_request') == 0

    def test_classification_error_is_recorded(self, github):
        github.failures['get_repo'] = GitHubAPIError("GitHub API error 502", 502)

        report = make_sweeper(github).sweep([make_record()])

        assert report.entries[0].error == "Unknown exception for file: GitHub API error 502"
        assert not report.inconclusive

    def test_failed_publish_is_an_error(self, github):
        github.add_repo('foo/bar', archived=True)
        github.failures['delete_file'] = GitHubAPIError("conflict", 409)

        report = make_sweeper(github).sweep([make_record(), make_record('_data/projects/next.yml')])

        first = report.entries[0]
        assert isinstance(first.outcome, Failed)
        assert first.error == "Unable to create pull request to remove project _data/projects/foo.yml - conflict"
        # later records still run
        assert report.processed == 2

    def test_parse_errors_and_missing_fields(self, github):
        github.add_repo('foo/bar')
        parse_error = RecordParseError('_data/projects/broken.yml', 'Unable to parse the contents of file')
        incomplete = make_record('_data/projects/incomplete.yml', link=None, name=None)

        report = make_sweeper(github).sweep([incomplete, make_record()], [parse_error])

        paths = [e.path for e in report.errors]
        assert paths == ['_data/projects/broken.yml', '_data/projects/incomplete.yml']
        assert report.errors[1].error == "Missing required field(s): upforgrabs.link, upforgrabs.name"
        assert report.processed == 3

    def test_halts_when_budget_runs_out(self):
        # four calls' worth of budget: records 1-4 are classified, record 5 finds it spent
        github = FakeGitHub(remaining=4, limit=5000)
        records = []
        for n in range(1, 11):
            github.add_repo(f'foo/repo{n}')
            records.append(make_record(f'_data/projects/p{n:02}.yml', site=f'https://github.com/foo/repo{n}'))

        report = make_sweeper(github).sweep(records)

        assert report.inconclusive
        assert report.processed == 5
        assert [e.path for e in report.entries] == [f'_data/projects/p{n:02}.yml' for n in range(1, 6)]
        assert report.entries[-1].halted
        assert report.errors == []
        assert github.calls_to('get_repo') == 4

    def test_rate_limited_response_halts(self, github):
        github.add_repo('foo/bar')
        github.failures['get_repo'] = GitHubRateLimited("Rate limited", 403)

        report = make_sweeper(github).sweep([make_record(), make_record('_data/projects/next.yml')])

        assert report.inconclusive
        assert report.processed == 1

    def test_exhaustion_while_publishing_halts(self, github):
        github.add_repo('foo/bar', archived=True)
        github.gate.observe(RateBudget(2, 5000, 60))

        report = make_sweeper(github).sweep([make_record(), make_record('_data/projects/next.yml')])

        assert report.inconclusive
        assert report.processed == 1
        assert report.entries[0].classification == Archived()
        assert report.entries[0].outcome is None
        assert report.entries[0].halted


class TestSweepReport:

    def test_entry_dict_drops_empty_fields(self):
        entry = SweepEntry(path='_data/projects/foo.yml', classification=Active('foo/bar'))
        assert entry.to_dict() == {
            'path': '_data/projects/foo.yml',
            'classification': {'kind': 'active', 'repository': 'foo/bar'},
        }

    def test_summary_dict(self, github):
        github.add_repo('foo/bar', archived=True)

        report = make_sweeper(github).sweep([make_record()])
        summary = report.to_dict()

        assert summary['type'] == 'summary'
        assert summary['processed'] == 1
        assert summary['errors'] == 0
        assert summary['deprecations'] == 1
        assert summary['inconclusive'] is False
