"""
Tests for the GitHub repository locator.
"""

import pytest

from upforgrabs.services.locator import find_github_identifier, locate


class TestFindGithubIdentifier:

    @pytest.mark.parametrize("url,expected", [
        ("https://github.com/foo/bar", "foo/bar"),
        ("https://github.com/foo/bar/", "foo/bar"),
        ("https://github.com/foo/bar/labels/help%20wanted", "foo/bar"),
        ("https://github.com/foo/bar/issues?q=is%3Aopen#top", "foo/bar"),
        ("http://github.com/Foo/Bar", "Foo/Bar"),
        ("https://GitHub.com/foo/bar", "foo/bar"),
    ])
    def test_repository_urls(self, url, expected):
        assert find_github_identifier(url) == expected

    @pytest.mark.parametrize("url", [
        "https://github.com/orgs/foo/projects/1",
        "https://github.com/ORGS/foo",
        "https://github.com/search?q=label%3Ahelp",
        "https://github.com/foo",
        "https://github.com",
        "https://gitlab.com/foo/bar",
        "https://www.github.com/foo/bar",
        "ftp://github.com/foo/bar",
        "github.com/foo/bar",
        "http://[::1",
        "",
        None,
    ])
    def test_no_match(self, url):
        assert find_github_identifier(url) is None

    def test_non_string(self):
        assert find_github_identifier(42) is None


class TestLocate:

    def test_site_wins(self, record_factory):
        record = record_factory(site="https://github.com/site/repo",
                                link="https://github.com/link/repo/labels/x")
        assert locate(record) == "site/repo"

    def test_falls_back_to_label_link(self, record_factory):
        record = record_factory(site="https://example.com/project",
                                link="https://github.com/link/repo/labels/x")
        assert locate(record) == "link/repo"

    def test_hosted_elsewhere(self, record_factory):
        record = record_factory(site="https://example.com/project",
                                link="https://gitlab.com/foo/bar/-/issues")
        assert locate(record) is None
