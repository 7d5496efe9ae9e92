"""
Tests for loading record files and the schema.
"""

import json

import pytest

from upforgrabs.domain.record import RecordParseError
from upforgrabs.infra.record_store import load_record, load_records, load_schema

GOOD = """\
name: Foo
desc: A project
site: https://github.com/foo/bar
tags:
  - python
  - cli
upforgrabs:
  name: help-wanted
  link: https://github.com/foo/bar/labels/help-wanted
"""


@pytest.fixture
def registry(tmp_path):
    projects = tmp_path / '_data' / 'projects'
    projects.mkdir(parents=True)
    return tmp_path


class TestLoadRecord:

    def test_fields(self, registry):
        path = registry / '_data' / 'projects' / 'foo.yml'
        path.write_text(GOOD, encoding='utf-8')

        record = load_record(path, registry)

        assert record.relative_path == '_data/projects/foo.yml'
        assert record.site_url == 'https://github.com/foo/bar'
        assert record.label_name == 'help-wanted'
        assert record.label_link_url == 'https://github.com/foo/bar/labels/help-wanted'
        assert record.tags == ('python', 'cli')
        assert record.stem == 'foo'
        assert record.data['name'] == 'Foo'

    def test_yaml_error_names_position(self, registry):
        path = registry / '_data' / 'projects' / 'bad.yml'
        path.write_text("name: Foo\ndesc: [unclosed\n", encoding='utf-8')

        with pytest.raises(RecordParseError) as excinfo:
            load_record(path, registry)

        assert excinfo.value.path == '_data/projects/bad.yml'
        assert excinfo.value.message.startswith("Unable to parse the contents of file - Line: ")
        assert "Problem: " in excinfo.value.message

    def test_not_a_mapping(self, registry):
        path = registry / '_data' / 'projects' / 'list.yml'
        path.write_text("- one\n- two\n", encoding='utf-8')

        with pytest.raises(RecordParseError):
            load_record(path, registry)


class TestLoadRecords:

    def test_sorted_with_errors_kept_apart(self, registry):
        projects = registry / '_data' / 'projects'
        (projects / 'b.yml').write_text(GOOD, encoding='utf-8')
        (projects / 'a.yml').write_text(GOOD, encoding='utf-8')
        (projects / 'broken.yml').write_text("name: [\n", encoding='utf-8')
        (projects / 'notes.txt').write_text("ignored", encoding='utf-8')

        records, errors = load_records(registry)

        assert [r.relative_path for r in records] == ['_data/projects/a.yml', '_data/projects/b.yml']
        assert [e.path for e in errors] == ['_data/projects/broken.yml']

    def test_empty_registry(self, registry):
        assert load_records(registry) == ([], [])


class TestLoadSchema:

    def test_validator(self, tmp_path):
        path = tmp_path / 'schema.json'
        path.write_text(json.dumps({"type": "object", "required": ["name"]}), encoding='utf-8')

        validator = load_schema(path)

        assert validator.is_valid({'name': 'Foo'})
        assert not validator.is_valid({})
