"""
Read-only access to the registry's record files and schema.

Record files are parsed with yaml.safe_load. Parse failures are raised
as RecordParseError keyed to the file, never as raw YAML errors.
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple, Union

import yaml
from jsonschema import Draft7Validator, FormatChecker

from ..domain.record import Record, RecordParseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def relative_path(full_path: PathLike, root: PathLike) -> str:
    """Path of a file relative to the registry root, with forward slashes."""
    full_path = Path(full_path).resolve()
    try:
        return full_path.relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        return full_path.as_posix()


def _describe_yaml_error(error: yaml.YAMLError) -> str:
    mark = getattr(error, 'problem_mark', None)
    problem = getattr(error, 'problem', None) or str(error)
    if mark is None:
        return f"Unable to parse the contents of file - Problem: {problem}"
    return (
        f"Unable to parse the contents of file - Line: {mark.line + 1}, "
        f"Offset: {mark.column + 1}, Problem: {problem}"
    )


def load_record(full_path: PathLike, root: PathLike) -> Record:
    """
    Load one record file.

    Args:
        full_path: Path to the YAML file
        root: Registry root, used to compute the record's relative path

    Returns:
        The parsed Record

    Raises:
        RecordParseError: if the file is unreadable, is not valid YAML,
            or does not hold a mapping
    """
    path = relative_path(full_path, root)

    try:
        contents = Path(full_path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise RecordParseError(path, f"Unable to read file: {e}")

    try:
        data = yaml.safe_load(contents)
    except yaml.YAMLError as e:
        raise RecordParseError(path, _describe_yaml_error(e))

    if not isinstance(data, dict):
        raise RecordParseError(path, "Expected the file to contain a mapping of project fields")

    return Record.from_mapping(path, data)


def load_records(root: PathLike, pattern: str = "_data/projects/*.yml") -> Tuple[List[Record], List[RecordParseError]]:
    """
    Load every record file matching pattern under root.

    Returns:
        (records, errors), both ordered by relative path
    """
    root = Path(root).expanduser()
    records: List[Record] = []
    errors: List[RecordParseError] = []

    for full_path in sorted(root.glob(pattern)):
        if not full_path.is_file():
            continue
        try:
            records.append(load_record(full_path, root))
        except RecordParseError as e:
            logger.debug(f"Failed to parse {e.path}: {e.message}")
            errors.append(e)

    logger.debug(f"Loaded {len(records)} records from {root} ({len(errors)} unreadable)")
    return records, errors


def load_schema(path: PathLike) -> Draft7Validator:
    """Build a JSON Schema validator from the registry's schema file."""
    with open(path, 'r', encoding='utf-8') as f:
        schema = json.load(f)
    return Draft7Validator(schema, format_checker=FormatChecker())
