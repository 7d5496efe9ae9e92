"""
Validate command for upforgrabs.

Runs on pull requests that touch project files and produces the
markdown report posted back to the pull request.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from ..cli_utils import add_common_options, build_client, exit_on_command_error, set_verbose
from ..config import load_config
from ..domain.health import RateLimited
from ..domain.record import RecordParseError
from ..domain.validation import SchemaInvalid
from ..exit_codes import SUCCESS, CommandError, MissingInputError, RateLimitExhausted
from ..infra.record_store import load_record, load_schema
from ..render import format_validation_report
from ..services.validation_service import PullRequestValidator

logger = logging.getLogger(__name__)


def read_event_payload(event_path: Optional[str]) -> Dict[str, Any]:
    """
    Read the webhook payload GitHub Actions stores for the triggering event.

    Raises:
        MissingInputError: the path is unset or points at nothing
        CommandError: the file is not valid JSON
    """
    if not event_path:
        raise MissingInputError("Expected environment variable GITHUB_EVENT_PATH was not set")

    path = Path(event_path)
    if not path.exists():
        raise MissingInputError("Environment variable GITHUB_EVENT_PATH points to file that doesn't exist")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise CommandError(f"Unable to read event payload {path}: {e}")

    if not isinstance(payload, dict):
        raise CommandError(f"Event payload {path} is not a JSON object")
    return payload


@click.command('validate')
@click.argument('files', nargs=-1)
@add_common_options('root', 'verbose')
@click.option('--schema', 'schema_path', type=click.Path(dir_okay=False),
              help='JSON schema for project files (default: <root>/schema.json)')
@click.option('--event-path', help='Event payload file (default: GITHUB_EVENT_PATH)')
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Write the report to a file instead of stdout')
@exit_on_command_error
def validate_handler(
    files: Tuple[str, ...],
    root: Optional[str],
    verbose: bool,
    schema_path: Optional[str],
    event_path: Optional[str],
    output: Optional[str],
):
    """
    Check project files changed by a pull request.

    FILES are paths relative to the registry root. Each file gets one
    block in the report: its schema is checked first, then its GitHub
    repository, then its contribution label. Only the first problem
    found is reported.

    Exits 78 when the GitHub API rate limit stops the checks. The report
    is still written, with the files left unchecked marked as such.

    \b
    Examples:
        upforgrabs validate _data/projects/foo.yml _data/projects/bar.yml
        upforgrabs validate _data/projects/foo.yml -o report.md
    """
    if not files:
        click.echo("No project files need to be validated")
        sys.exit(SUCCESS)

    config = load_config()
    set_verbose(verbose)

    payload = read_event_payload(event_path or config.get('event_path'))
    number = (payload.get('pull_request') or {}).get('number') or payload.get('number')
    if number:
        logger.info(f"Validating {len(files)} project file(s) for pull request #{number}")

    registry = config['registry']
    root_path = Path(root or registry.get('root') or '.').expanduser()

    schema_file = Path(schema_path) if schema_path else root_path / registry.get('schema', 'schema.json')
    if not schema_file.exists():
        raise MissingInputError(f"Schema file {schema_file} not found")
    try:
        schema = load_schema(schema_file)
    except (OSError, ValueError) as e:
        raise CommandError(f"Unable to load schema {schema_file}: {e}")

    validator = PullRequestValidator(build_client(config))

    results = []
    halted = False
    for file_name in files:
        try:
            record = load_record(root_path / file_name, root_path)
        except RecordParseError as e:
            results.append((e.path, SchemaInvalid((e.message,))))
            continue

        if halted:
            results.append((record.relative_path, RateLimited()))
            continue

        try:
            results.append((record.relative_path, validator.validate(record, schema)))
        except RateLimitExhausted:
            # keep every file in the report; the rest are marked unchecked
            halted = True
            results.append((record.relative_path, RateLimited()))

    report = format_validation_report(results)

    if output:
        Path(output).write_text(report + "\n", encoding='utf-8')
        logger.info(f"Report written to {output}")
    else:
        click.echo(report)

    if halted:
        raise RateLimitExhausted()

    sys.exit(SUCCESS)
