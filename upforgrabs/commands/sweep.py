"""
Sweep command for upforgrabs.

Checks every project in the registry against GitHub and opens a pull
request removing each project whose repository is archived or gone.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..cli_utils import add_common_options, build_client, exit_on_command_error, set_verbose
from ..config import load_config
from ..exit_codes import INCONCLUSIVE, SUCCESS, MissingInputError
from ..infra.record_store import load_records
from ..render import format_sweep_summary, render_sweep_table
from ..services.deprecation_service import DeprecationPublisher
from ..services.health_service import RepositoryHealthClassifier
from ..services.sweep_service import RegistrySweeper

logger = logging.getLogger(__name__)


@click.command('sweep')
@add_common_options('root', 'dry_run', 'verbose')
@click.option('--repository', help='Registry repository to open pull requests against (owner/repo)')
@click.option('--sha', help='Commit deprecation branches start from (default: GITHUB_SHA)')
@click.option('--publishing-branch', help='Branch serving the live registry (default: gh-pages)')
@click.option('--pretty', is_flag=True, help='Show results as a table')
@click.option('--json', 'as_json', is_flag=True, help='Emit one JSON object per record, then a summary')
@exit_on_command_error
def sweep_handler(
    root: Optional[str],
    dry_run: bool,
    verbose: bool,
    repository: Optional[str],
    sha: Optional[str],
    publishing_branch: Optional[str],
    pretty: bool,
    as_json: bool,
):
    """
    Find projects whose GitHub repository is archived or missing.

    Each such project gets a `projects/deprecated/<name>` branch removing
    its file and a pull request against the publishing branch. Projects
    that already have an open removal pull request are left alone.
    Renamed repositories are reported for a human to fix.

    Exits 78 when the GitHub API rate limit stops the sweep early.

    \b
    Examples:
        # Inside GitHub Actions (repository, sha and root from the runner)
        upforgrabs sweep
        # Preview against a local checkout
        upforgrabs sweep --root ~/up-for-grabs.net --repository up-for-grabs/up-for-grabs.net --dry-run
    """
    config = load_config()
    set_verbose(verbose)
    verbose = verbose or bool(config.get('verbose'))

    github = config['github']
    repository = repository or github.get('repository')
    if not repository:
        raise MissingInputError("Registry repository not set (use --repository or GITHUB_REPOSITORY)")

    registry = config['registry']
    root_path = Path(root or registry.get('root') or '.').expanduser()

    client = build_client(config)
    publisher = DeprecationPublisher(
        client,
        sha=sha or github.get('sha') or None,
        publishing_branch=publishing_branch or github.get('publishing_branch') or 'gh-pages',
        dry_run=dry_run,
    )
    sweeper = RegistrySweeper(RepositoryHealthClassifier(client), publisher, repository)

    logger.info(f"Inspecting projects files for '{repository}'")
    records, parse_errors = load_records(root_path, registry.get('projects_glob', '_data/projects/*.yml'))
    report = sweeper.sweep(records, parse_errors)

    if as_json:
        for entry in report.entries:
            click.echo(json.dumps(entry.to_dict(), ensure_ascii=False))
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False))
    elif pretty:
        render_sweep_table(report)
    else:
        click.echo(format_sweep_summary(report, verbose=verbose))

    sys.exit(INCONCLUSIVE if report.inconclusive else SUCCESS)
