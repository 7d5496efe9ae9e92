"""
Rendering functions for upforgrabs output.

This module handles all report text and table formatting.
Services return data, this module makes it human-readable.
"""

from typing import Any, List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.table import Table

from .domain.health import RateLimited
from .domain.validation import Valid, SchemaInvalid, RepositoryProblem, LabelProblem
from .services.sweep_service import SweepReport, SweepEntry

console = Console()

REPORT_MARKER = "<!-- PULL REQUEST ANALYZER GITHUB ACTION -->"

REPORT_PREAMBLE = f"""{REPORT_MARKER}

:wave: I'm a robot checking the state of this pull request to ensure everything will be fine when merging. I noticed this PR added or modified the data files under `_data/projects` so I had a look at what's changed.

As you make changes to this pull request, I'll re-run these checks to ensure this can be merged by the time someone reviews it.

"""


def format_validation_block(path: str, result: Any) -> str:
    """One report block for one changed record."""
    if isinstance(result, Valid):
        return f"#### `{path}` :white_check_mark: \nNo problems found, everything should be good to merge!"

    if isinstance(result, SchemaInvalid):
        details = "\n".join(f"> - {error}" for error in result.errors)
        return (
            f"#### `{path}` :x:\n"
            "I had some troubles parsing the project file, or there were fields that are missing "
            f"that I need. Here's the details:\n{details}"
        )

    if isinstance(result, (RepositoryProblem, LabelProblem)):
        return f"#### `{path}` :x:\n{result.message}"

    if isinstance(result, RateLimited):
        return (
            f"#### `{path}` :question:\n"
            "The GitHub API rate limit ran out before I could check this project. "
            "I'll take another look when these checks run again."
        )

    kind = getattr(result, 'kind', type(result).__name__)
    return (
        f"#### `{path}` :question:\n"
        f"I got a result of type '{kind}' that I don't know how to handle. "
        "A maintainer will need to take a look at this one."
    )


def format_validation_report(results: Sequence[Tuple[str, Any]]) -> str:
    """
    Markdown body summarizing a pull request's changed records.

    Args:
        results: (relative path, ValidationResult) pairs, one per file

    Returns:
        The full comment body, one block per record in input order
    """
    return REPORT_PREAMBLE + "\n\n".join(format_validation_block(path, result) for path, result in results)


def _describe(entry: SweepEntry) -> str:
    if entry.outcome is not None:
        pull_request = getattr(entry.outcome, 'pull_request', None)
        if pull_request is not None:
            return f"{entry.outcome.kind} #{pull_request.number}"
        return entry.outcome.kind
    if entry.classification is not None:
        return entry.classification.kind
    return ""


def format_sweep_summary(report: SweepReport, verbose: bool = False) -> str:
    """Plain text summary of a sweep, as printed at the end of a run."""
    lines: List[str] = []

    errors = report.errors
    if errors:
        lines.append("Errors found:")
        lines.extend(f" - {entry.path}: {entry.error}" for entry in errors)

    deprecations = report.deprecations
    if deprecations:
        lines.append("Deprecations:")
        lines.extend(f" - {entry.path}: {_describe(entry)}" for entry in deprecations)

    if verbose:
        lines.append("Active projects:")
        lines.extend(f" - {entry.path}" for entry in report.successes)

    if report.inconclusive:
        lines.append("Stopped early: the GitHub API rate limit was reached")

    lines.append(f"Operation took {report.elapsed_seconds:.2f}s")
    lines.append("")
    lines.append(f"{report.processed} files processed - {len(errors)} errors found")
    return "\n".join(lines)


def render_sweep_table(report: SweepReport, title: Optional[str] = "Registry Sweep") -> None:
    """
    Render a sweep report as a pretty table.

    Args:
        report: The sweep report
        title: Optional table title
    """
    if not report.entries:
        console.print("[yellow]No project files found.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Project", style="cyan")
    table.add_column("Result", style="green")
    table.add_column("Details", style="yellow")

    for entry in report.entries:
        table.add_row(entry.path, _describe(entry), entry.error or "")

    console.print(table)
    console.print(
        f"{report.processed} files processed - {len(report.errors)} errors found "
        f"({report.elapsed_seconds:.2f}s)"
    )
    if report.inconclusive:
        console.print("[yellow]Stopped early: the GitHub API rate limit was reached[/yellow]")
