"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
from functools import wraps
from typing import Any, Dict

import click

from .exit_codes import INTERRUPTED, CommandError, ConfigError, RateLimitExhausted
from .infra.github_client import GitHubClient
from .infra.rate_budget import RateBudgetGate

logger = logging.getLogger(__name__)


def exit_on_command_error(func):
    """
    Decorator mapping CommandError to its exit code.

    Rate limit exhaustion is reported as inconclusive rather than as a
    failure; everything else prints the message to stderr.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except RateLimitExhausted as e:
            click.echo(str(e), err=True)
            click.echo("Marking as inconclusive to indicate that no further work will be done here", err=True)
            sys.exit(e.exit_code)
        except CommandError as e:
            click.echo(str(e), err=True)
            sys.exit(e.exit_code)

    return wrapper


def build_client(config: Dict[str, Any]) -> GitHubClient:
    """Create the GitHub gateway described by the configuration."""
    github = config.get('github', {})
    limits = config.get('rate_limit', {})

    try:
        low_fraction = float(limits.get('low_fraction', 0.2))
        warn_every = int(limits.get('warn_every', 10))
        timeout = int(github.get('timeout_seconds', 30))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting in configuration: {e}")

    gate = RateBudgetGate(low_fraction=low_fraction, warn_every=warn_every)
    return GitHubClient(
        token=github.get('token') or None,
        api_url=github.get('api_url') or "https://api.github.com",
        timeout=timeout,
        gate=gate,
    )


def set_verbose(verbose: bool) -> None:
    """Lower the package log level to DEBUG when asked."""
    if verbose:
        logging.getLogger("upforgrabs").setLevel(logging.DEBUG)


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show debug logging and list active projects'),
    'dry_run': click.option('--dry-run', is_flag=True,
                            help='Preview changes without touching GitHub state'),
    'root': click.option('--root', type=click.Path(file_okay=False),
                         help='Registry checkout (default: GITHUB_WORKSPACE or config)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'dry_run')
        def my_command(verbose, dry_run):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
