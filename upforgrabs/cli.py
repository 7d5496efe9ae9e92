#!/usr/bin/env python3

import click

from upforgrabs.commands.sweep import sweep_handler
from upforgrabs.commands.validate import validate_handler


@click.group()
@click.version_option(package_name="upforgrabs-tooling")
def cli():
    """upforgrabs - Keep the Up For Grabs project registry honest.

    Checks registry entries against the GitHub API, retires projects whose
    repository is archived or gone, and reviews pull requests that add or
    change projects.
    """
    pass


cli.add_command(sweep_handler, name='sweep')
cli.add_command(validate_handler, name='validate')


def main():
    cli()

if __name__ == "__main__":
    main()
