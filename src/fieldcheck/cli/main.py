"""fieldcheck CLI entry point."""

import logging

import click

from fieldcheck.validation.validators import register_builtin_validators


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """fieldcheck: declarative field validation CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    register_builtin_validators()


# Register subcommands
from fieldcheck.cli.rules_cmd import check, lint, validators  # noqa: E402

cli.add_command(lint)
cli.add_command(check)
cli.add_command(validators)
