"""Rule file CLI commands: lint, check and validators."""

import json
from pathlib import Path

import click

from fieldcheck.config import ConfigError, lint_rules_file, load_data_file, load_rules_file
from fieldcheck.filters import FilterService
from fieldcheck.validation.registry import ValidatorRegistry


def _echo_issues(issues) -> None:
    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))


@click.command()
@click.argument("rules_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def lint(rules_path: Path):
    """Lint a YAML rule file against the rule-file schema."""
    issues = lint_rules_file(rules_path)
    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    _echo_issues(issues)

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    click.echo(click.style("Rule file is valid.", fg="green", bold=True))


@click.command()
@click.argument("rules_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format for validation messages.",
)
def check(rules_path: Path, data_path: Path, output_format: str):
    """Validate a YAML/JSON data file against a rule file."""
    try:
        rule_file = load_rules_file(rules_path)
        data = load_data_file(data_path)
    except ConfigError as e:
        _echo_issues(e.issues)
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if not isinstance(data, dict):
        click.echo(click.style("Error: data file must contain a mapping", fg="red"), err=True)
        raise SystemExit(1)

    validation = rule_file.build(filter_service=FilterService())
    messages = validation.validate(data)

    if output_format == "json":
        click.echo(json.dumps(messages.to_dict(), indent=2, default=str))
    else:
        for message in messages:
            field = ", ".join(message.field) if isinstance(message.field, list) else message.field
            click.echo(click.style(f"{field}: {message} [{message.type}]", fg="red"))
        if len(messages) == 0:
            click.echo(click.style("No validation errors.", fg="green", bold=True))
        else:
            click.echo(click.style(f"\n{len(messages)} validation error(s)", fg="red", bold=True))

    if len(messages):
        raise SystemExit(1)


@click.command()
def validators():
    """List registered validator types."""
    for name in ValidatorRegistry.list_registered():
        click.echo(name)
