"""CLI interface for rulecheck using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rulecheck import __description__, __version__
from rulecheck.config import LogLevel, load_config, load_rules
from rulecheck.errors import RulecheckError
from rulecheck.registry import Registry
from rulecheck.templates import DEFAULT_TEMPLATES, template_for, to_map
from rulecheck.wire import to_wire

app = typer.Typer(
    name="rulecheck",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"rulecheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """rulecheck - declarative rule validation for records."""


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def check(
    data: Annotated[
        Path,
        typer.Argument(help="JSON file holding the record to validate")
    ],
    rules: Annotated[
        Path,
        typer.Argument(help="JSON file holding the list of rules")
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .rulecheck.json)")
    ] = None,
    naming: Annotated[
        Optional[str],
        typer.Option("--naming", "-n", help="Naming scheme for reported field paths")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json, map, wire (default: table)")
    ] = "table",
) -> None:
    """Validate a JSON record against a JSON rule list."""
    valid_formats = ["table", "json", "map", "wire"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    try:
        rulecheck_config = load_config(config)
        _setup_logging(rulecheck_config.logging.level)
        validator = Registry.from_config(rulecheck_config).build()

        with open(data, encoding="utf-8") as f:
            record = jsonlib.load(f)
        rule_list = load_rules(rules)

        violations = validator.validate(record, rule_list, naming)
        messages = to_map(violations, validator.templates)
    except (RulecheckError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if format == "json":
        typer.echo(jsonlib.dumps([
            {
                "field": v.field,
                "tag": v.tag,
                "param": v.param,
                "code": v.code,
                "message": v.message,
            }
            for v in violations or []
        ], indent=2))
    elif format == "map":
        typer.echo(jsonlib.dumps(messages, indent=2))
    elif format == "wire":
        payload = to_wire(violations, humanize=True, templates=validator.templates)
        body = payload.promoted().model_dump(by_alias=True, exclude_defaults=True) if payload else {}
        typer.echo(jsonlib.dumps(body, indent=2))
    else:  # table format
        if not violations:
            console.print("[green]No violations found![/green]")
        else:
            table = Table(title=f"{len(violations)} violation(s)")
            table.add_column("Field", style="cyan")
            table.add_column("Constraint", style="white")
            table.add_column("Message", style="white")
            table.add_column("Code", style="dim")

            for violation in violations:
                constraint = violation.tag
                if violation.param:
                    constraint += f"={violation.param}"
                table.add_row(
                    escape(violation.field),
                    escape(constraint),
                    escape(validator.render(violation)),
                    escape(violation.code),
                )
            console.print(table)

    raise typer.Exit(1 if violations else 0)


@app.command()
def templates(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .rulecheck.json)")
    ] = None,
) -> None:
    """Show the effective message templates."""
    try:
        rulecheck_config = load_config(config)
        registry = Registry.from_config(rulecheck_config)
    except (RulecheckError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table()
    table.add_column("Constraint", style="cyan")
    table.add_column("Template", style="white")
    table.add_column("Source", style="dim")

    custom = registry.templates
    for tag in sorted(set(DEFAULT_TEMPLATES) | set(custom)):
        source = "custom" if custom.get(tag) else "default"
        text = template_for(tag, custom)
        table.add_row(escape(tag), escape(text), source)

    console.print(table)
