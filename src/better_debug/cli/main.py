"""
CLI entry point for better-debug.

Commands:
    better-debug check <schema>            - Validate a YAML schema and show its plans
    better-debug render <schema> <record>  - Render a record built from --set values
    better-debug formatters                - List named custom formatters
    better-debug config                    - Manage configuration
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="better-debug",
    help="Directive-driven debug views for record types",
    no_args_is_help=True,
)
console = Console()

_ACTION_STYLES = {
    "omit": "dim",
    "redact": "red",
    "invoke": "yellow",
    "default": "green",
}


def _parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """Parse ``field=value`` pairs; values are read as YAML scalars."""
    values: dict[str, Any] = {}
    for item in assignments:
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected field=value, got '{item}'")
        try:
            values[name.strip()] = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            values[name.strip()] = raw
    return values


def _load(schema: Path) -> dict[str, type]:
    from better_debug.schemas import load_schema

    return load_schema(schema)


@app.command()
def check(
    schema: Path = typer.Argument(..., help="Path to a YAML record schema"),
    output_json: bool = typer.Option(False, "--json", help="Output plans as JSON"),
) -> None:
    """Validate a schema and show the render plan of every record."""
    from better_debug.errors import ConfigError
    from better_debug.registry.record_registry import get_record_registry

    try:
        classes = _load(schema)
    except (ConfigError, FileNotFoundError) as e:
        if output_json:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    registry = get_record_registry()
    plans = [registry.get_plan(cls) for cls in classes.values()]

    if output_json:
        print(json.dumps([plan.to_dict() for plan in plans], indent=2))
        return

    for plan in plans:
        table = Table(title=f"Record {plan.type_name}")
        table.add_column("Field", style="cyan")
        table.add_column("Label")
        table.add_column("Action")
        for entry in plan.entries:
            kind = entry.action.kind.value
            if entry.action.skip_if_none:
                kind = f"{kind} (skip if none)"
            style = _ACTION_STYLES[entry.action.kind.value]
            table.add_row(entry.field_name, entry.label, f"[{style}]{kind}[/{style}]")
        console.print(table)

    console.print(f"[green]OK[/green] {len(plans)} record(s) valid")


@app.command()
def render(
    schema: Path = typer.Argument(..., help="Path to a YAML record schema"),
    record: str = typer.Argument(..., help="Record name from the schema"),
    assignments: list[str] = typer.Option(
        [],
        "--set",
        "-s",
        help="Field value as field=value (repeatable, values parsed as YAML scalars)",
    ),
) -> None:
    """Render one schema record built from --set values."""
    from better_debug.errors import ConfigError
    from better_debug.registry.record_registry import format_record

    try:
        classes = _load(schema)
        if record not in classes:
            available = ", ".join(sorted(classes))
            raise ValueError(f"Record '{record}' not found. Available: [{available}]")
        instance = classes[record](**_parse_assignments(assignments))
    except (ConfigError, FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    # Plain print: the rendered text must not be interpreted as Rich markup
    print(format_record(instance))


@app.command()
def formatters() -> None:
    """List named custom formatters (registered and from entry points)."""
    from better_debug.registry.formatter_registry import get_formatter_registry

    names = get_formatter_registry().list_formatters()
    if not names:
        console.print("[yellow]No named formatters registered.[/yellow]")
        return

    table = Table(title="Named Formatters")
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(name)
    console.print(table)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize default configuration"),
) -> None:
    """Manage better-debug configuration."""
    from better_debug.config.settings import SettingsManager, get_config_file

    config_file = get_config_file()

    if show:
        if config_file.exists():
            console.print(config_file.read_text(), markup=False)
        else:
            console.print("[yellow]No configuration file found.[/yellow]")
            console.print(f"Run 'better-debug config --init' to create one at {config_file}")
        settings = SettingsManager.get_instance().settings
        console.print("\n[bold]Effective settings:[/bold]")
        for key, value in settings.model_dump(mode="json").items():
            console.print(f"  {key}: {value}", markup=False)
        return

    if init:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default_config = """\
# better-debug configuration

defaults:
  # Placeholder emitted in place of secret field values
  redaction_marker: "<SECRET>"
  # Default formatting of field values: repr or str
  value_style: repr
  # Reject fields that are secret and also declare cust_formatter
  strict_secrets: false
"""
        config_file.write_text(default_config)
        console.print(f"[green]Created configuration at {config_file}[/green]")
        return

    console.print("Usage: better-debug config [--show | --init]")


@app.command()
def version() -> None:
    """Show version information."""
    from better_debug import __version__

    console.print(f"better-debug v{__version__}")


if __name__ == "__main__":
    app()
