"""CLI interface for editgate using Typer framework.

Exit codes of ``editgate validate`` follow the pre-tool-use hook convention:
0 lets the write through, 2 blocks it and shows the diagnostics to the agent,
1 reports an operational failure.
"""

import asyncio
import json as jsonlib
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from editgate import __description__, __version__
from editgate.config import EditGateConfig, LogLevel, load_config, resolve_rules_dir
from editgate.context import parse_hook_input
from editgate.errors import ConfigError, InvalidHookInputError
from editgate.validation import ValidationEngine, ValidationRule, load_rules

EXIT_FAILURE = 1

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}

app = typer.Typer(
    name="editgate",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"editgate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit")
    ] = False,
) -> None:
    """editgate - Pre-write validation gate for code-generation agent hooks."""


def _setup_logging(level: LogLevel) -> None:
    """Send editgate logs to stderr through rich."""
    package_logger = logging.getLogger("editgate")
    package_logger.setLevel(level.to_logging())
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def _fail(message: str, hint: str | None = None) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {message}")
    if hint:
        err_console.print(f"[dim]{hint}[/dim]")
    return typer.Exit(EXIT_FAILURE)


def _parse_bool(value: str, option: str) -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise _fail(f"Invalid value for {option}: '{value}'. Use true or false")


def _load_settings(config: Path | None, verbose: bool = False) -> EditGateConfig:
    try:
        settings = load_config(config)
    except ConfigError as e:
        raise _fail(str(e))

    _setup_logging(LogLevel.DEBUG if verbose else settings.logging.level)
    return settings


def _resolve_rules_path(rules_dir: str) -> Path:
    rules_path = resolve_rules_dir(rules_dir)
    if rules_path is None:
        raise _fail(
            "Could not find .claude directory in current or parent directories",
            "Make sure you have a .claude/ directory in your project root, or pass an absolute --rules-dir",
        )
    return rules_path


def _discover(settings: EditGateConfig, rules_dir: str | None) -> tuple[Path, list[ValidationRule]]:
    rules_path = _resolve_rules_path(rules_dir or settings.rules.dir)
    return rules_path, load_rules(rules_path, settings.rules.exclude)


@app.command()
def validate(
    stdin: Annotated[
        str,
        typer.Option("--stdin", help="Read hook input JSON from stdin: true or false")
    ] = "true",
    no_stdin: Annotated[
        bool,
        typer.Option("--no-stdin", help="Same as --stdin=false")
    ] = False,
    rules_dir: Annotated[
        Optional[str],
        typer.Option("--rules-dir", "--rulesDir", help="Directory containing validation rules (default: .claude/rules)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .editgate.json)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging on stderr")
    ] = False,
) -> None:
    """Validate a proposed write or edit received from a pre-tool-use hook."""
    read_stdin = _parse_bool(stdin, "--stdin") and not no_stdin

    settings = _load_settings(config, verbose)
    rules_path, rules = _discover(settings, rules_dir)

    if not rules:
        raise _fail(
            f"No validation rules found in {rules_path}",
            f"Create rule files in {rules_dir or settings.rules.dir}/",
        )

    if not read_stdin:
        raise _fail("--stdin is required")

    try:
        context = parse_hook_input(sys.stdin.read())
    except InvalidHookInputError as e:
        raise _fail(f"Failed to parse stdin input: {e}")

    engine = ValidationEngine()
    engine.register_rules(rules)

    try:
        result = asyncio.run(engine.validate(context))
    except Exception as e:
        raise _fail(f"Rule execution failed: {type(e).__name__}: {e}")

    if not result.valid:
        err_console.print(result.format_errors(), markup=False, emoji=False, highlight=False, soft_wrap=True)
        raise typer.Exit(result.exit_code)


@app.command("list-rules")
def list_rules(
    rules_dir: Annotated[
        Optional[str],
        typer.Option("--rules-dir", "--rulesDir", help="Directory containing validation rules (default: .claude/rules)")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .editgate.json)")
    ] = None,
) -> None:
    """List all discovered validation rules."""
    valid_formats = ["table", "json"]
    if format not in valid_formats:
        raise _fail(f"Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")

    settings = _load_settings(config)
    rules_path, rules = _discover(settings, rules_dir)

    if format == "json":
        typer.echo(jsonlib.dumps({
            "rulesDir": str(rules_path),
            "rules": [{"name": rule.name, "description": rule.description} for rule in rules],
        }, indent=2))
        return

    if not rules:
        console.print(f"[yellow]No validation rules found in {rules_path}[/yellow]")
        console.print(f"[dim]Create rule files in {rules_dir or settings.rules.dir}/[/dim]")
        return

    console.print(f"[green]Discovered {len(rules)} validation rules from[/green] {rules_path}")
    table = Table()
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    for rule in rules:
        table.add_row(escape(rule.name), escape(rule.description))
    console.print(table)


def run(args: list[str] | None = None) -> int:
    """Run the CLI and return its exit code.

    Usage errors (unknown options, missing values) exit 1 instead of Typer's
    default 2, which the hook runner would read as a blocked write.
    """
    try:
        code = app(args=args, prog_name="editgate", standalone_mode=False)
    except typer.TyperException as e:
        err_console.print(f"[red]Error:[/red] {escape(e.format_message())}")
        return EXIT_FAILURE
    except typer.Abort:
        err_console.print("[red]Aborted[/red]")
        return EXIT_FAILURE
    return code if isinstance(code, int) else 0


def cli_main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    cli_main()
