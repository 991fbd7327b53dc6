"""CLI interface for tagval using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tagval import __description__, __version__
from tagval.config import LogLevel, OutputFormat, TagvalConfig, load_config
from tagval.errors import RuleSyntaxError
from tagval.introspection import MappingRecord
from tagval.rules import parse_rules
from tagval.validator import ValidationResult, Validator

app = typer.Typer(
    name="tagval",
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


def setup_logging(level: str) -> None:
    """Route tagval logging through rich at the configured level."""
    logger = logging.getLogger("tagval")
    logger.setLevel(_LOG_LEVELS.get(level, logging.WARNING))
    logger.propagate = False
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"tagval version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit")
    ] = False,
) -> None:
    """tagval - declarative field validation driven by rule strings."""


def _print_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)


def _load_json(path: Path, what: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return jsonlib.load(f)
    except jsonlib.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {what} file {path}: {e}") from e


def _load_rules(path: Path) -> dict[str, str]:
    data = _load_json(path, "rules")
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise ValueError(f"Rules file {path} must map field names to rule strings")
    return data


def _load_records(path: Path) -> list[dict[str, Any]]:
    data = _load_json(path, "records")
    records = data if isinstance(data, list) else [data]
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Record {i} in {path} is not a JSON object")
    return records


def _resolve_config(config: Path | None) -> TagvalConfig:
    try:
        return load_config(config)
    except ValueError as e:
        _print_error(str(e))
        raise typer.Exit(1)


def _output_results_table(results: list[ValidationResult]) -> None:
    violations = sum(len(r.errors) for r in results)
    if not violations:
        console.print(f"[green]All {len(results)} record(s) valid[/green]")
        return

    table = Table(title=f"{violations} violation(s)")
    table.add_column("Record", style="cyan", justify="right")
    table.add_column("Field", style="cyan")
    table.add_column("Cause", style="white")
    table.add_column("Message", style="white")

    for index, result in enumerate(results):
        for error in result.errors:
            table.add_row(str(index), escape(error.field), f"[red]{error.cause.name.lower()}[/red]", escape(str(error)))

    console.print(table)


def _output_results_json(results: list[ValidationResult]) -> None:
    payload = [{"record": index, **result.to_dict()} for index, result in enumerate(results)]
    console.print_json(jsonlib.dumps(payload))


def _output_results_text(results: list[ValidationResult]) -> None:
    for index, result in enumerate(results):
        for error in result.errors:
            console.print(f"record[{index}] {error}", markup=False, highlight=False, soft_wrap=True)


@app.command()
def check(
    records: Annotated[
        Path,
        typer.Argument(help="JSON file holding one record object or a list of them")
    ],
    rules: Annotated[
        Path,
        typer.Option("--rules", "-r", help="JSON file mapping field names to rule strings")
    ],
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table, json, text (default: from config)")
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .tagval.json)")
    ] = None,
) -> None:
    """Validate JSON records against a rule table."""
    tagval_config = _resolve_config(config)
    setup_logging(tagval_config.logging.level)

    try:
        rule_table = _load_rules(rules)
        record_list = _load_records(records)
    except (FileNotFoundError, ValueError) as e:
        _print_error(str(e))
        raise typer.Exit(1)

    validator = Validator(tagval_config)
    results = [validator.check(MappingRecord(values, rule_table)) for values in record_list]

    output_format = OutputFormat(format or tagval_config.output.format)
    if output_format == OutputFormat.JSON:
        _output_results_json(results)
    elif output_format == OutputFormat.TEXT:
        _output_results_text(results)
    else:
        _output_results_table(results)

    raise typer.Exit(max((r.exit_code for r in results), default=0))


@app.command()
def explain(
    rule_string: Annotated[
        str,
        typer.Argument(help="Rule string to parse, e.g. 'min:3;max:10'")
    ],
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: table, json, text")
    ] = OutputFormat.TABLE,
) -> None:
    """Show how a rule string is split into clauses."""
    try:
        parsed = parse_rules(rule_string, "<rule>")
    except RuleSyntaxError as e:
        _print_error(f"malformed clause {e.clause!r}, expected kind:param")
        raise typer.Exit(1)

    if format == OutputFormat.JSON:
        console.print_json(jsonlib.dumps([
            {"kind": rule.kind, "param": rule.param, "known": rule.known}
            for rule in parsed
        ]))
    elif format == OutputFormat.TEXT:
        for rule in parsed:
            status = "ok" if rule.known else "unknown kind"
            console.print(f"{rule} ({status})", markup=False, highlight=False, soft_wrap=True)
    else:
        table = Table()
        table.add_column("#", style="dim", justify="right")
        table.add_column("Kind", style="cyan")
        table.add_column("Param", style="white")
        table.add_column("Status", style="white")
        for index, rule in enumerate(parsed):
            status = "[green]ok[/green]" if rule.known else "[red]unknown kind[/red]"
            table.add_row(str(index), escape(rule.kind), escape(rule.param), status)
        console.print(table)

    if not all(rule.known for rule in parsed):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
