"""CLI interface for structval using Typer framework."""

import importlib
import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from structval import __description__, __version__
from structval.config import load_config
from structval.errors import ConfigurationDefect, StructValError, ValidationErrors
from structval.reflector import is_record
from structval.rules import parse_rule
from structval.validator import Validator

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="structval",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

EXIT_VIOLATIONS = 1
EXIT_USAGE = 2


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"structval version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """structval - tag-driven field validation for Python records."""


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    return typer.Exit(EXIT_USAGE)


def _import_target(target: str) -> type:
    """Resolve ``module:ClassName`` to a class."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise ValueError(f"Invalid target '{target}'. Expected module:ClassName")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, class_name)
    except AttributeError:
        raise ValueError(f"Module '{module_name}' has no attribute '{class_name}'") from None


def _load_payloads(data: Path) -> list[dict[str, Any]]:
    with open(data, encoding="utf-8") as f:
        payload = jsonlib.load(f)

    payloads = payload if isinstance(payload, list) else [payload]
    for position, item in enumerate(payloads):
        if not isinstance(item, dict):
            raise ValueError(f"Record {position} in {data} is not a JSON object")
    return payloads


def _print_table(results: list[ValidationErrors]) -> None:
    total = sum(len(errors) for errors in results)
    if not total:
        console.print(f"[green]All {len(results)} record(s) valid[/green]")
        return

    table = Table(title=f"Violations ({total} found)")
    table.add_column("Record", style="cyan", justify="right")
    table.add_column("Field", style="cyan")
    table.add_column("Check", style="white")
    table.add_column("Index", style="dim", justify="right")
    table.add_column("Message", style="white")

    for position, errors in enumerate(results):
        for error in errors:
            table.add_row(
                str(position),
                escape(error.field or ""),
                escape(error.check or ""),
                "" if error.index is None else str(error.index),
                escape(error.message),
            )

    console.print(table)


@app.command()
def check(
    target: Annotated[
        str,
        typer.Argument(help="Record class to validate against, as module:ClassName")
    ],
    data: Annotated[
        Path,
        typer.Argument(help="JSON file with one record object or a list of them")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .structval.json)")
    ] = None,
) -> None:
    """Validate JSON records against the rules declared on a record class."""
    valid_formats = ["table", "json"]
    if format not in valid_formats:
        raise _fail(f"Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")

    try:
        validator_config = load_config(config)
        logging.basicConfig(level=validator_config.logging.level.to_logging())

        record_class = _import_target(target)
        payloads = _load_payloads(data)
        records = [record_class(**payload) for payload in payloads]
        if records and not is_record(records[0]):
            raise ValueError(f"'{target}' is not a dataclass or pydantic model")

        validator = Validator(validator_config)
        results = [validator.collect(record) for record in records]
    except (OSError, ValueError, TypeError, ImportError, PydanticValidationError, StructValError) as e:
        raise _fail(str(e))
    except ConfigurationDefect as e:
        logger.error(f"Configuration defect in {target}: {e}")
        raise _fail(f"Configuration defect: {e}")

    logger.info(f"Checked {len(records)} record(s) from {data}")

    if format == "json":
        output = [dict(record=position, **errors.to_dict()) for position, errors in enumerate(results)]
        console.print(jsonlib.dumps(output, indent=2), markup=False, emoji=False, highlight=False, soft_wrap=True)
    else:
        _print_table(results)

    if any(results):
        raise typer.Exit(EXIT_VIOLATIONS)


@app.command()
def rules(
    rule: Annotated[
        str,
        typer.Argument(help="Rule string to parse, e.g. 'min:1,max:10'")
    ],
) -> None:
    """Show how a rule string is parsed into checks."""
    try:
        checks = parse_rule(rule)
    except ConfigurationDefect as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    table = Table(title=f"Checks ({len(checks)} found)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Check", style="cyan")
    table.add_column("Argument", style="white")

    for position, parsed in enumerate(checks):
        table.add_row(str(position), parsed.name.value, escape(parsed.arg or ""))

    console.print(table)


if __name__ == "__main__":
    app()
