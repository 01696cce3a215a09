"""shapecheck CLI - validate JSON and YAML documents against a schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shapecheck import __version__
from shapecheck.cli_utils import (
    EXIT_USER_ERROR,
    EXIT_VALIDATION_FAILED,
    DocumentLoadError,
    SchemaImportError,
    format_issue,
    load_document,
    load_schema,
    wire_config,
)
from shapecheck.runner import AggregatedResult, DocumentResult, ValidationRunner

app = typer.Typer(
    name="shapecheck",
    help="shapecheck - Validate JSON and YAML documents against composable schemas.",
    add_completion=False,
)

# Rich consoles for output
console = Console()
err_console = Console(stderr=True)


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_success(message: str, quiet: bool = False) -> None:
    """Print a success message."""
    if not quiet:
        console.print(f"[green]Success:[/green] {message}")


def _output_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error:[/red] {message}")


def _exit_error(message: str, exit_code: int = EXIT_USER_ERROR) -> None:
    """Print error and exit."""
    _output_error(message)
    raise typer.Exit(code=exit_code)


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shapecheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging.",
    ),
) -> None:
    """shapecheck - Validate JSON and YAML documents against composable schemas."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# -----------------------------------------------------------------------------
# Check Command
# -----------------------------------------------------------------------------


def _print_document(document: DocumentResult, quiet: bool) -> None:
    """Print the outcome for one document, with a table of its issues."""
    if document.is_valid:
        if not quiet:
            console.print(f"  [green]PASS[/green] {escape(document.name)}")
        return

    console.print(f"  [red]FAIL[/red] {escape(document.name)}")
    if quiet:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Message")
    for issue in document.result.errors:
        for message in issue.errors:
            table.add_row(escape(issue.path or "<root>"), escape(message))
    console.print(table)


def _summary_json(aggregated: AggregatedResult) -> dict[str, Any]:
    return {
        "valid": aggregated.status == "pass",
        "documents": [
            {
                "name": document.name,
                "is_valid": document.is_valid,
                "errors": [issue.to_dict() for issue in document.result.errors],
            }
            for document in aggregated.results
        ],
    }


@app.command()
def check(
    files: list[Path] = typer.Argument(
        ...,
        help="JSON or YAML documents to validate.",
    ),
    schema: str | None = typer.Option(
        None,
        "--schema",
        "-s",
        help="Schema reference as 'package.module:attribute'.",
    ),
    input_format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Document format: auto, json or yaml (default: auto).",
    ),
    sequential: bool = typer.Option(
        False,
        "--sequential",
        help="Validate documents one at a time instead of in parallel.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only report failing documents.",
    ),
) -> None:
    """Validate documents against a schema.

    The schema is any shapecheck validator importable from Python, e.g.
    'myapp.schemas:user'. It can also be set with SHAPECHECK_SCHEMA,
    .shapecheckrc or [tool.shapecheck] in pyproject.toml.

    Exits with code 2 if any document is invalid.
    """
    config = wire_config(
        schema=schema,
        input_format=input_format,
        parallel=False if sequential else None,
    )

    if config.schema is None:
        _exit_error("No schema given. Use --schema or set 'schema' in the configuration.")
        return

    try:
        validator = load_schema(config.schema)
        documents = [(str(path), load_document(path, config.input_format)) for path in files]
    except (SchemaImportError, DocumentLoadError) as e:
        if json_output:
            console.print_json(json.dumps({"valid": False, "error": str(e)}))
        _exit_error(str(e))
        return

    runner = ValidationRunner(validator, parallel=config.parallel, max_workers=config.max_workers)
    aggregated = runner.run(documents)

    if json_output:
        console.print_json(json.dumps(_summary_json(aggregated)))
    else:
        for document in aggregated.results:
            _print_document(document, quiet)

        if aggregated.status == "pass":
            _output_success(f"{aggregated.documents_checked} document(s) valid", quiet)
        else:
            _output_error(
                f"{aggregated.invalid_documents} of {aggregated.documents_checked} "
                f"document(s) invalid ({aggregated.total_issues} issue(s))"
            )
            if quiet:
                for name, issue in aggregated.all_issues:
                    err_console.print(f"  {name}: {format_issue(issue)}", markup=False)

    if aggregated.status == "fail":
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


# -----------------------------------------------------------------------------
# Show Config Command
# -----------------------------------------------------------------------------


@app.command("show-config")
def show_config(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
) -> None:
    """Show the resolved configuration."""
    config = wire_config()

    if json_output:
        console.print_json(json.dumps(config.to_dict()))
        return

    table = Table(title="shapecheck configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.to_dict().items():
        table.add_row(key, "-" if value is None else str(value))
    console.print(table)
