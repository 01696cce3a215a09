"""CLI utility functions for shapecheck.

Provides helper functions for:
- Config wiring: Passing Typer CLI options to load_config
- Loading: Importing schemas by reference and parsing JSON/YAML documents
- Error formatting: Consistent user-friendly messages with exit codes
"""

from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml

from shapecheck.config import ShapecheckConfig, load_config
from shapecheck.result import ValidationIssue

logger = logging.getLogger(__name__)

# Exit code conventions
EXIT_USER_ERROR = 1  # User error (bad input, missing file, etc.)
EXIT_VALIDATION_FAILED = 2  # At least one document is invalid

YAML_SUFFIXES = {".yaml", ".yml"}


class SchemaImportError(Exception):
    """Raised when a schema reference cannot be resolved."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot load schema '{reference}': {reason}")


class DocumentLoadError(Exception):
    """Raised when a document cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load document {path}: {reason}")


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


def format_issue(issue: ValidationIssue) -> str:
    """Format an issue as ``path: message; message``.

    Issues without a path are reported against ``<root>``.
    """
    location = issue.path if issue.path else "<root>"
    return f"{location}: {'; '.join(issue.errors)}"


# -----------------------------------------------------------------------------
# Loading Helpers
# -----------------------------------------------------------------------------


def load_schema(reference: str, search_dir: Path | None = None) -> Any:
    """Import a schema from a ``package.module:attribute`` reference.

    Dotted attributes (``module:Schemas.user``) are followed. ``search_dir``
    (default: current directory) is put on ``sys.path`` first, so a schema
    module next to the documents can be imported by an installed CLI.

    Raises:
        SchemaImportError: If the module or attribute cannot be found, or the
            attribute is not callable.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise SchemaImportError(reference, "expected 'package.module:attribute'")

    import_root = str((search_dir or Path.cwd()).resolve())
    if import_root not in sys.path:
        sys.path.insert(0, import_root)
        importlib.invalidate_caches()

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise SchemaImportError(reference, str(e)) from e

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise SchemaImportError(reference, f"no attribute '{part}'") from None

    if not callable(target):
        raise SchemaImportError(reference, "schema is not callable")

    logger.debug("Loaded schema %s", reference)
    return target


def detect_format(path: Path, input_format: str = "auto") -> str:
    """Resolve ``auto`` to ``json`` or ``yaml`` from the file suffix."""
    if input_format != "auto":
        return input_format
    return "yaml" if path.suffix.lower() in YAML_SUFFIXES else "json"


def load_document(path: Path, input_format: str = "auto") -> Any:
    """Read and parse one document.

    Raises:
        DocumentLoadError: If the file cannot be read or parsed.
    """
    fmt = detect_format(path, input_format)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(path, e.strerror or str(e)) from e

    try:
        if fmt == "yaml":
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentLoadError(path, f"invalid {fmt.upper()}: {e}") from e


# -----------------------------------------------------------------------------
# Config Wiring Helper
# -----------------------------------------------------------------------------


def wire_config(
    schema: str | None = None,
    input_format: str | None = None,
    parallel: bool | None = None,
    start_dir: Path | None = None,
) -> ShapecheckConfig:
    """Wire CLI options to load_config with appropriate overrides.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    cli_overrides: dict[str, Any] = {}

    if schema is not None:
        cli_overrides["schema"] = schema
    if input_format is not None:
        cli_overrides["input_format"] = input_format
    if parallel is not None:
        cli_overrides["parallel"] = parallel

    try:
        return load_config(cli_overrides=cli_overrides, start_dir=start_dir)
    except ValueError as e:
        error(f"Invalid configuration: {e}", exit_code=EXIT_USER_ERROR)
