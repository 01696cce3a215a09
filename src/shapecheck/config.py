"""Configuration management for the shapecheck CLI.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .shapecheckrc > pyproject.toml > defaults
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

INPUT_FORMATS = ("auto", "json", "yaml")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ShapecheckConfig:
    """Configuration for the shapecheck CLI.

    Attributes:
        schema: Schema reference as "package.module:attribute" (default: None)
        input_format: How documents are parsed: "auto", "json" or "yaml"
            (default: "auto", chosen from the file suffix)
        parallel: Validate documents in a thread pool (default: True)
        max_workers: Thread pool size; None lets the pool decide (default: None)
    """

    schema: str | None = None
    input_format: str = "auto"
    parallel: bool = True
    max_workers: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if self.schema is not None:
            if not isinstance(self.schema, str) or ":" not in self.schema:
                raise ValueError("schema must look like 'package.module:attribute'")

        if self.input_format not in INPUT_FORMATS:
            raise ValueError(f"input_format must be one of: {', '.join(INPUT_FORMATS)}")

        if not isinstance(self.parallel, bool):
            raise ValueError("parallel must be a boolean")

        if self.max_workers is not None:
            if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int):
                raise ValueError("max_workers must be an integer")
            if self.max_workers < 1:
                raise ValueError("max_workers must be at least 1")

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names."""
    return {f.name for f in fields(ShapecheckConfig)}


def find_config_file(filename: str = ".shapecheckrc", start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _load_from_rcfile(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the nearest .shapecheckrc file."""
    config_path = find_config_file(".shapecheckrc", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}

    valid_fields = _get_config_field_names()
    return {k: v for k, v in data.items() if k in valid_fields}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the [tool.shapecheck] section of pyproject.toml."""
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}

    section = data.get("tool", {}).get("shapecheck", {})
    valid_fields = _get_config_field_names()
    return {k: v for k, v in section.items() if k in valid_fields}


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _load_from_env() -> dict[str, Any]:
    """Load configuration from SHAPECHECK_* environment variables.

    Raises:
        ValueError: If a boolean or integer variable cannot be parsed.
    """
    result: dict[str, Any] = {}

    schema = os.environ.get("SHAPECHECK_SCHEMA")
    if schema is not None:
        result["schema"] = schema

    input_format = os.environ.get("SHAPECHECK_INPUT_FORMAT")
    if input_format is not None:
        result["input_format"] = input_format

    parallel = os.environ.get("SHAPECHECK_PARALLEL")
    if parallel is not None:
        result["parallel"] = _parse_bool("SHAPECHECK_PARALLEL", parallel)

    max_workers = os.environ.get("SHAPECHECK_MAX_WORKERS")
    if max_workers is not None:
        result["max_workers"] = _parse_int("SHAPECHECK_MAX_WORKERS", max_workers)

    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries, later ones taking precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> ShapecheckConfig:
    """Load configuration with full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (SHAPECHECK_*)
    3. .shapecheckrc file
    4. pyproject.toml [tool.shapecheck] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved ShapecheckConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    valid_fields = _get_config_field_names()
    cli_config = {
        k: v for k, v in (cli_overrides or {}).items() if k in valid_fields and v is not None
    }

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_rcfile(start_dir),
        _load_from_env(),
        cli_config,
    )

    return ShapecheckConfig(**merged)
