"""Result and issue models shared by every validator.

Every validator in shapecheck is a plain callable that takes one value and
returns a ValidationResult. Combinators only ever look at this shape, which
is what lets them nest to any depth.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

PATH_SEPARATOR = "."


@dataclass
class ValidationIssue:
    """A group of messages produced at one location of the input.

    Attributes:
        errors: Human-readable messages (e.g., ["Must be a string"]).
        path: Dotted location within the input (e.g., "address.zipCode" or
            "0.email"). None when the issue belongs to the value itself.
    """

    errors: list[str]
    path: str | None = None

    def prefixed(self, key: str | int) -> ValidationIssue:
        """Return a copy of this issue located under ``key``."""
        path = f"{key}{PATH_SEPARATOR}{self.path}" if self.path else str(key)
        return ValidationIssue(errors=list(self.errors), path=path)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "errors": list(self.errors)}


@dataclass
class ValidationResult:
    """Outcome of running a validator against one value.

    Attributes:
        errors: Issues found, in evaluation order.
        value: The validated value, or a fixed fallback when a type check
            failed.
    """

    errors: list[ValidationIssue] = field(default_factory=list)
    value: Any = None

    @property
    def is_valid(self) -> bool:
        """True when no issues were found."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def to_dict(self) -> dict[str, Any]:
        """Render the result as plain data for JSON output."""
        return {
            "is_valid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "value": self.value,
        }


Schema = Callable[[Any], ValidationResult]


def valid(value: Any) -> ValidationResult:
    """Build a passing result for ``value``."""
    return ValidationResult(errors=[], value=value)


def invalid(message: str, value: Any) -> ValidationResult:
    """Build a failing result with a single path-less message."""
    return ValidationResult(errors=[ValidationIssue(errors=[message])], value=value)


def prefix_issues(key: str | int, issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
    """Relocate child issues under ``key``."""
    return [issue.prefixed(key) for issue in issues]


def render_value(value: Any) -> str:
    """Render a value for an error message; booleans print as ``true``/``false``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
