"""Primitive validators: type checks for leaf values.

A primitive rejects a value of the wrong type with one fixed message and a
fallback value. Refinements passed to ``string`` or ``number`` only run once
the type check has passed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from shapecheck.combinators import pipe
from shapecheck.result import Schema, ValidationResult, invalid, render_value, valid

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def string(*validators: Schema) -> Schema:
    """Require a ``str``, then apply ``validators`` in sequence."""
    refine = pipe(*validators)

    def validator(value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return invalid("Must be a string", "")
        return refine(value)

    return validator


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number(*validators: Schema) -> Schema:
    """Require an ``int`` or ``float``, then apply ``validators`` in sequence."""
    refine = pipe(*validators)

    def validator(value: Any) -> ValidationResult:
        if not _is_number(value):
            return invalid("Must be a number", 0)
        return refine(value)

    return validator


def boolean() -> Schema:
    """Require a ``bool``."""

    def validator(value: Any) -> ValidationResult:
        if not isinstance(value, bool):
            return invalid("Must be a boolean", False)
        return valid(value)

    return validator


def date() -> Schema:
    """Require a ``datetime.datetime`` instance.

    Strings are not parsed and plain ``datetime.date`` values are rejected.
    The fallback on failure is the Unix epoch in UTC.
    """

    def validator(value: Any) -> ValidationResult:
        if not isinstance(value, datetime):
            return invalid("Must be a valid date", EPOCH)
        return valid(value)

    return validator


def literal(expected: Any) -> Schema:
    """Require a value equal to ``expected``.

    ``True``/``False`` only match booleans, never ``1``/``0``. On failure the
    result carries ``expected`` itself as its value; a boolean is named as
    ``true``/``false`` in the message.
    """

    def validator(value: Any) -> ValidationResult:
        matches = isinstance(value, bool) == isinstance(expected, bool) and value == expected
        if not matches:
            return invalid(f"Must be exactly '{render_value(expected)}'", expected)
        return valid(value)

    return validator
