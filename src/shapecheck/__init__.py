"""Composable runtime validation for untyped data.

Schemas are built from small validator callables and report every issue in
the input, each located by a dotted path::

    from shapecheck import number, min_, object_, string, email

    user = object_({"email": string(email()), "age": number(min_(18))})
    result = user({"email": "a@b.co", "age": 17})
    result.errors  # [ValidationIssue(errors=['Must be at least 18'], path='age')]
"""

from __future__ import annotations

from shapecheck.combinators import array, object_, optional, pipe, union
from shapecheck.primitives import boolean, date, literal, number, string
from shapecheck.refinements import (
    create_validator,
    email,
    max_,
    max_length,
    min_,
    min_length,
    pattern,
)
from shapecheck.result import Schema, ValidationIssue, ValidationResult

__version__ = "0.1.0"

__all__ = [
    # Result model
    "Schema",
    "ValidationIssue",
    "ValidationResult",
    # Primitives
    "boolean",
    "date",
    "literal",
    "number",
    "string",
    # Refinements
    "create_validator",
    "email",
    "max_",
    "max_length",
    "min_",
    "min_length",
    "pattern",
    # Combinators
    "array",
    "object_",
    "optional",
    "pipe",
    "union",
]
