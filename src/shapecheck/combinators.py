"""Combinators that compose validators into larger validators.

None of these look inside the validators they wrap beyond the
ValidationResult they return. All children are always evaluated, so a
single pass reports every issue in the input.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from shapecheck.result import (
    Schema,
    ValidationIssue,
    ValidationResult,
    invalid,
    prefix_issues,
    render_value,
    valid,
)


def pipe(*validators: Schema) -> Schema:
    """Run several validators against the same value.

    Every validator sees the original input (nothing is threaded through),
    and the merged result always carries that input as ``value``.
    """

    def validator(value: Any) -> ValidationResult:
        errors: list[ValidationIssue] = []
        for current in validators:
            errors.extend(current(value).errors)
        return ValidationResult(errors=errors, value=value)

    return validator


def optional(schema: Schema) -> Schema:
    """Accept None without consulting ``schema``."""

    def validator(value: Any) -> ValidationResult:
        if value is None:
            return valid(value)
        return schema(value)

    return validator


def object_(fields: Mapping[str, Schema]) -> Schema:
    """Validate a mapping field by field.

    Fields are checked in the order of ``fields``. A key missing from the
    input is read as None, so only ``optional`` fields may be omitted.
    Issues from a field are relocated under that field's key. On success
    (or on field failures) the original mapping is returned as ``value``;
    only a non-mapping input is replaced by ``{}``. Any
    ``collections.abc.Mapping`` passes the gate; lists, tuples and other
    objects (including class instances with attributes) are rejected with
    "Must be an object".

    The field mapping is available afterwards as the validator's ``schema``
    attribute.
    """
    field_schemas = dict(fields)

    def validator(value: Any) -> ValidationResult:
        if not isinstance(value, Mapping):
            return invalid("Must be an object", {})

        errors: list[ValidationIssue] = []
        for key, current in field_schemas.items():
            result = current(value.get(key))
            if not result.is_valid:
                errors.extend(prefix_issues(key, result.errors))

        return ValidationResult(errors=errors, value=value)

    validator.schema = MappingProxyType(field_schemas)  # type: ignore[attr-defined]
    return validator


def array(*item_schemas: Schema) -> Schema:
    """Validate every element of a list or tuple.

    Each element goes through ``pipe(*item_schemas)``; its issues are
    relocated under the element's index.
    """
    item_validator = pipe(*item_schemas)

    def validator(value: Any) -> ValidationResult:
        if not isinstance(value, (list, tuple)):
            return invalid("Must be an array", [])

        errors: list[ValidationIssue] = []
        for index, item in enumerate(value):
            result = item_validator(item)
            if not result.is_valid:
                errors.extend(prefix_issues(index, result.errors))

        return ValidationResult(errors=errors, value=value)

    return validator


def _render_fallback(value: Any) -> str:
    return "" if value is None else render_value(value)


def union(schemas: Sequence[Schema]) -> Schema:
    """Accept the value if any of ``schemas`` accepts it.

    All branches run before a match is chosen. The first valid result, in
    branch order, is returned unchanged. When every branch fails, a single
    summary issue lists the branch count and each branch's fallback value.
    """
    branches = tuple(schemas)

    def validator(value: Any) -> ValidationResult:
        results = [branch(value) for branch in branches]
        for result in results:
            if result.is_valid:
                return result

        values = ", ".join(_render_fallback(result.value) for result in results)
        return invalid(
            f"Value must match one of the {len(branches)} values ({values})",
            value,
        )

    return validator
