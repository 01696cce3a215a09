"""Refinement factory and the value-constraint validators built on it.

Refinements assume the value already passed a type check (see
shapecheck.primitives), so each rule only has to handle its own type.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sized
from typing import Any

from shapecheck.result import Schema, ValidationResult, invalid, valid

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def create_validator(rule: Callable[[Any], str | None]) -> Schema:
    """Lift a rule into a validator.

    Args:
        rule: Callable returning an error message when the value is
            rejected, or None when it is accepted.

    Returns:
        A validator yielding one path-less issue with the rule's message on
        failure. The input is returned as ``value`` either way.
    """

    def validator(value: Any) -> ValidationResult:
        message = rule(value)
        if message:
            return invalid(message, value)
        return valid(value)

    return validator


def min_length(length: int, message: str | None = None) -> Schema:
    """Require ``len(value) >= length``."""
    if message is None:
        message = f"Minimum length is {length}"

    def rule(value: Sized) -> str | None:
        return None if len(value) >= length else message

    return create_validator(rule)


def max_length(length: int, message: str | None = None) -> Schema:
    """Require ``len(value) <= length``."""
    if message is None:
        message = f"Maximum length is {length}"

    def rule(value: Sized) -> str | None:
        return None if len(value) <= length else message

    return create_validator(rule)


def pattern(regex: str | re.Pattern[str], message: str = "Invalid pattern format") -> Schema:
    """Require a regex match anywhere in the string.

    Args:
        regex: Pattern source or compiled pattern. Anchor it with ``^``/``$``
            to match the whole string.
        message: Error message used when the pattern does not match.
    """
    compiled = re.compile(regex) if isinstance(regex, str) else regex

    def rule(value: str) -> str | None:
        return None if compiled.search(value) else message

    return create_validator(rule)


def email(message: str = "Invalid email format") -> Schema:
    """Require a ``local@domain.tld`` shaped string."""

    def rule(value: str) -> str | None:
        return None if EMAIL_PATTERN.fullmatch(value) else message

    return create_validator(rule)


def min_(minimum: float, message: str | None = None) -> Schema:
    """Require ``value >= minimum``."""
    if message is None:
        message = f"Must be at least {minimum}"

    def rule(value: float) -> str | None:
        return None if value >= minimum else message

    return create_validator(rule)


def max_(maximum: float, message: str | None = None) -> Schema:
    """Require ``value <= maximum``."""
    if message is None:
        message = f"Must be at most {maximum}"

    def rule(value: float) -> str | None:
        return None if value <= maximum else message

    return create_validator(rule)
