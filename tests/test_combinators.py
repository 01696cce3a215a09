"""Tests for shapecheck.combinators module."""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime
from types import SimpleNamespace
from typing import Any

import pytest

from shapecheck import (
    array,
    boolean,
    create_validator,
    date,
    email,
    literal,
    max_length,
    min_,
    min_length,
    number,
    object_,
    optional,
    pipe,
    string,
    union,
)
from shapecheck.result import Schema, ValidationIssue, ValidationResult


def _paths(result: ValidationResult) -> list[str | None]:
    return [issue.path for issue in result.errors]


class TestPipe:
    """Tests for the pipe combinator."""

    def test_empty_pipe_is_valid(self) -> None:
        """Test pipe() accepts anything unchanged."""
        result = pipe()({"any": "thing"})
        assert result.is_valid
        assert result.value == {"any": "thing"}

    def test_collects_every_error_in_order(self) -> None:
        """Test pipe runs every validator and keeps their order."""
        validator = pipe(min_length(5), max_length(1), min_length(3))
        result = validator("ab")
        assert [issue.errors for issue in result.errors] == [
            ["Minimum length is 5"],
            ["Maximum length is 1"],
            ["Minimum length is 3"],
        ]

    def test_every_validator_sees_original_value(self) -> None:
        """Test the input is not threaded between validators."""
        seen: list[Any] = []

        def swap(value: Any) -> ValidationResult:
            seen.append(value)
            return ValidationResult(errors=[], value="replaced")

        result = pipe(swap, swap)("original")
        assert seen == ["original", "original"]
        assert result.value == "original"

    def test_mixed_pass_and_fail(self) -> None:
        """Test a single failing step makes the whole pipe invalid."""
        result = pipe(min_length(1), max_length(2))("abc")
        assert not result.is_valid
        assert len(result.errors) == 1


class TestOptional:
    """Tests for the optional combinator."""

    def test_none_bypasses_schema(self) -> None:
        """Test None is accepted without calling the inner schema."""
        calls: list[Any] = []

        def inner(value: Any) -> ValidationResult:
            calls.append(value)
            return ValidationResult(errors=[ValidationIssue(errors=["never"])], value=value)

        result = optional(inner)(None)
        assert result.is_valid
        assert result.value is None
        assert calls == []

    @pytest.mark.parametrize("schema", [string(), number(), object_({"a": string()}), array()])
    def test_none_valid_for_any_schema(self, schema: Schema) -> None:
        """Test optional(schema)(None) is valid whatever the schema."""
        assert optional(schema)(None).is_valid

    def test_delegates_for_non_none(self) -> None:
        """Test non-None values are validated by the inner schema."""
        validator = optional(string())
        assert validator("x").is_valid
        result = validator(5)
        assert result.errors == [ValidationIssue(errors=["Must be a string"])]
        assert result.value == ""

    def test_falsy_values_are_not_skipped(self) -> None:
        """Test 0, "" and False are still validated."""
        assert not optional(string())(0).is_valid
        assert not optional(number())("").is_valid
        assert not optional(string())(False).is_valid


class TestObject:
    """Tests for the object_ combinator."""

    def test_age_scenario(self) -> None:
        """Test a failing nested refinement is reported under its key."""
        validator = object_({"age": number(min_(18))})
        value = {"age": 17}
        result = validator(value)
        assert not result.is_valid
        assert result.errors == [ValidationIssue(errors=["Must be at least 18"], path="age")]
        assert result.value == {"age": 17}

    @pytest.mark.parametrize(
        "value", [None, "x", 1, [1, 2], (1, 2), True, SimpleNamespace(a="x")]
    )
    def test_rejects_non_mapping(self, value: object) -> None:
        """Test non-mappings fail with fallback {}."""
        result = object_({"a": string()})(value)
        assert result.errors == [ValidationIssue(errors=["Must be an object"])]
        assert result.value == {}

    def test_collects_errors_from_all_fields(self) -> None:
        """Test every invalid field is reported in field order."""
        validator = object_({"name": string(), "age": number(), "active": boolean()})
        result = validator({"name": 1, "age": "x", "active": "yes"})
        assert _paths(result) == ["name", "age", "active"]

    def test_field_order_follows_schema(self) -> None:
        """Test errors follow schema key order, not input key order."""
        validator = object_({"b": string(), "a": string()})
        result = validator({"a": 1, "b": 2})
        assert _paths(result) == ["b", "a"]

    def test_missing_field_is_none(self) -> None:
        """Test absent keys are validated as None."""
        validator = object_({"name": string(), "nickname": optional(string())})
        result = validator({})
        assert result.errors == [ValidationIssue(errors=["Must be a string"], path="name")]

    def test_extra_keys_are_ignored(self) -> None:
        """Test keys not in the schema are left alone."""
        value = {"name": "a", "extra": object()}
        result = object_({"name": string()})(value)
        assert result.is_valid
        assert result.value is value

    def test_returns_original_input(self) -> None:
        """Test the original mapping is returned even with field errors."""
        value = {"name": 42}
        result = object_({"name": string()})(value)
        assert result.value is value
        assert result.value["name"] == 42

    def test_nested_path(self) -> None:
        """Test nested objects compose dotted paths."""
        validator = object_({"address": object_({"zipCode": string()})})
        result = validator({"address": {"zipCode": 123}})
        assert result.errors == [ValidationIssue(errors=["Must be a string"], path="address.zipCode")]

    def test_nested_type_failure_is_terminal(self) -> None:
        """Test a non-object child reports once at its own path."""
        validator = object_({"address": object_({"zipCode": string(), "city": string()})})
        result = validator({"address": "nowhere"})
        assert result.errors == [ValidationIssue(errors=["Must be an object"], path="address")]

    def test_accepts_any_mapping(self) -> None:
        """Test Mapping subclasses are accepted."""
        result = object_({"a": number()})(OrderedDict(a=1))
        assert result.is_valid

    def test_schema_attribute(self) -> None:
        """Test the field mapping is exposed and read-only."""
        name = string()
        fields = {"name": name}
        validator = object_(fields)
        assert dict(validator.schema) == {"name": name}  # type: ignore[attr-defined]
        fields["other"] = number()
        assert "other" not in validator.schema  # type: ignore[attr-defined]
        with pytest.raises(TypeError):
            validator.schema["x"] = number()  # type: ignore[attr-defined,index]

    def test_empty_schema(self) -> None:
        """Test an empty field map accepts any mapping."""
        assert object_({})({"a": 1}).is_valid


class TestArray:
    """Tests for the array combinator."""

    def test_index_path(self) -> None:
        """Test a failing element is reported at its index."""
        result = array(number())([1, "x", 3])
        assert result.errors == [ValidationIssue(errors=["Must be a number"], path="1")]
        assert result.value == [1, "x", 3]

    @pytest.mark.parametrize("value", [None, "abc", {"0": 1}, 5])
    def test_rejects_non_sequence(self, value: object) -> None:
        """Test non-lists fail with fallback []."""
        result = array(number())(value)
        assert result.errors == [ValidationIssue(errors=["Must be an array"])]
        assert result.value == []

    def test_accepts_tuple(self) -> None:
        """Test tuples are validated like lists."""
        assert array(number())((1, 2)).is_valid

    def test_empty_array(self) -> None:
        """Test an empty list is valid."""
        assert array(string())([]).is_valid

    def test_collects_every_element(self) -> None:
        """Test every failing index is reported in order."""
        result = array(string())([1, "ok", 2, None])
        assert _paths(result) == ["0", "2", "3"]

    def test_multiple_item_schemas(self) -> None:
        """Test every item schema runs against each element."""
        result = array(string(), min_length(2))(["abc", "a"])
        assert result.errors == [ValidationIssue(errors=["Minimum length is 2"], path="1")]

    def test_no_item_schema(self) -> None:
        """Test array() accepts any list."""
        assert array()([1, "a", None]).is_valid

    def test_nested_object_path(self) -> None:
        """Test objects inside arrays compose index and key."""
        validator = array(object_({"email": string(email())}))
        result = validator([{"email": "a@b.co"}, {"email": "nope"}])
        assert result.errors == [ValidationIssue(errors=["Invalid email format"], path="1.email")]

    def test_array_in_object(self) -> None:
        """Test arrays inside objects compose key and index."""
        validator = object_({"tags": array(string())})
        result = validator({"tags": ["a", 2]})
        assert _paths(result) == ["tags.1"]


class TestUnion:
    """Tests for the union combinator."""

    def test_first_match(self) -> None:
        """Test the first valid branch's result is returned."""
        validator = union([literal("active"), literal("inactive")])
        result = validator("inactive")
        assert result.is_valid
        assert result.value == "inactive"

    def test_returns_first_valid_branch_verbatim(self) -> None:
        """Test the exact result object of the winning branch is returned."""
        first = ValidationResult(errors=[], value="first")
        second = ValidationResult(errors=[], value="second")
        result = union([lambda v: first, lambda v: second])("x")
        assert result is first

    def test_all_fail(self) -> None:
        """Test a single summary issue lists the branch count and fallbacks."""
        result = union([literal("A"), literal("B")])("C")
        assert len(result.errors) == 1
        assert result.errors[0].path is None
        assert result.errors[0].errors == ["Value must match one of the 2 values (A, B)"]
        assert result.value == "C"

    def test_all_fail_uses_branch_fallbacks(self) -> None:
        """Test fallbacks of mixed branches are joined as rendered."""
        result = union([string(), number(), boolean()])(None)
        assert result.errors[0].errors == ["Value must match one of the 3 values (, 0, false)"]

    def test_boolean_fallback_renders_lowercase(self) -> None:
        """Test a boolean fallback is named as true/false."""
        result = union([boolean(), number()])("x")
        assert result.errors[0].errors == ["Value must match one of the 2 values (false, 0)"]

    def test_none_fallback_renders_empty(self) -> None:
        """Test a None fallback renders as an empty string."""
        result = union([literal(None), literal("x")])("y")
        assert result.errors[0].errors == ["Value must match one of the 2 values (, x)"]

    def test_every_branch_runs(self) -> None:
        """Test branches after the match are still evaluated."""
        calls: list[str] = []

        def branch(name: str) -> Schema:
            def validator(value: Any) -> ValidationResult:
                calls.append(name)
                return ValidationResult(errors=[], value=value)

            return validator

        union([branch("a"), branch("b"), branch("c")])(1)
        assert calls == ["a", "b", "c"]

    def test_union_in_object_is_pathed(self) -> None:
        """Test a failed union inside an object gets the field path."""
        validator = object_({"status": union([literal("on"), literal("off")])})
        result = validator({"status": "maybe"})
        assert _paths(result) == ["status"]

    def test_union_of_structures(self) -> None:
        """Test unions of objects pick the matching shape."""
        cat = object_({"kind": literal("cat"), "lives": number()})
        dog = object_({"kind": literal("dog"), "good": boolean()})
        validator = union([cat, dog])
        assert validator({"kind": "dog", "good": True}).is_valid
        assert not validator({"kind": "dog", "good": "very"}).is_valid


class TestContract:
    """Properties that hold across every validator."""

    SCHEMA = staticmethod(object_(
        {
            "name": string(min_length(2)),
            "email": string(email()),
            "age": optional(number(min_(0))),
            "created": date(),
            "roles": array(union([literal("admin"), literal("user")])),
            "address": optional(object_({"zipCode": string(), "city": string()})),
            "even": number(create_validator(lambda v: None if v % 2 == 0 else "Must be even")),
        }
    ))

    INPUTS: list[Any] = [
        None,
        "text",
        [],
        {},
        {"name": "x", "email": "bad", "age": -1, "created": "yesterday", "roles": ["root", "user"]},
        {"address": {"zipCode": 123}, "even": 3},
        {
            "name": "Ada",
            "email": "ada@example.com",
            "created": datetime(2024, 1, 1),
            "roles": ["admin"],
            "even": 2,
        },
    ]

    @pytest.mark.parametrize("value", INPUTS)
    def test_is_valid_matches_errors(self, value: Any) -> None:
        """Test is_valid always agrees with the errors list."""
        result = self.SCHEMA(value)
        assert result.is_valid == (len(result.errors) == 0)

    @pytest.mark.parametrize("value", INPUTS)
    def test_idempotent(self, value: Any) -> None:
        """Test validating the same input twice gives equal results."""
        assert self.SCHEMA(value) == self.SCHEMA(value)

    def test_all_sibling_errors_reported(self) -> None:
        """Test every violation in one pass with full paths."""
        result = self.SCHEMA(self.INPUTS[4])
        assert _paths(result) == ["name", "email", "age", "created", "roles.0", "even"]

    def test_fully_valid_input(self) -> None:
        """Test the complete valid document passes."""
        assert self.SCHEMA(self.INPUTS[6]).is_valid
