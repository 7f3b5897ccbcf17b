"""Tests for wren.validation — Rule evaluation and one-shot validate()."""

import asyncio
import logging
import re

import pytest

from wren.validation import (
    FAILED_MESSAGE,
    Rule,
    ValidationResult,
    evaluate,
    is_empty,
    validate,
)

# ---------------------------------------------------------------------------
# Emptiness
# ---------------------------------------------------------------------------


class TestIsEmpty:
    @pytest.mark.parametrize("value", [None, False, "", "   ", "\t\n", [], {}, b""])
    def test_empty(self, value: object) -> None:
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, 0.0, True, "a", " a ", [0], object()])
    def test_not_empty(self, value: object) -> None:
        assert not is_empty(value)


# ---------------------------------------------------------------------------
# evaluate()
# ---------------------------------------------------------------------------


class TestRequired:
    @pytest.mark.asyncio
    async def test_custom_message(self) -> None:
        rule = Rule(required=True, message="Email required")
        assert await evaluate("", rule) == "Email required"

    @pytest.mark.asyncio
    async def test_default_message(self) -> None:
        assert await evaluate("  ", Rule(required=True)) == "This field is required"

    @pytest.mark.asyncio
    async def test_unchecked_checkbox_is_missing(self) -> None:
        assert await evaluate(False, Rule(required=True)) is not None

    @pytest.mark.asyncio
    async def test_zero_is_present(self) -> None:
        assert await evaluate(0, Rule(required=True)) is None

    @pytest.mark.asyncio
    async def test_short_circuits_other_checks(self) -> None:
        calls: list[object] = []
        rule = Rule(required=True, min_length=3, check=lambda v: calls.append(v))
        assert await evaluate(None, rule) == "This field is required"
        assert calls == []


class TestOptionalEmpty:
    @pytest.mark.asyncio
    async def test_empty_optional_skips_length(self) -> None:
        assert await evaluate("", Rule(min_length=5)) is None

    @pytest.mark.asyncio
    async def test_short_value_still_checked(self) -> None:
        assert await evaluate("ab", Rule(min_length=5)) == "Must be at least 5 characters"

    @pytest.mark.asyncio
    async def test_empty_optional_skips_check(self) -> None:
        rule = Rule(check=lambda v: "never")
        assert await evaluate(None, rule) is None

    @pytest.mark.asyncio
    async def test_check_empty_runs_check_but_not_length(self) -> None:
        rule = Rule(min_length=3, check=lambda v: f"saw {v!r}", check_empty=True)
        assert await evaluate("", rule) == "saw ''"


class TestStringChecks:
    @pytest.mark.asyncio
    async def test_min_length(self) -> None:
        rule = Rule(min_length=8)
        assert await evaluate("abc", rule) == "Must be at least 8 characters"
        assert await evaluate("abcdefgh", rule) is None

    @pytest.mark.asyncio
    async def test_max_length(self) -> None:
        rule = Rule(max_length=3)
        assert await evaluate("abcd", rule) == "Must be no more than 3 characters"
        assert await evaluate("abc", rule) is None

    @pytest.mark.asyncio
    async def test_pattern_string(self) -> None:
        rule = Rule(pattern=r"^[a-z]+$")
        assert await evaluate("ABC", rule) == "Invalid format"
        assert await evaluate("abc", rule) is None

    @pytest.mark.asyncio
    async def test_pattern_compiled_uses_search(self) -> None:
        rule = Rule(pattern=re.compile(r"\d"))
        assert await evaluate("abc1", rule) is None

    @pytest.mark.asyncio
    async def test_message_overrides_every_default(self) -> None:
        rule = Rule(min_length=2, max_length=4, pattern=r"^\d+$", message="Bad")
        assert await evaluate("1", rule) == "Bad"
        assert await evaluate("12345", rule) == "Bad"
        assert await evaluate("ab", rule) == "Bad"

    @pytest.mark.asyncio
    async def test_order_min_before_max_before_pattern(self) -> None:
        rule = Rule(min_length=5, pattern=r"^\d+$")
        assert await evaluate("ab", rule) == "Must be at least 5 characters"

    @pytest.mark.asyncio
    async def test_non_string_skips_length_and_pattern(self) -> None:
        rule = Rule(min_length=5, pattern=r"^x$")
        assert await evaluate(42, rule) is None


class TestCustomCheck:
    @pytest.mark.asyncio
    async def test_sync_error(self) -> None:
        rule = Rule(check=lambda v: "nope" if v == "x" else None)
        assert await evaluate("x", rule) == "nope"
        assert await evaluate("y", rule) is None

    @pytest.mark.asyncio
    async def test_async_error(self) -> None:
        async def check(value: str) -> str | None:
            await asyncio.sleep(0)
            return "taken" if value == "alice" else None

        assert await evaluate("alice", Rule(check=check)) == "taken"
        assert await evaluate("bob", Rule(check=check)) is None

    @pytest.mark.asyncio
    async def test_falsy_result_is_valid(self) -> None:
        assert await evaluate("x", Rule(check=lambda v: "")) is None

    @pytest.mark.asyncio
    async def test_runs_after_builtin_checks_pass(self) -> None:
        rule = Rule(min_length=3, check=lambda v: "custom")
        assert await evaluate("ab", rule) == "Must be at least 3 characters"
        assert await evaluate("abc", rule) == "custom"

    @pytest.mark.asyncio
    async def test_receives_non_string_values(self) -> None:
        rule = Rule(min_length=5, check=lambda v: "too young" if v < 18 else None)
        assert await evaluate(12, rule) == "too young"

    @pytest.mark.asyncio
    async def test_exception_becomes_message(self) -> None:
        def check(value: str) -> str | None:
            raise RuntimeError("service down")

        assert await evaluate("x", Rule(check=check)) == "Validation error: service down"

    @pytest.mark.asyncio
    async def test_async_exception_without_message(self) -> None:
        async def check(value: str) -> str | None:
            raise ValueError

        assert await evaluate("x", Rule(check=check)) == "Validation error: Unknown error"

    @pytest.mark.asyncio
    async def test_malformed_pattern_propagates(self) -> None:
        with pytest.raises(re.error):
            await evaluate("x", Rule(pattern="("))


# ---------------------------------------------------------------------------
# validate()
# ---------------------------------------------------------------------------


class TestValidate:
    @pytest.mark.asyncio
    async def test_all_valid(self) -> None:
        result = await validate(
            {"name": "Ada", "age": 36},
            {"name": Rule(required=True), "age": Rule(check=lambda v: None)},
        )
        assert isinstance(result, ValidationResult)
        assert result
        assert result.is_valid
        assert result.data == {"name": "Ada", "age": 36}
        assert result.errors == {}

    @pytest.mark.asyncio
    async def test_collects_errors(self) -> None:
        result = await validate(
            {"name": "", "email": "bad"},
            {"name": Rule(required=True), "email": Rule(pattern=r"@")},
        )
        assert not result
        assert result.errors == {"name": "This field is required", "email": "Invalid format"}
        assert result.data == {}

    @pytest.mark.asyncio
    async def test_missing_value_is_none(self) -> None:
        result = await validate({}, {"name": Rule(required=True, message="Name?")})
        assert result.errors == {"name": "Name?"}

    @pytest.mark.asyncio
    async def test_unruled_fields_ignored(self) -> None:
        result = await validate({"a": "1", "b": "2"}, {"a": Rule()})
        assert result.data == {"a": "1"}

    @pytest.mark.asyncio
    async def test_runs_concurrently(self) -> None:
        started: list[str] = []
        gate = asyncio.Event()

        async def slow(value: str) -> str | None:
            started.append(value)
            if len(started) == 2:
                gate.set()
            await gate.wait()
            return None

        result = await asyncio.wait_for(
            validate({"a": "x", "b": "y"}, {"a": Rule(check=slow), "b": Rule(check=slow)}),
            timeout=1,
        )
        assert result
        assert sorted(started) == ["x", "y"]

    @pytest.mark.asyncio
    async def test_evaluator_fault_fails_only_that_field(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.validation"):
            result = await validate(
                {"a": "x", "b": "y"},
                {"a": Rule(pattern="("), "b": Rule(required=True)},
            )
        assert result.errors == {"a": FAILED_MESSAGE}
        assert result.data == {"b": "y"}
        assert "field 'a'" in caplog.text
