"""Unit tests for the validation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strype.errors import Err, Ok
from strype.validation import (
    AsciiTrimmed,
    Check,
    Determinism,
    ErrorPolicy,
    Len,
    MaxLen,
    MinLen,
    NonEmpty,
    Regex,
    Rule,
    Validator,
    classify,
)


@dataclass(frozen=True, eq=False)
class Recording(Rule):
    """Test rule that records the values it saw."""
    kind: ClassVar[str] = "recording"
    outcome: bool = True
    seen: list = field(default_factory=list)

    def test(self, value: str) -> bool:
        self.seen.append(value)
        return self.outcome


def _username_checks() -> list[Check]:
    return [
        Check("NonEmpty", NonEmpty()),
        Check("Trimmed", AsciiTrimmed()),
        Check("MinLen", MinLen(3)),
        Check("MaxLen", MaxLen(20)),
    ]


def test_success_returns_ok_none() -> None:
    validator = Validator("Username", _username_checks())
    assert validator.evaluate("demurgos") == Ok(None)


@pytest.mark.parametrize(
    ("value", "tag"),
    [
        ("", "NonEmpty"),
        (" demurgos ", "Trimmed"),
        (" ", "Trimmed"),
        ("ab", "MinLen"),
        ("a" * 21, "MaxLen"),
    ],
)
def test_first_failing_check_in_declaration_order(value: str, tag: str) -> None:
    validator = Validator("Username", _username_checks())
    result = validator.evaluate(value)
    assert result == Err(validator.error_type[tag])
    assert validator.first_failure(value) == tag


def test_later_checks_do_not_run_after_failure() -> None:
    later = Recording()
    validator = Validator("Probe", [Check("First", Recording(outcome=False)), Check("Later", later)])
    assert validator.first_failure("x") == "First"
    validator.evaluate("y")
    assert later.seen == []


def test_every_check_runs_on_success() -> None:
    first, second = Recording(), Recording()
    validator = Validator("Probe", [Check("First", first), Check("Second", second)])
    assert validator.is_valid("x")
    assert first.seen == ["x"]
    assert second.seen == ["x"]


def test_empty_check_list_is_infallible() -> None:
    validator = Validator("Markdown", [])
    assert validator.is_infallible
    assert validator.error_type is None
    assert validator.determinism is Determinism.INFALLIBLE
    assert validator.evaluate("# Hello!").is_ok()


@given(st.text())
def test_infallible_accepts_everything(value: str) -> None:
    assert Validator("Anything", []).is_valid(value)


def test_classify() -> None:
    assert classify([]) is Determinism.INFALLIBLE
    assert classify([NonEmpty(), Len(6)]) is Determinism.COMPILE_TIME
    assert classify([NonEmpty(), Regex("a")]) is Determinism.RUNTIME_ONLY


def test_collapsed_policy_reports_one_marker() -> None:
    validator = Validator("Username", _username_checks(), error_policy=ErrorPolicy.COLLAPSED)
    empty = validator.evaluate("").unwrap_err()
    short = validator.evaluate("ab").unwrap_err()
    assert empty == short
    assert type(empty).__name__ == "InvalidUsername"
    assert str(empty) == "invalid username"


def test_custom_error_name() -> None:
    validator = Validator("Username", _username_checks(), error_name="BadUsername")
    assert validator.error_type.__name__ == "BadUsername"


def test_pattern_builds_and_warm() -> None:
    validator = Validator("Rgb8Hex", [Check("Len", Len(6)), Check("HexOnly", Regex("^[0-9a-f]{6}$"))])
    assert validator.pattern_builds() == {"HexOnly": 0}
    validator.evaluate("abc")
    assert validator.pattern_builds() == {"HexOnly": 0}
    validator.warm()
    validator.warm()
    assert validator.pattern_builds() == {"HexOnly": 1}
