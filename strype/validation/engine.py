"""Validation Engine

Binds an ordered check list to one string type and evaluates it:
- checks run strictly in declaration order
- the first failing check decides the error; later checks are not run
- success only when every check passes
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Sequence

from strype.errors import Err, Ok, Result

from .checks import Check, Rule
from .errors import ErrorPolicy, build_error_type, default_error_name
from .patterns import LazyPattern

_OK: Ok[None] = Ok(None)


class Determinism(str, Enum):
    """Structural classification of a check list.

    INFALLIBLE: no checks, construction cannot fail.
    COMPILE_TIME: every check runs without one-time setup.
    RUNTIME_ONLY: at least one check needs a lazily built matcher.
    """
    INFALLIBLE = "infallible"
    COMPILE_TIME = "compile_time"
    RUNTIME_ONLY = "runtime_only"


def classify(rules: Sequence[Rule]) -> Determinism:
    if not rules:
        return Determinism.INFALLIBLE
    if any(rule.needs_setup for rule in rules):
        return Determinism.RUNTIME_ONLY
    return Determinism.COMPILE_TIME


class BoundCheck:
    """A check bound to its owning type, ready to evaluate."""

    __slots__ = ("tag", "rule", "predicate", "error")

    def __init__(self, check: Check, predicate: Callable[[str], bool], error: Any):
        self.tag, self.rule, self.predicate, self.error = check.tag, check.rule, predicate, error

    def __repr__(self) -> str:
        return f"BoundCheck({self.tag}, {self.rule.constraint_name})"


class Validator:
    """Evaluates one type's checks against input text.

    Usage:
        validator = Validator("Username", [Check("NonEmpty", NonEmpty())])
        validator.evaluate("")   # Err(UsernameError.NonEmpty)
    """

    __slots__ = ("type_name", "error_type", "error_policy", "determinism", "_checks")

    def __init__(self, type_name: str, checks: Sequence[Check], *,
                 error_name: str | None = None, error_policy: ErrorPolicy = ErrorPolicy.UNIT,
                 module: str | None = None):
        self.type_name = type_name
        self.error_policy = error_policy
        self.determinism = classify([check.rule for check in checks])
        self.error_type = build_error_type(
            type_name, error_name or default_error_name(type_name, error_policy), checks, error_policy,
            module=module,
        )
        self._checks = tuple(
            BoundCheck(check, check.rule.bind(type_name, check.tag), self._error_for(check))
            for check in checks
        )

    def _error_for(self, check: Check) -> Any:
        if self.error_type is None:
            return None
        if self.error_policy is ErrorPolicy.COLLAPSED:
            return self.error_type()
        return self.error_type[check.tag]

    @property
    def checks(self) -> tuple[BoundCheck, ...]:
        return self._checks

    @property
    def is_infallible(self) -> bool:
        return not self._checks

    def evaluate(self, value: str) -> Result[None, Any]:
        """Ok(None) when value passes every check, else Err for the first failure."""
        for check in self._checks:
            if not check.predicate(value):
                return Err(check.error)
        return _OK

    def first_failure(self, value: str) -> str | None:
        """Tag of the first failing check, or None. Ignores the error policy."""
        for check in self._checks:
            if not check.predicate(value):
                return check.tag
        return None

    def is_valid(self, value: str) -> bool:
        return self.first_failure(value) is None

    def pattern_cells(self) -> dict[str, LazyPattern]:
        return {c.tag: c.predicate for c in self._checks if isinstance(c.predicate, LazyPattern)}

    def pattern_builds(self) -> dict[str, int]:
        """{tag: build count} for every pattern check."""
        return {tag: cell.builds for tag, cell in self.pattern_cells().items()}

    def warm(self) -> None:
        """Build every pattern cell now. Raises PatternCompileError for a bad pattern."""
        for cell in self.pattern_cells().values():
            cell.get()

    def __repr__(self) -> str:
        return f"Validator({self.type_name}, checks={[c.tag for c in self._checks]}, {self.determinism.value})"
