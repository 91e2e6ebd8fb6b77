"""Type Definitions

A TypeSpec is the complete, immutable description of a string type: its
name, the storage kind parse() produces, and the ordered check list. Every
derived property (determinism, length bound, error naming) is computed from
these fields alone.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Union

from strype.errors import DefinitionError
from strype.validation.checks import Check, Len, MaxLen, Rule
from strype.validation.engine import Determinism, classify
from strype.validation.errors import ErrorPolicy, default_error_name

from .storage import Box, Ref

CheckList = Union[Mapping[str, Rule], Iterable[Check]]


class InnerKind(str, Enum):
    """Storage kind of a string type's inner value."""
    OWNED = "owned"              # str
    OWNED_FIXED = "owned_fixed"  # Box[str]
    BORROWED = "borrowed"        # Ref[str]

    def wrap(self, text: str) -> str | Box[str] | Ref[str]:
        """Put text into this kind of storage without copying it."""
        if self is InnerKind.OWNED_FIXED:
            return Box(text)
        if self is InnerKind.BORROWED:
            return Ref(text)
        return text


def normalize_checks(checks: CheckList | None) -> tuple[Check, ...]:
    """Accept {tag: rule} (insertion order) or an iterable of Check."""
    if checks is None:
        return ()
    if isinstance(checks, Mapping):
        return tuple(Check(tag, rule) for tag, rule in checks.items())
    normalized = []
    for check in checks:
        if not isinstance(check, Check):
            raise DefinitionError(f"expected Check, got {type(check).__name__}")
        normalized.append(check)
    return tuple(normalized)


@dataclass(frozen=True, slots=True)
class TypeSpec:
    """Definition of one string type.

    Usage:
        spec = TypeSpec(
            "Username",
            checks={"NonEmpty": NonEmpty(), "Trimmed": AsciiTrimmed(), "MinLen": MinLen(3)},
        )
        spec.determinism  # Determinism.COMPILE_TIME
    """
    name: str
    inner_kind: InnerKind = InnerKind.OWNED
    checks: Any = ()
    error_name: str | None = None
    error_policy: ErrorPolicy = ErrorPolicy.UNIT
    doc: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise DefinitionError(f"type name must be an identifier, got {self.name!r}")
        object.__setattr__(self, "inner_kind", _coerce(InnerKind, self.inner_kind, "inner_kind"))
        object.__setattr__(self, "error_policy", _coerce(ErrorPolicy, self.error_policy, "error_policy"))
        object.__setattr__(self, "checks", normalize_checks(self.checks))

        seen: set[str] = set()
        for check in self.checks:
            if check.tag in seen:
                raise DefinitionError(f"duplicate check tag {check.tag!r} in {self.name}")
            seen.add(check.tag)

        if self.error_name is not None:
            if not isinstance(self.error_name, str) or not self.error_name.isidentifier():
                raise DefinitionError(f"error name must be an identifier, got {self.error_name!r}")
            if self.error_name == self.name:
                raise DefinitionError(f"error name must differ from type name {self.name!r}")

    @property
    def determinism(self) -> Determinism:
        return classify([check.rule for check in self.checks])

    @property
    def resolved_error_name(self) -> str | None:
        """Name of the generated error type, or None for infallible types."""
        if not self.checks:
            return None
        return self.error_name or default_error_name(self.name, self.error_policy)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(check.tag for check in self.checks)

    @property
    def max_length(self) -> int | None:
        """Tightest byte-length upper bound implied by the checks."""
        bounds = [c.rule.length for c in self.checks if isinstance(c.rule, (MaxLen, Len))]
        return min(bounds) if bounds else None


def _coerce(enum_type: type[Enum], value: Any, label: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise DefinitionError(f"{label} must be one of {choices}, got {value!r}") from None
