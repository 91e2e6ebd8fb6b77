"""Error Model

A checked string type reports failures with one of two error shapes:

- Unit errors (default): an Enum generated from the ordered check list, one
  member per check, same names, same order. Members order by declaration
  position, so the tag that wins a sort is also the one validation reports.
- Collapsed errors: a single opaque marker class per string type, carrying
  only a human-readable message derived from the type's name.

Both shapes are hashable and totally ordered so they can be map keys and be
compared in tests.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, Sequence

if TYPE_CHECKING:
    from .checks import Check, Rule

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class ErrorPolicy(str, Enum):
    """How a checked type reports failures."""
    UNIT = "unit"
    COLLAPSED = "collapsed"


def humanize(type_name: str) -> str:
    """Turn a CamelCase type name into lowercase words: Rgb8Hex -> rgb8 hex."""
    return _CAMEL_BOUNDARY.sub(" ", type_name).lower()


class CheckError(Enum):
    """Base of generated per-check error enumerations.

    Usage:
        UsernameError = CheckError.derive("Username", "UsernameError", checks)
        UsernameError.NonEmpty < UsernameError.MinLen  # True
        UsernameError.MinLen.rule                      # MinLen(length=3)
    """

    @classmethod
    def derive(cls, type_name: str, error_name: str, checks: Sequence[Check], *,
               module: str | None = None) -> type[CheckError]:
        """Build the error Enum for an ordered check list."""
        error_type = cls(
            error_name,
            names=[(check.tag, position) for position, check in enumerate(checks, start=1)],
            module=module,
        )
        error_type._type_name_ = type_name
        error_type._rules_ = MappingProxyType({check.tag: check.rule for check in checks})
        return error_type

    @property
    def tag(self) -> str:
        return self.name

    @property
    def position(self) -> int:
        """Zero-based index of the check in declaration order."""
        return self.value - 1

    @property
    def rule(self) -> Rule:
        return type(self)._rules_[self.name]

    def describe(self) -> str:
        return f"{type(self)._type_name_}::{self.name} check failed ({self.rule.constraint_name})"

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.value >= other.value


@dataclass(frozen=True, slots=True, order=True)
class CollapsedError:
    """Opaque "invalid" marker. Subclassed once per string type.

    Instances of the same marker class are all equal; they carry no detail
    about which check failed.
    """
    type_name: ClassVar[str] = ""
    message: ClassVar[str] = "invalid value"

    def describe(self) -> str:
        return self.message

    def __str__(self) -> str:
        return self.message

    @classmethod
    def derive(cls, type_name: str, error_name: str, *, module: str | None = None) -> type[CollapsedError]:
        """Build the marker class for a string type."""
        marker = type(error_name, (cls,), {
            "__slots__": (),
            "__doc__": f"Opaque error for rejected {type_name} input.",
            "type_name": type_name,
            "message": f"invalid {humanize(type_name)}",
        })
        if module is not None:
            marker.__module__ = module
        return marker


def default_error_name(type_name: str, policy: ErrorPolicy) -> str:
    if policy is ErrorPolicy.COLLAPSED:
        return f"Invalid{type_name}"
    return f"{type_name}Error"


def build_error_type(type_name: str, error_name: str, checks: Sequence[Check],
                     policy: ErrorPolicy, *, module: str | None = None) -> type | None:
    """Error type for a definition, or None when it has no checks."""
    if not checks:
        return None
    if policy is ErrorPolicy.COLLAPSED:
        return CollapsedError.derive(type_name, error_name, module=module)
    return CheckError.derive(type_name, error_name, checks, module=module)
