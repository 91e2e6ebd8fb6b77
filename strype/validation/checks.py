"""Check Catalog

Stateless rules over a string value. Rules are frozen dataclasses so a type
definition can inspect them structurally: the error model names one tag per
check and the determinism of a definition is read off the rules' needs_setup
flags, without calling anything.

Lengths are UTF-8 byte lengths, not character counts.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar

from strype.errors import DefinitionError

from .patterns import LazyPattern, strict_end_anchors

Predicate = Callable[[str], bool]

# str.isspace() is too broad; only these five count as ASCII whitespace
ASCII_WHITESPACE = " \t\n\x0c\r"

# Attribute names of generated error enums
RESERVED_TAGS = frozenset({"name", "value", "tag", "rule", "position", "describe", "derive"})


def byte_length(value: str) -> int:
    """UTF-8 encoded length of value."""
    if value.isascii():
        return len(value)
    return len(value.encode("utf-8"))


class Rule(ABC):
    """Base class for catalog rules.

    Subclasses set kind and implement test(). Rules whose test needs
    one-time initialization (compiling a pattern) set needs_setup and
    override bind() to hand the engine a predicate backed by a cache.
    """

    __slots__ = ()

    kind: ClassVar[str]
    needs_setup: ClassVar[bool] = False

    @abstractmethod
    def test(self, value: str) -> bool:
        """Return True when value satisfies the rule."""

    @property
    def constraint_name(self) -> str:
        return self.kind

    def json_schema(self) -> dict[str, Any]:
        """JSON Schema keywords this rule contributes."""
        return {}

    def bind(self, type_name: str, tag: str) -> Predicate:
        """Predicate used by the engine for the (type, check) pair."""
        return self.test


def _require_length(rule: Rule, length: Any) -> None:
    if isinstance(length, bool) or not isinstance(length, int):
        raise DefinitionError(f"{rule.kind} length must be an int, got {type(length).__name__}")
    if length < 0:
        raise DefinitionError(f"{rule.kind} length must be non-negative, got {length}")


@dataclass(frozen=True, slots=True)
class NonEmpty(Rule):
    """Passes for any value with at least one byte."""
    kind: ClassVar[str] = "non_empty"

    def test(self, value: str) -> bool:
        return len(value) > 0

    def json_schema(self) -> dict[str, Any]:
        return {"minLength": 1}


@dataclass(frozen=True, slots=True)
class AsciiTrimmed(Rule):
    """Passes when there is no leading or trailing ASCII whitespace.

    Non-ASCII whitespace such as U+00A0 is not trimmed.
    """
    kind: ClassVar[str] = "ascii_trimmed"

    def test(self, value: str) -> bool:
        return len(value.strip(ASCII_WHITESPACE)) == len(value)


@dataclass(frozen=True, slots=True)
class MinLen(Rule):
    kind: ClassVar[str] = "min_len"
    length: int

    def __post_init__(self) -> None:
        _require_length(self, self.length)

    @property
    def constraint_name(self) -> str:
        return f"min_len[{self.length}]"

    def test(self, value: str) -> bool:
        return byte_length(value) >= self.length

    def json_schema(self) -> dict[str, Any]:
        return {"minLength": self.length}


@dataclass(frozen=True, slots=True)
class MaxLen(Rule):
    kind: ClassVar[str] = "max_len"
    length: int

    def __post_init__(self) -> None:
        _require_length(self, self.length)

    @property
    def constraint_name(self) -> str:
        return f"max_len[{self.length}]"

    def test(self, value: str) -> bool:
        return byte_length(value) <= self.length

    def json_schema(self) -> dict[str, Any]:
        return {"maxLength": self.length}


@dataclass(frozen=True, slots=True)
class Len(Rule):
    """Exact byte length."""
    kind: ClassVar[str] = "len"
    length: int

    def __post_init__(self) -> None:
        _require_length(self, self.length)

    @property
    def constraint_name(self) -> str:
        return f"len[{self.length}]"

    def test(self, value: str) -> bool:
        return byte_length(value) == self.length

    def json_schema(self) -> dict[str, Any]:
        return {"minLength": self.length, "maxLength": self.length}


@dataclass(frozen=True, slots=True)
class Regex(Rule):
    """Passes when the pattern matches anywhere in the value (re.search).

    Anchor the pattern with ^ and $ to require a full match. $ means the end
    of the value, never "before a final newline". The compiled
    pattern is not stored on the rule: bind() returns a LazyPattern cell so
    each (type, check) pair compiles its own matcher exactly once.
    """
    kind: ClassVar[str] = "regex"
    needs_setup: ClassVar[bool] = True
    pattern: str
    flags: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, str):
            raise DefinitionError(f"regex pattern must be a string, got {type(self.pattern).__name__}")

    @property
    def constraint_name(self) -> str:
        return f"pattern[{self.pattern}]"

    def test(self, value: str) -> bool:
        # Unbound use compiles through re's own module cache
        return re.search(strict_end_anchors(self.pattern, self.flags), value, self.flags) is not None

    def json_schema(self) -> dict[str, Any]:
        return {"pattern": self.pattern}

    def bind(self, type_name: str, tag: str) -> LazyPattern:
        return LazyPattern(type_name, tag, self.pattern, self.flags)


@dataclass(frozen=True, slots=True)
class Check:
    """A named rule: one entry of a type's ordered check list."""
    tag: str
    rule: Rule

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str) or not self.tag.isidentifier():
            raise DefinitionError(f"check tag must be an identifier, got {self.tag!r}")
        if self.tag.startswith("_"):
            raise DefinitionError(f"check tag must not start with '_', got {self.tag!r}")
        if self.tag in RESERVED_TAGS:
            raise DefinitionError(f"check tag {self.tag!r} is reserved")
        if not isinstance(self.rule, Rule):
            raise DefinitionError(f"check {self.tag} needs a catalog rule, got {type(self.rule).__name__}")
