"""Result Type and Exception Hierarchy

Validation failures travel as values: every checked constructor returns a
Result[T, E] that is either Ok(value) or Err(error). Exceptions are reserved
for definition faults, boundary adapters that cannot return values (pydantic,
SQLAlchemy), and misuse of moved-out storage.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, NoReturn, TypeVar, Union, final

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


class StrypeError(Exception):
    """Base class for every exception raised by strype."""


class DefinitionError(StrypeError):
    """A string type definition is malformed.

    Raised while building a TypeSpec or a rule, never while validating input.
    """


class PatternCompileError(DefinitionError):
    """A pattern check carries a pattern the regex engine rejects.

    This is a bug in the type definition, not bad input data, so it is raised
    instead of being folded into a validation Result.
    """

    def __init__(self, type_name: str, tag: str, pattern: str, cause: Exception):
        self.type_name, self.tag, self.pattern, self.cause = type_name, tag, pattern, cause
        super().__init__(f"regex check {type_name}::{tag} pattern {pattern!r} should be valid: {cause}")


class InvalidStringError(StrypeError, ValueError):
    """Input text was rejected by a string type.

    Raised only where an exception is the sole way to report failure (the
    validating constructor, pydantic and SQLAlchemy adapters). Carries the
    same error value a Result would have held.
    """

    def __init__(self, type_name: str, error: Any):
        self.type_name, self.error = type_name, error
        super().__init__(f"invalid {type_name}: {_describe(error)}")


class UseAfterMoveError(StrypeError):
    """A Box was used after its payload was moved out."""


def _describe(error: Any) -> str:
    describe = getattr(error, "describe", None)
    return describe() if callable(describe) else str(error)


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result.

    Wraps a successful value. Immutable and hashable when T is hashable.
    """
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Extract the value. Safe because Ok always contains a value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], T]) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")

    def expect(self, msg: str) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, Any]:
        """Transform the success value."""
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], F]) -> Result[T, F]:
        """No-op for Ok variant."""
        return self  # type: ignore

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain operations that may fail."""
        return f(self.value)

    def or_else(self, f: Callable[[Any], Result[T, F]]) -> Result[T, F]:
        """No-op for Ok variant."""
        return self  # type: ignore

    def match(self, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:
        """Pattern match on Result. Forces exhaustive handling."""
        return ok(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result.

    Wraps an error value. For string types this is the tag of the first
    failing check, or the collapsed marker.
    """
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error!r}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return f(self.error)

    def unwrap_err(self) -> E:
        """Extract the error."""
        return self.error

    def expect(self, msg: str) -> NoReturn:
        raise ValueError(f"{msg}: {self.error!r}")

    def map(self, f: Callable[[Any], U]) -> Result[U, E]:
        """No-op for Err variant."""
        return self  # type: ignore

    def map_err(self, f: Callable[[E], F]) -> Result[Any, F]:
        """Transform the error."""
        return Err(f(self.error))

    def and_then(self, f: Callable[[Any], Result[U, E]]) -> Result[U, E]:
        """No-op for Err variant."""
        return self  # type: ignore

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """Try to recover from error."""
        return f(self.error)

    def match(self, ok: Callable[[Any], U], err: Callable[[E], U]) -> U:
        """Pattern match on Result. Forces exhaustive handling."""
        return err(self.error)

    def __iter__(self) -> Iterator:
        return iter([])


# Type alias for Result
Result = Union[Ok[T], Err[E]]


def ok(value: T) -> Ok[T]:
    """Construct Ok variant."""
    return Ok(value)


def err(error: E) -> Err[E]:
    """Construct Err variant."""
    return Err(error)
