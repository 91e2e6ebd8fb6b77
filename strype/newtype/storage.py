"""Storage Handles

Python strings are immutable and shared by reference, so "owned text" is
simply a str. Two handle types model the other storage kinds of a string
type's inner value:

- Ref[T]: a borrowed view. It points at a target owned elsewhere and never
  copies it. Ref(text).target is text.
- Box[T]: an owned, move-only slot. into_raw() transfers the payload out and
  leaves the box empty; any later use raises UseAfterMoveError.

A handle's target is either a str or a string type instance around a str.
address is the id() of the text object the handle ultimately reaches; casts
preserve it because they never copy the text.
"""
from __future__ import annotations

from functools import total_ordering
from typing import Any, Generic, TypeVar

from strype.errors import UseAfterMoveError

T = TypeVar("T")


def text_of(value: Any) -> str:
    """The str behind a str, a handle or a string type instance."""
    if isinstance(value, str):
        return value
    as_str = getattr(value, "as_str", None)
    if as_str is None:
        raise TypeError(f"expected text or a text handle, got {type(value).__name__}")
    return as_str()


@total_ordering
class Ref(Generic[T]):
    """Borrowed handle to text (or to a string type around text)."""

    __slots__ = ("_target",)

    def __init__(self, target: T):
        object.__setattr__(self, "_target", target)

    @property
    def target(self) -> T:
        return self._target

    def as_str(self) -> str:
        return text_of(self._target)

    @property
    def address(self) -> int:
        return id(self.as_str())

    def transpose(self) -> Any:
        """Ref(Name(text)) -> Name(Ref(text)). See strype.newtype.cast."""
        from .cast import transpose

        return transpose(self)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self._target == other._target

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self._target < other._target

    def __hash__(self) -> int:
        return hash(self._target)

    def __repr__(self) -> str:
        return f"Ref({self._target!r})"


@total_ordering
class Box(Generic[T]):
    """Owned, move-only handle.

    Usage:
        box = Box("ff0000")
        text = box.into_raw()   # box is now empty
        box.get()               # raises UseAfterMoveError
    """

    __slots__ = ("_payload", "_moved")

    def __init__(self, payload: T):
        self._payload: T | None = payload
        self._moved = False

    @classmethod
    def from_raw(cls, payload: T) -> Box[T]:
        """Take ownership of payload without copying it."""
        return cls(payload)

    def into_raw(self) -> T:
        """Move the payload out, leaving this box empty."""
        payload = self.get()
        self._payload, self._moved = None, True
        return payload

    def get(self) -> T:
        if self._moved:
            raise UseAfterMoveError("box payload was moved out")
        return self._payload

    @property
    def target(self) -> T:
        return self.get()

    @property
    def is_moved(self) -> bool:
        return self._moved

    def as_str(self) -> str:
        return text_of(self.get())

    @property
    def address(self) -> int:
        return id(self.as_str())

    def transpose(self) -> Any:
        """Box(Name(text)) -> Name(Box(text)), consuming this box."""
        from .cast import transpose

        return transpose(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Box):
            return NotImplemented
        return self.get() == other.get()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Box):
            return NotImplemented
        return self.get() < other.get()

    # Mutable through moves, so unhashable; string types hash their text instead
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._moved:
            return "Box(<moved>)"
        return f"Box({self._payload!r})"
