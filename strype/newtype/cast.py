"""Representation Casts

Converts between a string type holding a handle and a handle holding a
string type:

    Name(Ref(text))  <->  Ref(Name(text))
    Name(Box(text))  <->  Box(Name(text))

The text object is never copied and validation never runs again: the source
is already a validated value, so the result is built with the private
_from_validated constructor around the very same str. Python objects have no
transparent single-field layout to reinterpret, so each cast allocates the
small wrapper and handle objects anew; only those handles change, never the
text (same object, same address, same length).

Box casts move ownership: the source box is emptied and the returned handle
owns the payload.
"""
from __future__ import annotations

from typing import Any

from .generator import StringType
from .storage import Box, Ref


def _wrapper_around(wrapper: Any, handle_type: type) -> Any:
    if not isinstance(wrapper, StringType):
        raise TypeError(f"expected a string type instance, got {type(wrapper).__name__}")
    inner = wrapper.as_inner()
    if not isinstance(inner, handle_type):
        raise TypeError(
            f"{type(wrapper).__name__} holds {type(inner).__name__}, expected {handle_type.__name__}"
        )
    return inner


def _wrapper_of_text(handle_target: Any) -> StringType:
    if not isinstance(handle_target, StringType) or not isinstance(handle_target.as_inner(), str):
        raise TypeError(f"expected a string type around str, got {handle_target!r}")
    return handle_target


def ref_to_view(wrapper: StringType[Ref[str]]) -> Ref[StringType[str]]:
    """Name(Ref(text)) -> Ref(Name(text))."""
    ref = _wrapper_around(wrapper, Ref)
    text = ref.target
    if not isinstance(text, str):
        raise TypeError(f"expected Ref[str], got Ref[{type(text).__name__}]")
    return Ref(type(wrapper)._from_validated(text))


def view_to_ref(view: Ref[StringType[str]]) -> StringType[Ref[str]]:
    """Ref(Name(text)) -> Name(Ref(text))."""
    if not isinstance(view, Ref):
        raise TypeError(f"expected Ref, got {type(view).__name__}")
    wrapper = _wrapper_of_text(view.target)
    return type(wrapper)._from_validated(Ref(wrapper.as_inner()))


def box_to_boxed(wrapper: StringType[Box[str]]) -> Box[StringType[str]]:
    """Name(Box(text)) -> Box(Name(text)). Moves the payload out of wrapper's box."""
    box = _wrapper_around(wrapper, Box)
    if not isinstance(box.get(), str):
        raise TypeError(f"expected Box[str], got Box[{type(box.get()).__name__}]")
    text = box.into_raw()
    return Box.from_raw(type(wrapper)._from_validated(text))


def boxed_to_box(boxed: Box[StringType[str]]) -> StringType[Box[str]]:
    """Box(Name(text)) -> Name(Box(text)). Consumes boxed."""
    if not isinstance(boxed, Box):
        raise TypeError(f"expected Box, got {type(boxed).__name__}")
    _wrapper_of_text(boxed.get())
    wrapper = boxed.into_raw()
    return type(wrapper)._from_validated(Box.from_raw(wrapper.as_inner()))


def transpose(handle: Any) -> Any:
    """Swap wrapper and handle. transpose(transpose(x)) is observably x."""
    if isinstance(handle, StringType):
        inner = handle.as_inner()
        if isinstance(inner, Ref):
            return ref_to_view(handle)
        if isinstance(inner, Box):
            return box_to_boxed(handle)
        raise TypeError(f"{type(handle).__name__} around {type(inner).__name__} has no transposed form")
    if isinstance(handle, Ref):
        return view_to_ref(handle)
    if isinstance(handle, Box):
        return boxed_to_box(handle)
    raise TypeError(f"cannot transpose {type(handle).__name__}")
