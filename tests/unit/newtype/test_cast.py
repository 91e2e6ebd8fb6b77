"""Unit tests for representation casts."""

from __future__ import annotations

import pytest

from strype.errors import UseAfterMoveError
from strype.newtype import Box, Ref, box_to_boxed, boxed_to_box, ref_to_view, transpose, view_to_ref


def test_box_round_trip_keeps_the_allocation(rgb8_hex_type) -> None:
    text = "".join(["ff", "0000"])
    source = rgb8_hex_type.new(Box(text)).unwrap()
    address = source.as_inner().address

    boxed = box_to_boxed(source)
    assert isinstance(boxed, Box)
    assert isinstance(boxed.get(), rgb8_hex_type)
    assert boxed.address == address

    back = boxed_to_box(boxed)
    assert back.as_str() == "ff0000"
    assert back.as_str() is text
    assert back.as_inner().address == address


def test_box_casts_move_the_source(rgb8_hex_type) -> None:
    source = rgb8_hex_type.parse("00ff00").unwrap()
    boxed = source.transpose()
    with pytest.raises(UseAfterMoveError):
        source.as_str()

    wrapper = boxed.transpose()
    assert boxed.is_moved
    assert wrapper.as_str() == "00ff00"


def test_ref_round_trip_keeps_the_text(username_type) -> None:
    text = "".join(["demur", "gos"])
    wrapper = username_type.new(Ref(text)).unwrap()

    view = ref_to_view(wrapper)
    assert isinstance(view, Ref)
    assert view.target.as_inner() is text

    again = view_to_ref(view)
    assert again == wrapper
    assert again.as_inner().target is text


def test_transpose_is_an_involution(username_type) -> None:
    wrapper = username_type(Ref("demurgos"))
    assert transpose(transpose(wrapper)) == wrapper
    view = username_type.new_ref("demurgos").unwrap()
    assert transpose(transpose(view)) == view


def test_casts_never_revalidate(username_type, monkeypatch: pytest.MonkeyPatch) -> None:
    wrapper = username_type.new(Ref("demurgos")).unwrap()
    seen: list[str] = []
    validator = username_type._validator

    class Spy:
        is_infallible = False

        def evaluate(self, value: str):
            seen.append(value)
            return validator.evaluate(value)

    monkeypatch.setattr(username_type, "_validator", Spy())
    transpose(transpose(wrapper))
    assert seen == []


def test_transpose_rejects_owned_wrappers(username_type) -> None:
    with pytest.raises(TypeError):
        transpose(username_type("demurgos"))


def test_transpose_rejects_unrelated_values() -> None:
    with pytest.raises(TypeError):
        transpose("demurgos")
    with pytest.raises(TypeError):
        transpose(Ref("demurgos"))
    with pytest.raises(TypeError):
        transpose(Box("demurgos"))


def test_wrong_handle_shapes_are_rejected(username_type, rgb8_hex_type) -> None:
    with pytest.raises(TypeError):
        ref_to_view(rgb8_hex_type.parse("ff0000").unwrap())
    with pytest.raises(TypeError):
        box_to_boxed(username_type(Ref("demurgos")))
