"""Shared string type definitions for the unit tests."""

from __future__ import annotations

import pytest
import structlog

from strype import AsciiTrimmed, Len, MaxLen, MinLen, NonEmpty, Regex, define_string_type
from strype.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings_and_logging():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def username_type():
    return define_string_type(
        "Username",
        checks={
            "NonEmpty": NonEmpty(),
            "Trimmed": AsciiTrimmed(),
            "MinLen": MinLen(3),
            "MaxLen": MaxLen(20),
        },
        error_policy="unit",
    )


@pytest.fixture
def rgb8_hex_type():
    return define_string_type(
        "Rgb8Hex",
        inner="owned_fixed",
        checks={
            "NonEmpty": NonEmpty(),
            "Trimmed": AsciiTrimmed(),
            "Len": Len(6),
            "HexOnly": Regex("^[0-9a-f]{6}$"),
        },
        error_policy="unit",
    )


@pytest.fixture
def markdown_type():
    return define_string_type("Markdown", inner="borrowed")
