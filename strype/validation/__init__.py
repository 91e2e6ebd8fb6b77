"""Validation Pipeline

Checks are catalog rules named by a tag. A Validator binds an ordered check
list to one string type and reports the first failing check:

    from strype.validation import Check, NonEmpty, MinLen, Validator

    validator = Validator("Username", [Check("NonEmpty", NonEmpty()), Check("MinLen", MinLen(3))])
    validator.evaluate("ab")  # Err(UsernameError.MinLen)
"""
from .checks import (
    ASCII_WHITESPACE,
    Check,
    Rule,
    NonEmpty,
    AsciiTrimmed,
    MinLen,
    MaxLen,
    Len,
    Regex,
    byte_length,
)
from .engine import BoundCheck, Determinism, Validator, classify
from .errors import CheckError, CollapsedError, ErrorPolicy, build_error_type, humanize
from .patterns import LazyPattern, PatternStats, strict_end_anchors

__all__ = [
    # Catalog
    "ASCII_WHITESPACE",
    "Check",
    "Rule",
    "NonEmpty",
    "AsciiTrimmed",
    "MinLen",
    "MaxLen",
    "Len",
    "Regex",
    "byte_length",
    # Engine
    "BoundCheck",
    "Determinism",
    "Validator",
    "classify",
    # Errors
    "CheckError",
    "CollapsedError",
    "ErrorPolicy",
    "build_error_type",
    "humanize",
    # Pattern cache
    "LazyPattern",
    "PatternStats",
    "strict_end_anchors",
]
