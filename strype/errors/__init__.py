"""Result Values and Exceptions

Usage:
    from strype.errors import Ok, Err, Result

    match Username.new("demurgos"):
        case Ok(username):
            greet(username)
        case Err(tag):
            log.info("rejected", check=tag.name)
"""
from .types import (
    # Result
    Result,
    Ok,
    Err,
    ok,
    err,
    # Exceptions
    StrypeError,
    DefinitionError,
    PatternCompileError,
    InvalidStringError,
    UseAfterMoveError,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "ok",
    "err",
    "StrypeError",
    "DefinitionError",
    "PatternCompileError",
    "InvalidStringError",
    "UseAfterMoveError",
]
