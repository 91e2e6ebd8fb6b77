"""strype: validated string types

Define a string type once; get a distinct class whose values are guaranteed
to satisfy an ordered list of checks, with Result-returning constructors,
a per-check error enum and zero-copy views:

    from strype import AsciiTrimmed, MaxLen, MinLen, NonEmpty, Ok, Err, define_string_type

    Username = define_string_type(
        "Username",
        checks={
            "NonEmpty": NonEmpty(),
            "Trimmed": AsciiTrimmed(),
            "MinLen": MinLen(3),
            "MaxLen": MaxLen(20),
        },
    )

    match Username.new(" demurgos "):
        case Ok(username):
            ...
        case Err(Username.Error.Trimmed):
            ...
"""
from strype.config import Settings, get_settings
from strype.errors import (
    Result,
    Ok,
    Err,
    StrypeError,
    DefinitionError,
    PatternCompileError,
    InvalidStringError,
    UseAfterMoveError,
)
from strype.logging import configure_logging, get_logger
from strype.validation import (
    Check,
    Rule,
    NonEmpty,
    AsciiTrimmed,
    MinLen,
    MaxLen,
    Len,
    Regex,
    CheckError,
    CollapsedError,
    Determinism,
    ErrorPolicy,
    Validator,
)
from strype.newtype import (
    Box,
    InnerKind,
    Ref,
    StringType,
    TypeSpec,
    define,
    define_string_type,
    transpose,
)

__version__ = "0.1.0"

__all__ = [
    # Config / logging
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Results and exceptions
    "Result",
    "Ok",
    "Err",
    "StrypeError",
    "DefinitionError",
    "PatternCompileError",
    "InvalidStringError",
    "UseAfterMoveError",
    # Checks
    "Check",
    "Rule",
    "NonEmpty",
    "AsciiTrimmed",
    "MinLen",
    "MaxLen",
    "Len",
    "Regex",
    "CheckError",
    "CollapsedError",
    "Determinism",
    "ErrorPolicy",
    "Validator",
    # String types
    "Box",
    "InnerKind",
    "Ref",
    "StringType",
    "TypeSpec",
    "define",
    "define_string_type",
    "transpose",
]
