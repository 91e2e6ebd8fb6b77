"""String Type Generator

define() turns a TypeSpec into a new subclass of StringType. The subclass
gets its own Validator (so pattern cells are scoped to the type), its own
error type, and the full constructor/accessor surface:

    Username = define_string_type(
        "Username",
        checks={
            "NonEmpty": NonEmpty(),
            "Trimmed": AsciiTrimmed(),
            "MinLen": MinLen(3),
            "MaxLen": MaxLen(20),
        },
    )

    Username.new("demurgos")     # Ok(Username('demurgos'))
    Username.new("")             # Err(UsernameError.NonEmpty)
    Username("demurgos")         # Username('demurgos'), raises on invalid input
    Username.new_ref("demurgos") # Ok(Ref(Username('demurgos')))

Types without checks are infallible: new() returns the value directly and
there is no error type.
"""
from __future__ import annotations

import sys
from functools import total_ordering
from typing import Any, ClassVar, Generic, TypeVar

from strype.config import get_settings
from strype.errors import Err, InvalidStringError, Ok, Result
from strype.logging import definition_logger
from strype.validation.engine import Determinism, Validator
from strype.validation.errors import ErrorPolicy
from strype.validation.schema import string_type_core_schema, string_type_json_schema

from .spec import CheckList, InnerKind, TypeSpec
from .storage import Box, Ref

TInner = TypeVar("TInner")


def _inner_text(inner: Any) -> str:
    """The str held by an inner value: a str, a Ref[str] or a Box[str]."""
    if isinstance(inner, str):
        return inner
    if isinstance(inner, Ref):
        payload = inner.target
    elif isinstance(inner, Box):
        payload = inner.get()
    else:
        raise TypeError(f"inner value must be str, Ref[str] or Box[str], got {type(inner).__name__}")
    if not isinstance(payload, str):
        raise TypeError(f"inner handle must hold a str, got {type(payload).__name__}")
    return payload


def _take(inner: Any) -> Any:
    """Move a Box inner value into a Box owned by the wrapper; other kinds are shared."""
    if isinstance(inner, Box):
        return Box.from_raw(inner.into_raw())
    return inner


@total_ordering
class StringType(Generic[TInner]):
    """Base class of generated string types. Use define() to create one."""

    __slots__ = ("_inner",)

    spec: ClassVar[TypeSpec]
    Error: ClassVar[type | None] = None
    determinism: ClassVar[Determinism]
    inner_kind: ClassVar[InnerKind]
    _validator: ClassVar[Validator]

    def __init__(self, inner: TInner):
        cls = self._defined()
        match cls._validator.evaluate(_inner_text(inner)):
            case Err(error):
                raise InvalidStringError(cls.__name__, error)
        object.__setattr__(self, "_inner", _take(inner))

    @classmethod
    def _defined(cls) -> type[StringType]:
        if getattr(cls, "_validator", None) is None:
            raise TypeError(f"{cls.__name__} is not a defined string type; use define()")
        return cls

    @classmethod
    def _from_validated(cls, inner: Any) -> StringType:
        """Wrap inner without validation. Callers must already hold validated text."""
        instance = object.__new__(cls)
        object.__setattr__(instance, "_inner", inner)
        return instance

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, inner: Any) -> Any:
        """Validate and wrap inner (a str, Ref[str] or Box[str]).

        A Box is consumed on success and left untouched on failure.

        Returns the wrapper for infallible types, Result[wrapper, Error] otherwise.
        """
        validator = cls._defined()._validator
        text = _inner_text(inner)
        if validator.is_infallible:
            return cls._from_validated(_take(inner))
        return validator.evaluate(text).map(lambda _: cls._from_validated(_take(inner)))

    @classmethod
    def new_ref(cls, text: str) -> Any:
        """Validate text and return a borrowed view of it: Ref[Name]."""
        validator = cls._defined()._validator
        if not isinstance(text, str):
            raise TypeError(f"new_ref expects str, got {type(text).__name__}")
        if validator.is_infallible:
            return cls._from_validated(Ref(text)).transpose()
        return validator.evaluate(text).map(lambda _: cls._from_validated(Ref(text)).transpose())

    @classmethod
    def new_box(cls, box: Box[str]) -> Any:
        """Validate the boxed text and move it into a Box[Name].

        On success the payload moves out of box; on failure box is untouched.
        """
        validator = cls._defined()._validator
        if not isinstance(box, Box):
            raise TypeError(f"new_box expects Box, got {type(box).__name__}")
        text = _inner_text(box)
        if validator.is_infallible:
            return cls._from_validated(box).transpose()
        return validator.evaluate(text).map(lambda _: cls._from_validated(box).transpose())

    @classmethod
    def parse(cls, text: str) -> Result[StringType, Any]:
        """Parse text into this type's configured storage kind."""
        if not isinstance(text, str):
            raise TypeError(f"parse expects str, got {type(text).__name__}")
        cls._defined()
        built = cls.new(cls.inner_kind.wrap(text))
        if cls._validator.is_infallible:
            return Ok(built)
        return built

    @classmethod
    def literal(cls, text: str) -> StringType:
        """Build a borrowed constant, Name(Ref(text)), raising if text is invalid.

        Meant for module-level constants. Types with pattern checks refuse,
        since their matcher is only built lazily at runtime.
        """
        cls._defined()
        if cls.determinism is Determinism.RUNTIME_ONLY:
            raise TypeError(f"{cls.__name__} has pattern checks; build values with new() or parse()")
        return cls(Ref(text))

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return cls._defined()._validator.is_valid(text)

    @classmethod
    def pattern_builds(cls) -> dict[str, int]:
        """{tag: compile count} for this type's pattern checks."""
        return cls._defined()._validator.pattern_builds()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def as_str(self) -> str:
        return _inner_text(self._inner)

    def as_view(self) -> Ref[StringType]:
        """Borrowed view of the same text: Ref[Name] around a str."""
        return Ref(type(self)._from_validated(self.as_str()))

    def as_inner(self) -> TInner:
        return self._inner

    def into_inner(self) -> TInner:
        """Extract the inner value. A Box inner value is moved into a fresh Box."""
        inner = self._inner
        if isinstance(inner, Box):
            return Box.from_raw(inner.into_raw())
        return inner

    def into_inner_str(self) -> str:
        """The referenced str of a borrowed (or owned) inner value."""
        inner = self._inner
        if isinstance(inner, Ref):
            return _inner_text(inner)
        if isinstance(inner, str):
            return inner
        raise TypeError(f"into_inner_str needs a str or Ref inner value, got {type(inner).__name__}")

    def transpose(self) -> Any:
        """Name(Ref(text)) -> Ref(Name(text)); Name(Box(text)) -> Box(Name(text))."""
        from .cast import transpose

        return transpose(self)

    # ------------------------------------------------------------------
    # Protocols
    # ------------------------------------------------------------------

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._inner == other._inner

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._inner < other._inner

    def __hash__(self) -> int:
        return hash(self.as_str())

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> Any:
        return string_type_core_schema(cls)

    @classmethod
    def __get_pydantic_json_schema__(cls, core_schema: Any, handler: Any) -> Any:
        return string_type_json_schema(cls, core_schema, handler)


def _caller_module(depth: int = 2) -> str:
    try:
        return sys._getframe(depth).f_globals.get("__name__", "__main__")
    except (AttributeError, ValueError):
        return __name__


def _define(spec: TypeSpec, eager: bool | None, module: str) -> type[StringType]:
    validator = Validator(
        spec.name,
        spec.checks,
        error_name=spec.resolved_error_name,
        error_policy=spec.error_policy,
        module=module,
    )
    namespace = {
        "__slots__": (),
        "__module__": module,
        "__qualname__": spec.name,
        "__doc__": spec.doc,
        "spec": spec,
        "Error": validator.error_type,
        "determinism": validator.determinism,
        "inner_kind": spec.inner_kind,
        "_validator": validator,
    }
    string_type = type(spec.name, (StringType,), namespace)

    if eager is None:
        eager = get_settings().EAGER_PATTERNS
    if eager:
        validator.warm()

    definition_logger().debug(
        "string_type_defined",
        type=spec.name,
        inner=spec.inner_kind.value,
        determinism=validator.determinism.value,
        checks=list(spec.tags),
        error_policy=spec.error_policy.value,
    )
    return string_type


def define(spec: TypeSpec, *, eager: bool | None = None, module: str | None = None) -> type[StringType]:
    """Generate the string type described by spec.

    Args:
        spec: The type definition.
        eager: Compile pattern checks now instead of on first use, so a bad
            pattern fails here. Defaults to the STRYPE_EAGER_PATTERNS setting.
        module: __module__ for the generated classes. Defaults to the caller's.
    """
    return _define(spec, eager, module or _caller_module())


def define_string_type(
    name: str,
    *,
    inner: InnerKind | str = InnerKind.OWNED,
    checks: CheckList | None = None,
    error_name: str | None = None,
    error_policy: ErrorPolicy | str | None = None,
    doc: str | None = None,
    eager: bool | None = None,
    module: str | None = None,
) -> type[StringType]:
    """Build a TypeSpec from keyword arguments and define it.

    checks may be a {tag: rule} mapping (insertion order is the check order)
    or an iterable of Check. error_policy defaults to the
    STRYPE_DEFAULT_ERROR_POLICY setting.
    """
    if error_policy is None:
        error_policy = get_settings().DEFAULT_ERROR_POLICY
    spec = TypeSpec(
        name,
        inner_kind=inner,
        checks=checks if checks is not None else (),
        error_name=error_name,
        error_policy=error_policy,
        doc=doc,
    )
    return _define(spec, eager, module or _caller_module())


__all__ = [
    "StringType",
    "define",
    "define_string_type",
]
