"""Column Type for String Types

Persists a string type as plain text. Writes store as_str(); every read goes
back through the type's parse(), so values coming out of storage are
re-validated once, at the decode boundary, instead of being trusted.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from strype.errors import Err, InvalidStringError, Ok
from strype.logging import storage_logger
from strype.newtype.generator import StringType


class StringColumn(TypeDecorator):
    """Text column holding values of one string type.

    The column length defaults to the type's byte-length bound (from its
    MaxLen / Len checks), which is also a safe character bound.

    Usage:
        class Account(Base):
            __tablename__ = "accounts"
            username: Mapped[Username] = mapped_column(StringColumn(Username))
    """
    impl = String
    cache_ok = True

    def __init__(self, string_type: type[StringType], length: int | None = None, **kwargs: Any):
        if not (isinstance(string_type, type) and issubclass(string_type, StringType)):
            raise TypeError(f"StringColumn needs a string type, got {string_type!r}")
        self.string_type = string_type
        super().__init__(length=length if length is not None else string_type.spec.max_length, **kwargs)

    @property
    def python_type(self) -> type:
        return self.string_type

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, self.string_type):
            return value.as_str()
        if isinstance(value, str):
            # Plain text is accepted only once it passes the type's checks
            match self.string_type.parse(value):
                case Ok(parsed):
                    return parsed.as_str()
                case Err(error):
                    raise InvalidStringError(self.string_type.__name__, error)
        raise TypeError(f"{self.string_type.__name__} column cannot store {type(value).__name__}")

    def process_result_value(self, value: Any, dialect: Any) -> StringType | None:
        if value is None:
            return None
        match self.string_type.parse(value):
            case Ok(parsed):
                return parsed
            case Err(error):
                storage_logger().warning(
                    "column_value_invalid",
                    type=self.string_type.__name__,
                    error=getattr(error, "name", str(error)),
                    dialect=dialect.name,
                )
                raise InvalidStringError(self.string_type.__name__, error)

    def coerce_compared_value(self, op: Any, value: Any) -> TypeDecorator:
        return self
