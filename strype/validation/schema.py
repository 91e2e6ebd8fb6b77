"""Pydantic Integration for String Types

A generated string type can be used directly as a pydantic field type:

    class Account(BaseModel):
        username: Username

    Account(username="demurgos").username      # Username('demurgos')
    Account(username="")                       # pydantic ValidationError
    Account(username="demurgos").model_dump_json()  # '{"username":"demurgos"}'

Text input goes through the type's parse() (so the checks run exactly once,
at the boundary); existing instances pass through untouched. JSON
serialization emits as_str(), and the JSON schema carries the length and
pattern constraints of the checks.
"""
from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from pydantic import GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, core_schema

from strype.errors import Err, InvalidStringError, Ok

if TYPE_CHECKING:
    from strype.newtype.generator import StringType


def _parse_or_raise(string_type: type[StringType], text: str) -> StringType:
    match string_type.parse(text):
        case Ok(value):
            return value
        case Err(error):
            raise InvalidStringError(string_type.__name__, error)


def _serialize_text(value: StringType) -> str:
    return value.as_str()


def string_type_core_schema(string_type: type[StringType]) -> CoreSchema:
    """Core schema accepting text (validated via parse) or an instance."""
    from_text = core_schema.no_info_after_validator_function(
        partial(_parse_or_raise, string_type),
        core_schema.str_schema(),
    )
    return core_schema.json_or_python_schema(
        json_schema=from_text,
        python_schema=core_schema.union_schema([
            core_schema.is_instance_schema(string_type),
            from_text,
        ]),
        serialization=core_schema.plain_serializer_function_ser_schema(
            _serialize_text,
            return_schema=core_schema.str_schema(),
            when_used="json",
        ),
    )


def string_type_json_schema(
    string_type: type[StringType], schema: CoreSchema, handler: GetJsonSchemaHandler
) -> JsonSchemaValue:
    """JSON schema for a string type: a string plus its check constraints.

    Overlapping bounds keep the tightest value. Several patterns are listed
    under allOf since a schema holds only one pattern keyword.
    """
    json_schema: dict[str, Any] = {**handler(schema), "type": "string"}
    patterns: list[str] = []
    for check in string_type.spec.checks:
        for key, value in check.rule.json_schema().items():
            if key == "pattern":
                patterns.append(value)
            elif key == "minLength":
                json_schema[key] = max(value, json_schema.get(key, value))
            elif key == "maxLength":
                json_schema[key] = min(value, json_schema.get(key, value))
            else:
                json_schema[key] = value
    if len(patterns) == 1:
        json_schema["pattern"] = patterns[0]
    elif patterns:
        json_schema["allOf"] = [{"pattern": pattern} for pattern in patterns]
    if string_type.spec.doc:
        json_schema.setdefault("description", string_type.spec.doc)
    return json_schema
