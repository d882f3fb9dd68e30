"""Internal JSON helper functions not exposed in public API."""

import json
from typing import Dict, cast

from kvjson.json_helpers import JSONValue
from kvjson.types import DecodeError, MissingField, TypeMismatch

RESULT_KEY = "result"


def kind_of(value: JSONValue) -> str:
    """Name the JSON kind of a value for error messages.

    Note: bool is a subclass of int in Python, so it is checked first.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def as_object(value: JSONValue) -> Dict[str, JSONValue]:
    """Narrow a JSONValue to a JSON object.

    Raises:
        TypeMismatch: If value is not an object
    """
    if not isinstance(value, dict):
        raise TypeMismatch("object", kind_of(value))
    return value


def loads(text: str) -> JSONValue:
    """Parse JSON text into a JSONValue.

    Raises:
        DecodeError: If text is not valid JSON
    """
    try:
        return cast(JSONValue, json.loads(text))
    except json.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON: {e}") from e


def dumps(value: JSONValue) -> str:
    """Serialize a JSONValue to compact JSON text.

    Keys are NOT sorted: object schemas rely on insertion order to emit their
    fields in declaration order.
    """
    return json.dumps(value, separators=(",", ":"))


def read_result(text: str) -> JSONValue:
    """Extract the stored value from a store GET response body.

    The store wraps every read in an envelope ``{"result": <value>}`` where
    ``<value>`` is null when nothing is stored at the path.

    Raises:
        DecodeError: If the body is not JSON or has no result field
    """
    envelope = as_object(loads(text))
    if RESULT_KEY not in envelope:
        raise MissingField(RESULT_KEY)
    return envelope[RESULT_KEY]
