"""Object schemas: build a Json codec for a record type field by field.

Usage:
    @dataclass
    class Item:
        value: int
        name: str
        tags: List[str]

    ITEM = (
        json_object(Item)
        .with_field("value", int_codec, lambda item: item.value)
        .with_field("name", string_codec, lambda item: item.name)
        .with_list("tags", string_codec, lambda item: item.tags)
        .to_json()
    )

Fields are bound to the constructor's positional parameters in declaration
order, and encoded objects list their keys in that same order.

Required fields (with_field) fail the decode when missing or malformed.
List fields (with_list) and optional fields (with_maybe) never fail: they fall
back to ``[]`` and ``None`` respectively.
"""

import functools
import inspect
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, List, NamedTuple, Optional, Tuple, TypeVar

from kvjson._internal.json_helpers import as_object
from kvjson.codec import Json, list_codec
from kvjson.json_helpers import JSONValue
from kvjson.types import DecodeError, MissingField, SchemaError

Obj = TypeVar("Obj")
A = TypeVar("A")

# Given the whole JSON value, returns the constructor with the fields
# declared so far already applied
PartialDecoder = Callable[[JSONValue], Callable[..., Any]]


class _Field(NamedTuple):
    name: str
    encode: Callable[[Any], JSONValue]


def _positional_arity(constructor: Callable[..., Any]) -> Tuple[int, Optional[int]]:
    """Return (required, maximum) positional argument counts.

    maximum is None when the constructor accepts *args.
    """
    try:
        signature = inspect.signature(constructor)
    except (TypeError, ValueError):
        # No introspectable signature (some builtins): skip arity checks
        return 0, None

    required = 0
    maximum = 0
    for param in signature.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            maximum += 1
            if param.default is param.empty:
                required += 1
        elif param.kind is param.VAR_POSITIONAL:
            return required, None
        elif param.kind is param.KEYWORD_ONLY and param.default is param.empty:
            raise SchemaError(
                f"{_describe(constructor)} has required keyword-only parameter "
                f"'{param.name}', which a positional schema cannot supply"
            )
    return required, maximum


def _describe(constructor: Callable[..., Any]) -> str:
    return getattr(constructor, "__qualname__", repr(constructor))


@dataclass(frozen=True)
class JsonObject(Generic[Obj]):
    """In-progress schema for a record type. Immutable: every with_* call
    returns a new builder.

    Fields are stored newest-first; to_json reverses them so encoded keys
    follow declaration order.
    """

    constructor: Callable[..., Obj]
    partial: PartialDecoder
    fields: Tuple[_Field, ...]
    required_arity: int
    max_arity: Optional[int]

    def _extend(
        self,
        name: str,
        decode_field: Callable[[JSONValue], Any],
        encode_field: Callable[[Obj], JSONValue],
    ) -> "JsonObject[Obj]":
        declared = len(self.fields) + 1
        if self.max_arity is not None and declared > self.max_arity:
            raise SchemaError(
                f"Field '{name}' exceeds {_describe(self.constructor)}, which takes "
                f"{self.max_arity} positional arguments"
            )
        if any(field.name == name for field in self.fields):
            raise SchemaError(f"Field '{name}' declared twice")

        previous = self.partial

        def partial(value: JSONValue) -> Callable[..., Any]:
            # Earlier fields are decoded (and may fail) before this one
            applied = previous(value)
            return functools.partial(applied, decode_field(value))

        return replace(
            self,
            partial=partial,
            fields=(_Field(name, encode_field),) + self.fields,
        )

    def with_field(
        self, name: str, codec: Json[A], projection: Callable[[Obj], A]
    ) -> "JsonObject[Obj]":
        """Declare a required field.

        Decoding raises MissingField when the key is absent, TypeMismatch when
        the value is not an object, or the field codec's own error (with name
        prefixed to its path).
        """

        def decode_field(value: JSONValue) -> A:
            obj = as_object(value)
            if name not in obj:
                raise MissingField(name)
            try:
                return codec.decode(obj[name])
            except DecodeError as e:
                raise e.prefixed(name)

        def encode_field(record: Obj) -> JSONValue:
            return codec.encode(projection(record))

        return self._extend(name, decode_field, encode_field)

    def with_list(
        self, name: str, codec: Json[A], projection: Callable[[Obj], List[A]]
    ) -> "JsonObject[Obj]":
        """Declare a list field that decodes leniently.

        An absent key, null, a non-array, or any element the codec rejects all
        decode to an empty list. Encoding always emits an array.
        """
        items = list_codec(codec)

        def decode_field(value: JSONValue) -> List[A]:
            if not isinstance(value, dict) or name not in value:
                return []
            try:
                return items.decode(value[name])
            except DecodeError:
                return []

        def encode_field(record: Obj) -> JSONValue:
            return items.encode(projection(record))

        return self._extend(name, decode_field, encode_field)

    def with_maybe(
        self, name: str, codec: Json[A], projection: Callable[[Obj], Optional[A]]
    ) -> "JsonObject[Obj]":
        """Declare an optional field.

        An absent key or a value the codec rejects decodes to None. None
        encodes to null.
        """

        def decode_field(value: JSONValue) -> Optional[A]:
            if not isinstance(value, dict) or name not in value:
                return None
            try:
                return codec.decode(value[name])
            except DecodeError:
                return None

        def encode_field(record: Obj) -> JSONValue:
            field_value = projection(record)
            if field_value is None:
                return None
            return codec.encode(field_value)

        return self._extend(name, decode_field, encode_field)

    def to_json(self) -> Json[Obj]:
        """Seal the schema into a codec.

        Every positional parameter must be bound, defaulted ones included.

        Raises:
            SchemaError: If the fields do not saturate the constructor
        """
        expected = self.max_arity if self.max_arity is not None else self.required_arity
        if len(self.fields) < expected:
            raise SchemaError(
                f"{_describe(self.constructor)} takes {expected} "
                f"positional arguments but only {len(self.fields)} fields were declared"
            )

        partial = self.partial
        fields = tuple(reversed(self.fields))

        def decode(value: JSONValue) -> Obj:
            construct = partial(value)
            try:
                return construct()
            except (ValueError, TypeError) as e:
                # Constructors validating their arguments reject the value
                raise DecodeError(str(e)) from e

        def encode(record: Obj) -> JSONValue:
            return {field.name: field.encode(record) for field in fields}

        return Json(decode=decode, encode=encode)


def json_object(constructor: Callable[..., Obj]) -> JsonObject[Obj]:
    """Start a schema for records built by constructor.

    The seed decoder always succeeds and yields the constructor itself.
    """
    required, maximum = _positional_arity(constructor)
    return JsonObject(
        constructor=constructor,
        partial=lambda value: constructor,
        fields=(),
        required_arity=required,
        max_arity=maximum,
    )
