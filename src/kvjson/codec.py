"""Dual JSON codecs: a decoder and an encoder for one type, kept together.

A codec guarantees the round-trip law ``codec.decode(codec.encode(x)) == x``
for every valid ``x``. The reverse need not hold for decoders that tolerate
extra or missing structure.

Example:
    >>> celsius = map_codec(Celsius, lambda c: c.degrees, float_codec)
    >>> celsius.encode(Celsius(21.5))
    21.5
"""

from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, TypeVar

from kvjson._internal.json_helpers import as_object, dumps, kind_of, loads
from kvjson.json_helpers import JSONValue, ValueDecoder, ValueEncoder
from kvjson.types import DecodeError, TypeMismatch

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")


@dataclass(frozen=True)
class Json(Generic[T]):
    """Paired decoder and encoder for values of type T.

    Both functions are pure; a codec holds no mutable state and can be shared
    freely between threads and tasks.
    """

    decode: ValueDecoder[T]
    encode: ValueEncoder[T]

    def map(self, decode_fn: Callable[[T], B], encode_fn: Callable[[B], T]) -> "Json[B]":
        """Method form of map_codec."""
        return map_codec(decode_fn, encode_fn, self)


def map_codec(
    decode_fn: Callable[[A], B], encode_fn: Callable[[B], A], codec: Json[A]
) -> Json[B]:
    """Derive a codec for B from a codec for A and a pair of conversions.

    ValueError or TypeError raised by decode_fn is reported as DecodeError,
    so validating conversions fail like any other decoder.

    Args:
        decode_fn: Applied after codec.decode
        encode_fn: Applied before codec.encode
        codec: Codec for the underlying representation
    """

    def decode(value: JSONValue) -> B:
        underlying = codec.decode(value)
        try:
            return decode_fn(underlying)
        except (ValueError, TypeError) as e:
            raise DecodeError(str(e)) from e

    def encode(b: B) -> JSONValue:
        return codec.encode(encode_fn(b))

    return Json(decode=decode, encode=encode)


# --- Primitives ---


def _decode_bool(value: JSONValue) -> bool:
    if not isinstance(value, bool):
        raise TypeMismatch("bool", kind_of(value))
    return value


def _decode_int(value: JSONValue) -> int:
    # JSON has one number type, so 3.0 is an acceptable int
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeMismatch("int", kind_of(value))
    return value


def _decode_float(value: JSONValue) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeMismatch("float", kind_of(value))
    return float(value)


def _decode_string(value: JSONValue) -> str:
    if not isinstance(value, str):
        raise TypeMismatch("string", kind_of(value))
    return value


def _identity(value: JSONValue) -> JSONValue:
    return value


bool_codec: Json[bool] = Json(decode=_decode_bool, encode=bool)
int_codec: Json[int] = Json(decode=_decode_int, encode=int)
float_codec: Json[float] = Json(decode=_decode_float, encode=float)
string_codec: Json[str] = Json(decode=_decode_string, encode=str)

# Passes JSON through untouched
value_codec: Json[JSONValue] = Json(decode=_identity, encode=_identity)


# --- Containers ---


def dict_codec(inner: Json[A]) -> Json[Dict[str, A]]:
    """Codec for a JSON object whose values all share one codec.

    Keys are taken verbatim. Decoding fails if any value fails, with the
    offending key in the error path.
    """

    def decode(value: JSONValue) -> Dict[str, A]:
        result: Dict[str, A] = {}
        for key, item in as_object(value).items():
            try:
                result[key] = inner.decode(item)
            except DecodeError as e:
                raise e.prefixed(key)
        return result

    def encode(mapping: Dict[str, A]) -> JSONValue:
        return {key: inner.encode(item) for key, item in mapping.items()}

    return Json(decode=decode, encode=encode)


def list_codec(inner: Json[A]) -> Json[List[A]]:
    """Codec for a JSON array whose elements all share one codec.

    Strict: a non-array or any failing element is a DecodeError.
    """

    def decode(value: JSONValue) -> List[A]:
        if not isinstance(value, list):
            raise TypeMismatch("array", kind_of(value))
        result: List[A] = []
        for index, item in enumerate(value):
            try:
                result.append(inner.decode(item))
            except DecodeError as e:
                raise e.prefixed(f"[{index}]")
        return result

    def encode(items: List[A]) -> JSONValue:
        return [inner.encode(item) for item in items]

    return Json(decode=decode, encode=encode)


# --- JSON text boundary ---


def decode_string(codec: Json[T], text: str) -> T:
    """Parse JSON text and decode it.

    Raises:
        DecodeError: If text is not JSON or does not fit the codec
    """
    return codec.decode(loads(text))


def encode_string(codec: Json[T], value: T) -> str:
    """Encode a value and print it as compact JSON text."""
    return dumps(codec.encode(value))
