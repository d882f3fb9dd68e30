"""kvjson - Dual JSON codecs and a record client for HTTP key-value stores."""

from kvjson._internal.async_http_client import AsyncStoreClient
from kvjson.client import StoreClient
from kvjson.codec import (
    Json,
    bool_codec,
    decode_string,
    dict_codec,
    encode_string,
    float_codec,
    int_codec,
    list_codec,
    map_codec,
    string_codec,
    value_codec,
)
from kvjson.json_helpers import JSONValue, ValueDecoder, ValueEncoder
from kvjson.schema import JsonObject, json_object
from kvjson.types import (
    BadBody,
    BadStatus,
    BadUrl,
    Config,
    DecodeError,
    HttpError,
    MissingField,
    NetworkError,
    SchemaError,
    Timeout,
    TypeMismatch,
)

__version__ = "0.1.0"

__all__ = [
    # Clients
    "AsyncStoreClient",
    "StoreClient",
    "Config",
    # JSON types
    "JSONValue",
    "ValueDecoder",
    "ValueEncoder",
    # Codecs
    "Json",
    "map_codec",
    "bool_codec",
    "int_codec",
    "float_codec",
    "string_codec",
    "value_codec",
    "dict_codec",
    "list_codec",
    "decode_string",
    "encode_string",
    # Object schemas
    "JsonObject",
    "json_object",
    # Decode errors
    "DecodeError",
    "TypeMismatch",
    "MissingField",
    "SchemaError",
    # HTTP errors
    "HttpError",
    "BadUrl",
    "Timeout",
    "NetworkError",
    "BadStatus",
    "BadBody",
]
