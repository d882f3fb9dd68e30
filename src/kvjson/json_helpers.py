"""Public JSON type definitions for kvjson.

Only exports types that users need for writing their own codecs.
Text parsing and printing helpers are in kvjson._internal.json_helpers.
"""

from typing import Callable, Dict, List, TypeVar, Union

T = TypeVar("T")

# Represents any valid JSON value, as produced by the json module
JSONValue = Union[
    None,
    bool,
    int,
    float,
    str,
    List["JSONValue"],
    Dict[str, "JSONValue"],
]

# Transforms a JSONValue into the user's T type, raising DecodeError on failure
ValueDecoder = Callable[[JSONValue], T]

# Transforms the user's T type into a JSONValue, never fails
ValueEncoder = Callable[[T], JSONValue]
