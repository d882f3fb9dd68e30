"""Type definitions for kvjson."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class Config:
    """Store client configuration."""

    # Optional: prefix joined onto relative record paths
    base_url: Optional[str] = None

    # Optional: per-request deadline in seconds
    timeout_s: float = 10.0


# --- Decode errors ---


class DecodeError(Exception):
    """Raised when a JSON value does not have the shape a decoder expects.

    The path lists the object keys and array indices leading from the root
    value to the offending one. Combinators prepend to it as the error
    propagates outwards.
    """

    def __init__(self, message: str, path: Tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def prefixed(self, segment: str) -> "DecodeError":
        """Prepend a path segment (``"name"`` or ``"[3]"``) and return self."""
        self.path = (segment,) + self.path
        return self

    def __str__(self) -> str:
        if not self.path:
            return self.message
        location = "json"
        for segment in self.path:
            location += segment if segment.startswith("[") else f".{segment}"
        return f"at {location}: {self.message}"


class TypeMismatch(DecodeError):
    """Raised when a JSON value is of the wrong kind."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class MissingField(DecodeError):
    """Raised when a required object field is absent."""

    def __init__(self, name: str) -> None:
        super().__init__(f"missing required field '{name}'")
        self.name = name


class SchemaError(TypeError):
    """Raised when an object schema does not fit its constructor."""

    pass


# --- HTTP errors ---


class HttpError(Exception):
    """Base class for failures of a store request."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message


class BadUrl(HttpError):
    """Raised when the record URL cannot be used for a request."""

    def __init__(self, url: str) -> None:
        super().__init__(url, f"Bad URL: {url!r}")


class Timeout(HttpError):
    """Raised when no response arrived within the configured deadline."""

    def __init__(self, url: str) -> None:
        super().__init__(url, f"Request to {url} timed out")


class NetworkError(HttpError):
    """Raised on transport-level failures (connection refused, reset, DNS)."""

    def __init__(self, url: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(url, f"Network error calling {url}{detail}")


class BadStatus(HttpError):
    """Raised when the store answers with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"Bad status {status_code} from {url}")
        self.status_code = status_code


class BadBody(HttpError):
    """Raised when a 2xx response body fails the expected decode."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(url, message)
