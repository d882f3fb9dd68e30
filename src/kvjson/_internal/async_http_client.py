"""Async store client over httpx.

Each operation addresses exactly one record by URL. Transport failures and
unexpected responses are mapped onto the HttpError hierarchy; httpx
exceptions never cross this boundary.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional, TypeVar

import httpx

from kvjson._internal.json_helpers import dumps, read_result
from kvjson.codec import Json
from kvjson.json_helpers import JSONValue, ValueDecoder
from kvjson.types import (
    BadBody,
    BadStatus,
    BadUrl,
    Config,
    DecodeError,
    NetworkError,
    Timeout,
)

logger = logging.getLogger(__name__)

A = TypeVar("A")

# The store rejects larger bodies; callers must split bulk writes per record
MAX_PAYLOAD_BYTES = 100 * 1024

_JSON_HEADERS = {"Content-Type": "application/json"}


class AsyncStoreClient:
    """Async client for an HTTP key-value store with one JSON record per path.

    Wire contract:
        GET    -> {"result": <stored value or null>}
        POST   -> body is the raw JSON value to store
        DELETE -> no body

    All methods are coroutines; cancelling the awaiting task aborts the
    request in flight.
    """

    def __init__(
        self, config: Optional[Config] = None, http: Optional[httpx.AsyncClient] = None
    ) -> None:
        """Initialize client (use create() for a managed lifecycle).

        Args:
            config: Base URL and timeout; defaults apply when omitted
            http: Optional shared httpx.AsyncClient. If omitted, one is created
                and owned by this instance.
        """
        self._config = config or Config()
        self._base_url = (
            self._config.base_url.rstrip("/") if self._config.base_url is not None else None
        )
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=self._config.timeout_s)

    @classmethod
    @asynccontextmanager
    async def create(
        cls, config: Optional[Config] = None, http: Optional[httpx.AsyncClient] = None
    ) -> AsyncIterator["AsyncStoreClient"]:
        """Create a client and close it on exit.

        Example:
            async with AsyncStoreClient.create(Config(base_url=url)) as store:
                await store.insert("items/1", {"value": 42})
        """
        client = cls(config, http)
        try:
            yield client
        finally:
            await client.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_http and not self._http.is_closed:
            await self._http.aclose()

    # -- Public API ---------------------------------------------------------

    async def insert(self, url: str, value: JSONValue) -> None:
        """Create or overwrite the record at url.

        Succeeds on any 2xx response; the response body is ignored.
        """
        body = dumps(value).encode("utf-8")
        if len(body) > MAX_PAYLOAD_BYTES:
            logger.warning(
                f"Payload for {url} is {len(body)} bytes, over the store limit of "
                f"{MAX_PAYLOAD_BYTES}; the store is likely to reject it"
            )
        await self._send("POST", url, content=body)

    async def delete(self, url: str) -> None:
        """Remove the record at url. Succeeds when nothing is stored there."""
        await self._send("DELETE", url)

    async def get(self, url: str, decoder: ValueDecoder[A]) -> Optional[A]:
        """Read the record at url.

        Returns:
            None when nothing is stored at url, otherwise the decoded value

        Raises:
            BadBody: If the envelope is malformed or decoder rejects the value
        """
        response = await self._send("GET", url)
        try:
            result = read_result(response.text)
            if result is None:
                return None
            return decoder(result)
        except DecodeError as e:
            raise BadBody(url, str(e)) from e

    async def update(self, url: str, codec: Json[A], transform: Callable[[A], A]) -> None:
        """Read-modify-write the record at url.

        Reads the record, applies transform and writes the result back.
        An absent record is left absent: update never creates one.

        The read and the write are separate requests with no atomicity; a
        concurrent writer in between is overwritten.
        """
        current = await self.get(url, codec.decode)
        if current is None:
            logger.debug(f"No record at {url}, skipping update")
            return
        await self.insert(url, codec.encode(transform(current)))

    # -- Transport ----------------------------------------------------------

    def _resolve_url(self, url: str) -> httpx.URL:
        """Join relative paths onto the base URL and validate the result.

        Raises:
            BadUrl: If the URL cannot be parsed or is not absolute http(s)
        """
        try:
            resolved = httpx.URL(url)
            if not resolved.scheme and self._base_url is not None:
                resolved = httpx.URL(f"{self._base_url}/{url.lstrip('/')}")
        except httpx.InvalidURL as e:
            raise BadUrl(url) from e

        if resolved.scheme not in ("http", "https") or not resolved.host:
            raise BadUrl(url)
        return resolved

    async def _send(
        self, method: str, url: str, content: Optional[bytes] = None
    ) -> httpx.Response:
        """Issue one request and classify failures.

        Raises:
            BadUrl, Timeout, NetworkError, BadStatus
        """
        target = self._resolve_url(url)
        logger.debug(f"{method} {target}")

        headers = _JSON_HEADERS if content is not None else None
        try:
            response = await self._http.request(
                method,
                target,
                content=content,
                headers=headers,
                timeout=self._config.timeout_s,
            )
        except httpx.TimeoutException as e:
            raise Timeout(url) from e
        except httpx.UnsupportedProtocol as e:
            raise BadUrl(url) from e
        except httpx.RequestError as e:
            raise NetworkError(url, str(e)) from e

        if not response.is_success:
            logger.debug(f"{method} {target} answered {response.status_code}")
            raise BadStatus(url, response.status_code)
        return response
