"""Synchronous store client.

Runs an AsyncStoreClient on a private background event loop and blocks the
calling thread on each operation. Use AsyncStoreClient directly from async
code.
"""

import asyncio
import threading
from collections.abc import Coroutine
from typing import Callable, Optional, TypeVar

import httpx

from kvjson._internal.async_http_client import AsyncStoreClient
from kvjson.codec import Json
from kvjson.json_helpers import JSONValue, ValueDecoder
from kvjson.types import Config

A = TypeVar("A")
_T = TypeVar("_T")


class StoreClient:
    """Blocking client for an HTTP key-value store.

    Usage:
        with StoreClient(Config(base_url="https://store.example.com")) as store:
            store.insert("items/1", ITEM.encode(item))
            item = store.get("items/1", ITEM.decode)
            store.update("items/1", ITEM, bump)
    """

    def __init__(
        self, config: Optional[Config] = None, http: Optional[httpx.AsyncClient] = None
    ) -> None:
        """Initialize client. The background loop starts on __enter__."""
        self._config = config or Config()
        self._http = http
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._store: Optional[AsyncStoreClient] = None

    def __enter__(self) -> "StoreClient":
        loop = asyncio.new_event_loop()
        thread = threading.Thread(target=loop.run_forever, name="kvjson-io", daemon=True)
        thread.start()
        self._loop = loop
        self._thread = thread
        self._store = AsyncStoreClient(self._config, self._http)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client and stop the background loop."""
        if self._loop is None:
            return
        loop = self._loop
        try:
            if self._store is not None:
                self._run(self._store.aclose())
        finally:
            loop.call_soon_threadsafe(loop.stop)
            if self._thread is not None:
                self._thread.join(timeout=5)
            loop.close()
            self._loop = None
            self._thread = None
            self._store = None

    def _run(self, coro: Coroutine[object, object, _T]) -> _T:
        """Bridge: submit coroutine to background loop, block for result."""
        if self._loop is None:
            coro.close()
            raise RuntimeError("StoreClient is not open; use it as a context manager")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result()
        except BaseException:
            # Interrupted while waiting: stop the coroutine before it issues more requests
            future.cancel()
            raise

    def _async_store(self) -> AsyncStoreClient:
        if self._store is None:
            raise RuntimeError("StoreClient is not open; use it as a context manager")
        return self._store

    # -- Store operations ---------------------------------------------------

    def insert(self, url: str, value: JSONValue) -> None:
        """Create or overwrite the record at url."""
        self._run(self._async_store().insert(url, value))

    def delete(self, url: str) -> None:
        """Remove the record at url (idempotent)."""
        self._run(self._async_store().delete(url))

    def get(self, url: str, decoder: ValueDecoder[A]) -> Optional[A]:
        """Read the record at url; None when absent."""
        return self._run(self._async_store().get(url, decoder))

    def update(self, url: str, codec: Json[A], transform: Callable[[A], A]) -> None:
        """Read-modify-write the record at url; no-op when absent."""
        self._run(self._async_store().update(url, codec, transform))
