"""
Process-lifetime metadata cache.

The first request for a URL starts the fetch; every later request for the
same URL, concurrent or not, gets the same result without touching the
network again. There is no expiry: a process renders one site build, and a
failed fetch is cached like any other so it is not retried.

Entries are ``concurrent.futures.Future`` objects guarded by a lock, so
documents rendered on different threads (each with its own event loop) can
wait on a fetch another thread started.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from functools import lru_cache
from typing import Dict, Optional

from .fetcher import MetadataFetcher
from .records import MetadataRecord

logger = logging.getLogger(__name__)


class MetadataCache:
    def __init__(self, fetcher: MetadataFetcher):
        self.fetcher = fetcher
        self._records: Dict[str, MetadataRecord] = {}
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records.keys() | self._pending.keys())

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._records or url in self._pending

    def peek(self, url: str) -> Optional[MetadataRecord]:
        """Return the stored record for ``url`` without fetching."""
        with self._lock:
            return self._records.get(url)

    async def get(self, url: str) -> MetadataRecord:
        with self._lock:
            record = self._records.get(url)
            if record is not None:
                return record

            future = self._pending.get(url)
            starts_fetch = future is None
            if starts_fetch:
                future = Future()
                self._pending[url] = future

        if starts_fetch:
            logger.debug("Fetching metadata for %s", url)
            task = asyncio.ensure_future(self.fetcher.fetch(url))
            task.add_done_callback(lambda done: self._settle(url, future, done))

        return await asyncio.wrap_future(future)

    def _settle(self, url: str, future: Future, task: asyncio.Task) -> None:
        with self._lock:
            self._pending.pop(url, None)
            # Cancelled fetches are dropped so the next request starts a fresh one
            if not task.cancelled() and task.exception() is None:
                self._records[url] = task.result()

        if future.done():
            return
        if task.cancelled():
            future.cancel()
        elif task.exception() is not None:
            future.set_exception(task.exception())
        else:
            future.set_result(task.result())


@lru_cache(maxsize=1)
def get_metadata_cache() -> MetadataCache:
    """The shared cache used by the rendering pipeline for this process."""
    return MetadataCache(MetadataFetcher.from_settings())
