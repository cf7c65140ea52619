"""Pytest configuration shared across test modules."""

from __future__ import annotations

import asyncio
import os
from typing import Callable, Dict, List

import httpx
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "NotesSite.settings")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_DEBUG", "true")

from enrichment.metadata.cache import MetadataCache  # noqa: E402
from enrichment.metadata.fetcher import MetadataFetcher  # noqa: E402

PSEUDOCODE_LANGUAGES = ["pseudocode", "pseudo", "algorithm", "algo"]


class FakeWeb:
    """
    Route table for httpx.MockTransport.

    ``pages`` maps a URL to an ``httpx.Response`` or a coroutine function
    taking the request; anything unrouted answers 404. Every request is
    recorded in ``requests``.
    """

    def __init__(self, pages: Dict[str, object] | None = None):
        self.pages = dict(pages or {})
        self.requests: List[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        route = self.pages.get(url)
        if route is None:
            # oEmbed-style endpoints are routed without their query string
            route = self.pages.get(url.split("?", 1)[0])
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return await route(request)
        return route

    def count(self, url: str) -> int:
        return sum(1 for request in self.requests if str(request.url) == url)


def html_page(title: str = "", head: str = "") -> httpx.Response:
    body = f"<html><head>{head}<title>{title}</title></head><body></body></html>"
    return httpx.Response(200, text=body, headers={"content-type": "text/html"})


@pytest.fixture()
def web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture()
def make_cache(web) -> Callable[..., MetadataCache]:
    """Build a fresh cache whose fetcher talks to the fake web."""

    def factory(timeout: float = 2.0) -> MetadataCache:
        client = httpx.AsyncClient(transport=httpx.MockTransport(web))
        return MetadataCache(MetadataFetcher(client, timeout=timeout))

    return factory


def run(coro):
    return asyncio.run(coro)
