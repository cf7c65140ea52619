"""
Remote metadata lookup for link mentions.

For each URL this fetches the page and picks a title and icon out of its
head, and for X/Twitter posts also asks the public oEmbed endpoint for the
post text. Every failure (bad status, transport error, timeout, garbage
JSON) degrades to ``None`` fields; ``fetch`` always returns a record.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from .attributes import pick_icon, pick_title
from .hosts import derive_title, host_label, is_twitter_url
from .records import MetadataRecord

logger = logging.getLogger(__name__)

EXCERPT_MAX_LENGTH = 140

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)


def truncate_text(value: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """Shorten ``value`` to ``max_length`` characters, cutting at a word boundary."""
    if len(value) <= max_length:
        return value

    cut = value[: max_length - 3]
    if value[max_length - 3] != " " and " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return f"{cut.rstrip()}..."


def extract_tweet_text(markup: str) -> Optional[str]:
    """First paragraph of an oEmbed ``html`` payload as plain, collapsed text."""
    if not markup:
        return None

    soup = BeautifulSoup(markup, "html.parser")
    paragraph = soup.find("p")
    if paragraph is None:
        return None

    text = " ".join(paragraph.get_text(" ").replace("\xa0", " ").split())
    return text or None


def twitter_handle(author_url: Optional[str]) -> Optional[str]:
    if not author_url:
        return None
    try:
        path = urlparse(author_url).path
    except ValueError:
        return None
    segments = [segment for segment in path.split("/") if segment]
    return segments[0] if segments else None


def compose_oembed_title(payload: dict) -> Optional[str]:
    """
    Build a mention title from an oEmbed payload.

    ``@handle — excerpt`` when both are present, otherwise whichever exists.
    """
    excerpt = extract_tweet_text(payload.get("html") or "")
    handle = twitter_handle(payload.get("author_url"))
    author = f"@{handle}" if handle else None

    if excerpt:
        excerpt = truncate_text(excerpt)
        return f"{author} — {excerpt}" if author else excerpt
    if author:
        return f"X post by {author}"
    return None


class MetadataFetcher:
    """
    Fetch title/icon metadata for URLs.

    Args:
        client: Optional shared ``httpx.AsyncClient``. When omitted a client
            is opened per fetch, which keeps the fetcher usable from
            successive event loops (one per rendered document).
        timeout: Seconds before each network operation is abandoned.
        user_agent: Sent with every request; some hosts serve empty heads
            to unknown agents.
        oembed_endpoint: X/Twitter oEmbed URL.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 6.5,
        user_agent: str = DEFAULT_USER_AGENT,
        oembed_endpoint: str = "https://publish.twitter.com/oembed",
    ):
        self.client = client
        self.timeout = timeout
        self.user_agent = user_agent
        self.oembed_endpoint = oembed_endpoint

    @classmethod
    def from_settings(cls, client: Optional[httpx.AsyncClient] = None) -> "MetadataFetcher":
        from enrichment.markdown.config import get_enrichment_config

        config = get_enrichment_config()
        return cls(
            client,
            timeout=config["METADATA_TIMEOUT"],
            user_agent=config["USER_AGENT"],
            oembed_endpoint=config["OEMBED_ENDPOINT"],
        )

    @property
    def headers(self) -> dict:
        return {"user-agent": self.user_agent} if self.user_agent else {}

    async def fetch(self, url: str) -> MetadataRecord:
        if self.client is not None:
            return await self._fetch_with(self.client, url)

        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True
        ) as client:
            return await self._fetch_with(client, url)

    async def _fetch_with(self, client: httpx.AsyncClient, url: str) -> MetadataRecord:
        if is_twitter_url(url):
            page, oembed_title = await asyncio.gather(
                self._bounded(self._fetch_page(client, url), url, "page"),
                self._bounded(self._fetch_oembed_title(client, url), url, "oEmbed"),
            )
        else:
            page = await self._bounded(self._fetch_page(client, url), url, "page")
            oembed_title = None

        title = icon = None
        if page is not None:
            markup, final_url = page
            title = pick_title(markup)
            icon = pick_icon(markup, final_url)

        return MetadataRecord(
            title=title,
            icon=icon,
            host_label=host_label(url),
            derived_title=derive_title(url),
            oembed_title=oembed_title,
        )

    async def _bounded(self, operation, url: str, what: str):
        """Run one network operation under the timeout; failures become None."""
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.info("Timed out fetching %s for %s after %ss", what, url, self.timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Failed to fetch %s for %s: %s", what, url, exc)
        except ValueError as exc:
            logger.debug("Unreadable %s response for %s: %s", what, url, exc)
        return None

    async def _fetch_page(self, client: httpx.AsyncClient, url: str):
        response = await client.get(url, headers=self.headers, follow_redirects=True)
        if not response.is_success:
            logger.debug("Bad response %s for %s", response.status_code, url)
            return None
        return response.text, str(response.url)

    async def _fetch_oembed_title(self, client: httpx.AsyncClient, url: str) -> Optional[str]:
        response = await client.get(
            self.oembed_endpoint,
            params={"omit_script": "true", "dnt": "true", "url": url},
            headers=self.headers,
        )
        if not response.is_success:
            logger.debug("oEmbed returned %s for %s", response.status_code, url)
            return None

        payload = response.json()
        if not isinstance(payload, dict):
            return None
        return compose_oembed_title(payload)
