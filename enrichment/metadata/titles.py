"""
Final display title for a link mention.

Machine-readable titles fetched from the page outrank titles guessed from
the URL, which outrank the author's own link text. X/Twitter is the
exception: its pages return a generic "X" title, so the oEmbed excerpt and
URL-derived title go first there.
"""

from __future__ import annotations

import re
from typing import Optional

from .hosts import derive_title, is_twitter_url
from .records import MetadataRecord

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

GENERIC_TWITTER_TITLES = {"x", "twitter"}


def looks_like_url_title(title: Optional[str]) -> bool:
    return (
        not title
        or bool(SCHEME_PATTERN.match(title))
        or "x.com/" in title
        or "twitter.com/" in title
    )


def is_generic_twitter_title(title: str) -> bool:
    return title.strip().lower() in GENERIC_TWITTER_TITLES


def usable_meta_title(record: MetadataRecord, href: str) -> Optional[str]:
    title = (record.title or "").strip() or None
    if looks_like_url_title(title):
        return None
    if is_twitter_url(href) and is_generic_twitter_title(title):
        return None
    return title


def strip_scheme(href: str) -> str:
    return SCHEME_PATTERN.sub("", href)


def resolve_title(record: MetadataRecord, href: str, fallback_text: str = "") -> str:
    meta_title = usable_meta_title(record, href)
    derived = record.derived_title or derive_title(href)

    if is_twitter_url(href):
        return record.oembed_title or derived or meta_title or "X post"

    return (
        meta_title
        or record.oembed_title
        or derived
        or fallback_text.strip()
        or strip_scheme(href)
    )
