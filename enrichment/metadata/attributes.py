"""
Tolerant attribute extraction from raw ``<meta>`` and ``<link>`` tags.

Remote pages are only scanned for a handful of head tags, so instead of
building a full parse tree for every fetched document we pattern-match the
tags we care about and pull their attributes out.
"""

from __future__ import annotations

import html
import re
from typing import Dict, List, Optional
from urllib.parse import urljoin

ATTRIBUTE_PATTERN = re.compile(r"([\w:-]+)\s*=\s*(['\"])(.*?)\2", re.DOTALL)
META_TAG_PATTERN = re.compile(r"<meta\s+[^>]*>", re.IGNORECASE)
LINK_TAG_PATTERN = re.compile(r"<link\s+[^>]*>", re.IGNORECASE)
TITLE_TAG_PATTERN = re.compile(r"<title[^>]*>([^<]*)</title>", re.IGNORECASE)

# Checked in order; first tag with non-empty content wins
TITLE_META_KEYS = ("og:title", "twitter:title", "title")

# Substring match against the normalised rel value, in priority order
ICON_REL_PRIORITY = ("apple-touch-icon", "icon", "shortcut icon")


def parse_attributes(tag: str) -> Dict[str, str]:
    """
    Return ``{attribute name: value}`` for a raw tag fragment.

    Names are lower-cased; both quote styles are accepted and names may
    contain colons and hyphens (``og:title``, ``data-x``). Unquoted or
    malformed attributes are skipped, so bad input yields ``{}``.
    """
    if not tag:
        return {}

    attrs = {}
    for match in ATTRIBUTE_PATTERN.finditer(tag):
        attrs[match.group(1).lower()] = match.group(3)
    return attrs


def extract_meta_tags(markup: str) -> List[Dict[str, str]]:
    return [parse_attributes(m.group(0)) for m in META_TAG_PATTERN.finditer(markup)]


def extract_link_tags(markup: str) -> List[Dict[str, str]]:
    return [parse_attributes(m.group(0)) for m in LINK_TAG_PATTERN.finditer(markup)]


def _clean(value: str) -> str:
    return html.unescape(value.strip()).strip()


def pick_title(markup: str) -> Optional[str]:
    """
    Pick the page title: og:title, twitter:title, the ``title`` meta tag,
    then the ``<title>`` element.
    """
    meta_tags = extract_meta_tags(markup)

    for key in TITLE_META_KEYS:
        for tag in meta_tags:
            name = (tag.get("property") or tag.get("name") or "").lower()
            if name != key:
                continue
            content = _clean(tag.get("content", ""))
            if content:
                return content

    match = TITLE_TAG_PATTERN.search(markup)
    if match:
        title = _clean(match.group(1))
        if title:
            return title

    return None


def pick_icon(markup: str, base_url: str) -> Optional[str]:
    """
    Pick the best icon link and resolve it against ``base_url``.

    Prefers apple-touch-icon (larger, usually square) over plain icons.
    """
    link_tags = extract_link_tags(markup)

    for rel in ICON_REL_PRIORITY:
        for tag in link_tags:
            tag_rel = " ".join(tag.get("rel", "").lower().split())
            href = html.unescape(tag.get("href", "").strip())
            if rel not in tag_rel or not href:
                continue
            try:
                return urljoin(base_url, href)
            except ValueError:
                return href

    return None
