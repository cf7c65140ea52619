"""
URL-only host rules: short host labels, X/Twitter detection and titles
derived from the shape of well-known URLs. Nothing here touches the network.
"""

from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urlparse

TWITTER_HOSTS = {"x.com", "twitter.com"}

# Hosts whose PDFs get a title built from the file name
ACADEMIC_HOST_SUFFIX = ".edu"

DEFAULT_HOST_LABEL = "EX"


def normalized_host(url: str) -> str:
    """Lower-cased hostname with a leading ``www.`` removed ("" if unparsable)."""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return re.sub(r"^www\.", "", hostname)


def _path_segments(url: str) -> List[str]:
    try:
        path = urlparse(url).path
    except ValueError:
        return []
    return [segment for segment in path.split("/") if segment]


def is_twitter_url(url: str) -> bool:
    return normalized_host(url) in TWITTER_HOSTS


def host_label(url: str) -> str:
    """
    Two-letter badge for a URL's host, e.g. ``GI`` for github.com.

    Used as the placeholder when a mention has no icon.
    """
    host = normalized_host(url)
    first_label = host.split(".")[0] if host else ""
    return first_label[:2].upper() or DEFAULT_HOST_LABEL


def _title_from_filename(segment: str) -> str:
    stem = re.sub(r"\.[A-Za-z0-9]+$", "", segment)
    words = re.sub(r"[-_]+", " ", stem).split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def derive_title(url: str) -> Optional[str]:
    """
    Title computed purely from URL structure, or None.

    Rules:
        x.com / twitter.com          -> "X post by @user" / "X post"
        github.com/<owner>/<repo>    -> "GitHub — owner/repo"
        dune.com/queries/<id>        -> "Dune Query #id"
        dune.com/embeds/<id>/...     -> "Dune Embed #id"
        <host>.edu/.../<name>.pdf    -> "Name (PDF)"
    """
    host = normalized_host(url)
    if not host:
        return None

    segments = _path_segments(url)

    if host in TWITTER_HOSTS:
        if segments:
            return f"X post by @{segments[0]}"
        return "X post"

    if host == "github.com":
        if len(segments) >= 2:
            return f"GitHub — {segments[0]}/{segments[1]}"
        return None

    if host == "dune.com":
        if len(segments) >= 2 and segments[0] == "queries":
            return f"Dune Query #{segments[1]}"
        if len(segments) >= 2 and segments[0] == "embeds":
            return f"Dune Embed #{segments[1]}"
        return None

    if host.endswith(ACADEMIC_HOST_SUFFIX) and segments:
        last = segments[-1]
        if last.lower().endswith(".pdf"):
            name = _title_from_filename(last)
            if name:
                return f"{name} (PDF)"

    return None
