"""Host rules and title resolution tests."""

from __future__ import annotations

import pytest

from enrichment.metadata.hosts import derive_title, host_label, is_twitter_url
from enrichment.metadata.records import MetadataRecord
from enrichment.metadata.titles import looks_like_url_title, resolve_title


def record_for(url: str, **fields) -> MetadataRecord:
    defaults = dict(title=None, icon=None, host_label=host_label(url), derived_title=derive_title(url))
    defaults.update(fields)
    return MetadataRecord(**defaults)


@pytest.mark.parametrize(
    "url, label",
    [
        ("https://www.github.com/acme", "GI"),
        ("https://x.com/alice", "X"),
        ("https://docs.python.org/3/", "DO"),
        ("not a url", "EX"),
        ("https://[::1/broken", "EX"),
    ],
)
def test_host_label(url, label):
    assert host_label(url) == label


@pytest.mark.parametrize(
    "url, title",
    [
        ("https://x.com/alice/status/123", "X post by @alice"),
        ("https://www.twitter.com/", "X post"),
        ("https://github.com/acme/widget/issues/4", "GitHub — acme/widget"),
        ("https://github.com/acme", None),
        ("https://dune.com/queries/3141", "Dune Query #3141"),
        ("https://dune.com/embeds/123/456", "Dune Embed #123"),
        ("https://dune.com/alice", None),
        ("https://cs.stanford.edu/papers/deep_residual-learning.pdf", "Deep Residual Learning (PDF)"),
        ("https://cs.stanford.edu/people/", None),
        ("https://example.com/a/b", None),
    ],
)
def test_derive_title(url, title):
    assert derive_title(url) == title


def test_is_twitter_url_strips_www():
    assert is_twitter_url("https://www.x.com/alice")
    assert is_twitter_url("https://twitter.com/alice")
    assert not is_twitter_url("https://notx.com/alice")


@pytest.mark.parametrize(
    "title, expected",
    [
        (None, True),
        ("https://example.com/page", True),
        ("see x.com/alice", True),
        ("twitter.com/alice/status/1", True),
        ("A real title", False),
    ],
)
def test_looks_like_url_title(title, expected):
    assert looks_like_url_title(title) is expected


def test_meta_title_wins_for_regular_hosts():
    href = "https://github.com/acme/widget"
    record = record_for(href, title="acme/widget: Widgets for everyone")

    assert resolve_title(record, href, href) == "acme/widget: Widgets for everyone"


def test_derived_title_used_when_fetch_returned_no_title():
    href = "https://github.com/acme/widget"

    assert resolve_title(record_for(href), href, href) == "GitHub — acme/widget"


def test_url_like_meta_title_is_ignored():
    href = "https://example.com/post"
    record = record_for(href, title="https://example.com/post")

    assert resolve_title(record, href, "example.com/post") == "example.com/post"


def test_scheme_stripped_href_is_last_resort():
    href = "https://example.com/post"

    assert resolve_title(record_for(href), href, "  ") == "example.com/post"


def test_twitter_prefers_oembed_title():
    href = "https://x.com/alice/status/123"
    record = record_for(href, title="Alice on X", oembed_title="@alice — hello world")

    assert resolve_title(record, href, href) == "@alice — hello world"


def test_twitter_falls_back_to_derived_title():
    href = "https://x.com/alice/status/123"
    record = record_for(href, title="X")

    assert resolve_title(record, href, href) == "X post by @alice"


def test_twitter_generic_meta_title_never_used():
    href = "https://x.com/"
    record = MetadataRecord(title="Twitter", icon=None, host_label="X", derived_title=None)

    assert resolve_title(record, href, href) == "X post"
