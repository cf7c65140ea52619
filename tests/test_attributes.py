"""Attribute parsing and head tag selection tests."""

from __future__ import annotations

from enrichment.metadata.attributes import (
    extract_link_tags,
    parse_attributes,
    pick_icon,
    pick_title,
)


def test_parse_attributes_accepts_both_quote_styles_and_colons():
    attrs = parse_attributes("""<meta property='og:title' content="Hello 'world'" data-x="1">""")

    assert attrs == {"property": "og:title", "content": "Hello 'world'", "data-x": "1"}


def test_parse_attributes_lowercases_names():
    assert parse_attributes('<LINK REL="icon" HREF="/f.ico">') == {"rel": "icon", "href": "/f.ico"}


def test_parse_attributes_malformed_input_yields_empty_mapping():
    assert parse_attributes("") == {}
    assert parse_attributes("<meta content=unquoted>") == {}
    assert parse_attributes('<meta content="unterminated>') == {}


def test_pick_title_prefers_og_over_twitter_over_title_element():
    markup = (
        '<meta name="twitter:title" content="Twitter title">'
        '<meta property="og:title" content="OG &amp; title">'
        "<title>Element title</title>"
    )

    assert pick_title(markup) == "OG & title"


def test_pick_title_skips_empty_meta_and_falls_back_to_title_element():
    markup = '<meta property="og:title" content="  "><title>  Page &lt;1&gt;  </title>'

    assert pick_title(markup) == "Page <1>"


def test_pick_title_uses_generic_title_meta():
    assert pick_title('<meta name="title" content="Meta title">') == "Meta title"


def test_pick_title_none_without_candidates():
    assert pick_title("<html><body>nothing</body></html>") is None


def test_pick_icon_priority_and_resolution():
    markup = (
        '<link rel="shortcut icon" href="/favicon.ico">'
        '<link rel="icon" type="image/png" href="/icon.png">'
        '<link rel="Apple-Touch-Icon" href="touch.png">'
    )

    assert pick_icon(markup, "https://example.com/blog/post") == "https://example.com/blog/touch.png"


def test_pick_icon_normalizes_rel_whitespace():
    markup = '<link rel="shortcut\n   icon" href="https://cdn.example.com/f.ico">'

    assert pick_icon(markup, "https://example.com/") == "https://cdn.example.com/f.ico"


def test_pick_icon_none_when_no_icon_links():
    markup = '<link rel="stylesheet" href="/style.css">'

    assert extract_link_tags(markup) == [{"rel": "stylesheet", "href": "/style.css"}]
    assert pick_icon(markup, "https://example.com/") is None
