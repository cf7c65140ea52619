# enrichment/markdown/postprocessors/candidates.py
"""
Single-pass classification of the rendered tree into enrichment candidates.

Three kinds of node are collected:
- pseudocode ``<pre>`` blocks            -> AlgorithmCandidate
- paragraphs holding one embeddable link -> EmbedCandidate
- anchors whose text is their own URL    -> LinkCandidate

Precedence at each element follows that order. A matched ``<pre>`` or embed
paragraph is not descended into, so its anchor can never also become a
link mention.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional
from urllib.parse import parse_qs, urlparse

from bs4 import Comment, NavigableString, Tag
from bs4.element import PreformattedString

from .pseudocode import code_block_lines, looks_like_pseudocode

EXTERNAL_HREF_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

PLAIN_TEXT_LANGUAGES = {"plaintext", "text"}

# Pandoc adds these to highlighted blocks next to the language name
NON_LANGUAGE_CLASSES = {"sourcecode", "numbersource", "numberlines", "hljs"}

MENTION_MARKER = "data-link-mention"


@dataclass
class LinkCandidate:
    node: Tag
    href: str
    fallback_text: str


@dataclass
class EmbedCandidate:
    node: Tag
    href: str


@dataclass
class AlgorithmCandidate:
    node: Tag
    lines: List[str]


@dataclass
class Candidates:
    mentions: List[LinkCandidate] = field(default_factory=list)
    embeds: List[EmbedCandidate] = field(default_factory=list)
    algorithms: List[AlgorithmCandidate] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.mentions or self.embeds or self.algorithms)


def _classes(tag: Tag) -> List[str]:
    classes = tag.get("class", [])
    if isinstance(classes, str):
        classes = classes.split()
    return classes


def node_text(node) -> str:
    """Visible text of a node; comments and other markup strings are skipped."""
    if isinstance(node, NavigableString):
        if isinstance(node, PreformattedString):
            return ""
        return str(node)
    if isinstance(node, Tag):
        return "".join(node_text(child) for child in node.children)
    return ""


def is_external_href(href) -> bool:
    return isinstance(href, str) and bool(EXTERNAL_HREF_PATTERN.match(href.strip()))


def is_embeddable_url(href: str) -> bool:
    """Embed URLs: an ``/embed`` path (covers ``/embeds/``) or an ``embed`` query param."""
    try:
        parsed = urlparse(href)
    except ValueError:
        return False
    if "/embed" in parsed.path:
        return True
    return "embed" in parse_qs(parsed.query, keep_blank_values=True)


def is_bare_link_text(text: str, href: str) -> bool:
    """
    True when the anchor text just repeats the URL.

    Accepted forms for ``https://example.com/a?b#c``:
        https://example.com/a?b#c
        example.com/a?b#c
        example.com
    """
    if not text:
        return False

    normalized_text = text.strip()
    normalized_href = href.strip()
    if not normalized_text:
        return False

    if normalized_text == normalized_href:
        return True
    if normalized_text == EXTERNAL_HREF_PATTERN.sub("", normalized_href):
        return True

    try:
        parsed = urlparse(normalized_href)
        hostname = parsed.hostname or ""
    except ValueError:
        return False
    if not hostname:
        return False

    display = hostname + (parsed.path or "/")
    if parsed.query:
        display += f"?{parsed.query}"
    if parsed.fragment:
        display += f"#{parsed.fragment}"

    return normalized_text in (display, hostname)


def declared_language(pre: Tag, known: Iterable[str] = ()) -> Optional[str]:
    """
    Language declared on a code block.

    Looks at ``data-language``/``data-lang`` first, then the classes of the
    ``<pre>`` and its ``<code>`` child (``language-x``, ``lang-x`` or a bare
    class name as pandoc writes it). A class found in ``known`` wins over
    unrelated styling classes such as ``block``.
    """
    for attr in ("data-language", "data-lang"):
        value = pre.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip().lower()

    code = pre.find("code", recursive=False)
    tags = [pre] + ([code] if code is not None else [])
    names = []
    for tag in tags:
        for cls in _classes(tag):
            name = cls.lower()
            for prefix in ("language-", "lang-"):
                if name.startswith(prefix):
                    return name[len(prefix):]
            if name not in NON_LANGUAGE_CLASSES:
                names.append(name)

    known = set(known)
    for name in names:
        if name in known:
            return name
    return names[0] if names else None


def is_pseudocode_block(pre: Tag, lines: List[str], languages: FrozenSet[str]) -> bool:
    language = declared_language(pre, languages | PLAIN_TEXT_LANGUAGES)
    if language is None:
        return False
    if language in languages:
        return True
    return language in PLAIN_TEXT_LANGUAGES and looks_like_pseudocode(lines)


def _meaningful_children(tag: Tag) -> List:
    meaningful = []
    for child in tag.children:
        if isinstance(child, Tag):
            meaningful.append(child)
        elif isinstance(child, Comment):
            continue
        elif isinstance(child, NavigableString) and child.strip():
            meaningful.append(child)
    return meaningful


def embed_link(paragraph: Tag) -> Optional[Tag]:
    """The anchor of a paragraph that holds nothing but one embeddable link."""
    children = _meaningful_children(paragraph)
    if len(children) != 1:
        return None

    anchor = children[0]
    if not isinstance(anchor, Tag) or anchor.name != "a":
        return None

    href = anchor.get("href")
    if not is_external_href(href) or not is_embeddable_url(href.strip()):
        return None
    return anchor


def _mention_candidate(anchor: Tag) -> Optional[LinkCandidate]:
    href = anchor.get("href")
    if not is_external_href(href):
        return None
    href = href.strip()
    if anchor.get(MENTION_MARKER) == "true":
        return None
    if is_embeddable_url(href):
        return None

    text = node_text(anchor)
    if not is_bare_link_text(text, href):
        return None
    return LinkCandidate(node=anchor, href=href, fallback_text=text.strip())


def collect_candidates(root: Tag, pseudocode_languages: Iterable[str]) -> Candidates:
    """
    Walk ``root`` depth-first once and sort nodes into candidate lists.

    Args:
        root: Soup or element to scan
        pseudocode_languages: Code block languages always treated as pseudocode

    Returns:
        Candidates in document order
    """
    languages = frozenset(lang.lower() for lang in pseudocode_languages)
    candidates = Candidates()

    stack = list(reversed(list(root.children)))
    while stack:
        node = stack.pop()

        if not isinstance(node, Tag):
            # Text nodes carry nothing to classify
            continue

        if node.name == "pre":
            lines = code_block_lines(node)
            if is_pseudocode_block(node, lines, languages):
                candidates.algorithms.append(AlgorithmCandidate(node=node, lines=lines))
                continue

        elif node.name == "p":
            anchor = embed_link(node)
            if anchor is not None:
                candidates.embeds.append(EmbedCandidate(node=node, href=anchor["href"].strip()))
                continue

        elif node.name == "a":
            candidate = _mention_candidate(node)
            if candidate is not None:
                candidates.mentions.append(candidate)

        stack.extend(reversed(list(node.children)))

    return candidates
