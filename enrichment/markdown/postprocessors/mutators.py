# enrichment/markdown/postprocessors/mutators.py
"""
Rewrites for matched candidates.

Link mention (anchor keeps its href, children are replaced):
    <a href="https://github.com/acme/widget" class="link-mention"
       data-link-mention="true">
        <span class="link-mention__icon" data-host="GI" data-has-icon="true">
            <img src="https://github.com/apple-touch-icon.png" alt=""
                 loading="lazy" decoding="async">
        </span>
        <span class="link-mention__title">GitHub — acme/widget</span>
    </a>

Algorithm (replaces the <pre>, or pandoc's <div class="sourceCode"> wrapper):
    <div class="algorithm block">
        <div class="algorithm-title">Algorithm Sort</div>
        <div class="algorithm-io">
            <div class="algorithm-io-row">
                <span class="algorithm-io-label">Input:</span>
                <span class="algorithm-io-value">array A</span>
            </div>
        </div>
        <div class="algorithm-steps">
            <div class="algorithm-step" data-step="1">
                <span class="algorithm-step-number">1:</span>
                <span class="algorithm-step-text"> for i in A</span>
            </div>
            <div class="algorithm-spacer"></div>
            <div class="algorithm-line">return A</div>
        </div>
    </div>

Embed frame (replaces the paragraph):
    <div class="embed-frame block" data-embed-url="..." data-embed-host="dune.com"
         data-embed-theme-param="darkMode">
        <iframe class="embed-frame__iframe" src="..." loading="lazy"
                referrerpolicy="no-referrer" allowfullscreen=""
                title="Embedded content from dune.com"></iframe>
        <div class="embed-frame__meta">
            <span class="embed-frame__host">dune.com</span>
            <a class="embed-frame__link" href="..." target="_blank"
               rel="noopener noreferrer">Open in new tab</a>
        </div>
    </div>
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Tag

from enrichment.metadata.hosts import normalized_host
from enrichment.metadata.records import MetadataRecord

from .pseudocode import AlgorithmBlock, Line, Spacer, Step

# Query parameters embed hosts use to switch colour scheme
THEME_PARAMS = ("darkMode", "theme")

# Chart hosts that accept darkMode on /embeds/ URLs without declaring it
THEMED_EMBED_HOSTS = {"dune.com"}


def _owner_soup(node: Tag) -> BeautifulSoup:
    """Walk up to the BeautifulSoup object so new tags share its builder."""
    root = node
    while root.parent is not None:
        root = root.parent
    if isinstance(root, BeautifulSoup):
        return root
    return BeautifulSoup("", "html.parser")


def _new_tag(soup: BeautifulSoup, name: str, classes=None, text: Optional[str] = None, **attrs) -> Tag:
    tag = soup.new_tag(name)
    if classes:
        tag["class"] = list(classes)
    for key, value in attrs.items():
        tag[key.replace("_", "-")] = value
    if text is not None:
        tag.string = text
    return tag


# --- Link mentions ---


def apply_link_mention(anchor: Tag, record: MetadataRecord, title: str) -> None:
    soup = _owner_soup(anchor)

    classes = anchor.get("class", [])
    if isinstance(classes, str):
        classes = classes.split()
    if "link-mention" not in classes:
        classes = list(classes) + ["link-mention"]
    anchor["class"] = classes
    anchor["data-link-mention"] = "true"

    icon = _new_tag(
        soup,
        "span",
        ["link-mention__icon"],
        data_host=record.host_label,
        data_has_icon="true" if record.icon else "false",
    )
    if record.icon:
        img = soup.new_tag("img")
        img["src"] = record.icon
        img["alt"] = ""
        img["loading"] = "lazy"
        img["decoding"] = "async"
        icon.append(img)

    title_span = _new_tag(soup, "span", ["link-mention__title"], text=title)

    anchor.clear()
    anchor.append(icon)
    anchor.append(title_span)


# --- Algorithms ---


def _replacement_target(pre: Tag) -> Tag:
    """Pandoc wraps highlighted blocks in div.sourceCode; replace the wrapper too."""
    parent = pre.parent
    if (
        isinstance(parent, Tag)
        and parent.name == "div"
        and "sourceCode" in parent.get("class", [])
        and [c for c in parent.children if isinstance(c, Tag)] == [pre]
    ):
        return parent
    return pre


def build_algorithm(soup: BeautifulSoup, block: AlgorithmBlock) -> Tag:
    container = _new_tag(soup, "div", ["algorithm", "block"])

    if block.title:
        container.append(_new_tag(soup, "div", ["algorithm-title"], text=block.title))

    if block.io:
        io = _new_tag(soup, "div", ["algorithm-io"])
        for entry in block.io:
            row = _new_tag(soup, "div", ["algorithm-io-row"], data_io=entry.label.lower())
            row.append(_new_tag(soup, "span", ["algorithm-io-label"], text=f"{entry.label}:"))
            row.append(_new_tag(soup, "span", ["algorithm-io-value"], text=entry.value))
            io.append(row)
        container.append(io)

    steps = _new_tag(soup, "div", ["algorithm-steps"])
    for step in block.steps:
        if isinstance(step, Step):
            row = _new_tag(soup, "div", ["algorithm-step"], data_step=step.number)
            row.append(_new_tag(soup, "span", ["algorithm-step-number"], text=f"{step.number}:"))
            row.append(_new_tag(soup, "span", ["algorithm-step-text"], text=step.text))
            steps.append(row)
        elif isinstance(step, Line):
            steps.append(_new_tag(soup, "div", ["algorithm-line"], text=step.text))
        elif isinstance(step, Spacer):
            steps.append(_new_tag(soup, "div", ["algorithm-spacer"]))
    container.append(steps)

    return container


def replace_with_algorithm(pre: Tag, block: AlgorithmBlock) -> Tag:
    soup = _owner_soup(pre)
    container = build_algorithm(soup, block)
    _replacement_target(pre).replace_with(container)
    return container


# --- Embeds ---


def embed_theme_param(href: str) -> Optional[str]:
    """
    Name of the query parameter that controls the embed's colour theme.

    Explicit ``darkMode``/``theme`` parameters win; known chart hosts get
    ``darkMode`` inferred for their ``/embeds/`` URLs.
    """
    try:
        parsed = urlparse(href)
    except ValueError:
        return None

    query = parse_qs(parsed.query, keep_blank_values=True)
    for param in THEME_PARAMS:
        if param in query:
            return param

    if normalized_host(href) in THEMED_EMBED_HOSTS and parsed.path.startswith("/embeds/"):
        return "darkMode"
    return None


def build_embed_frame(soup: BeautifulSoup, href: str) -> Tag:
    host = normalized_host(href) or href

    frame = _new_tag(
        soup,
        "div",
        ["embed-frame", "block"],
        data_embed_url=href,
        data_embed_host=host,
    )
    theme_param = embed_theme_param(href)
    if theme_param:
        frame["data-embed-theme-param"] = theme_param

    iframe = _new_tag(
        soup,
        "iframe",
        ["embed-frame__iframe"],
        src=href,
        loading="lazy",
        referrerpolicy="no-referrer",
        allowfullscreen="",
        title=f"Embedded content from {host}",
    )
    frame.append(iframe)

    meta = _new_tag(soup, "div", ["embed-frame__meta"])
    meta.append(_new_tag(soup, "span", ["embed-frame__host"], text=host))
    meta.append(
        _new_tag(
            soup,
            "a",
            ["embed-frame__link"],
            text="Open in new tab",
            href=href,
            target="_blank",
            rel="noopener noreferrer",
        )
    )
    frame.append(meta)

    return frame


def replace_with_embed(paragraph: Tag, href: str) -> Tag:
    soup = _owner_soup(paragraph)
    frame = build_embed_frame(soup, href)
    paragraph.replace_with(frame)
    return frame
