# enrichment/markdown/postprocessors/rich_content.py
"""
Postprocessor that upgrades raw authoring patterns into rich structures.

This postprocessor:
1. Turns pseudocode code blocks into structured algorithm markup
2. Turns paragraphs holding a single embeddable link into embed frames
3. Turns bare links (link text == URL) into link mentions with a fetched
   icon and title

Steps 1 and 2 need no network and happen right after the tree is scanned.
All link mention lookups are then issued at once and awaited together, so
one slow host never holds up the others; mention anchors are only rewritten
once every lookup has finished.

Uses shared soup caching for efficiency.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from asgiref.sync import async_to_sync
from bs4 import Tag

from enrichment.metadata.cache import MetadataCache, get_metadata_cache
from enrichment.metadata.titles import resolve_title

from .candidates import collect_candidates
from .mutators import apply_link_mention, replace_with_algorithm, replace_with_embed
from .pseudocode import parse_pseudocode
from .utils import get_shared_soup, soup_to_html

logger = logging.getLogger(__name__)

METADATA_CACHE_KEY = "metadata_cache"


async def enhance_tree(
    root: Tag,
    cache: MetadataCache,
    pseudocode_languages: Optional[Iterable[str]] = None,
) -> Tag:
    """
    Enrich ``root`` in place and return it.

    Args:
        root: Parsed document (BeautifulSoup or any Tag)
        cache: Metadata cache shared across documents of this build
        pseudocode_languages: Code block languages always treated as
            pseudocode; defaults to the ENRICHMENT setting

    Returns:
        The same tree, mutated
    """
    if pseudocode_languages is None:
        from enrichment.markdown.config import get_enrichment_config

        pseudocode_languages = get_enrichment_config()["PSEUDOCODE_LANGUAGES"]

    candidates = collect_candidates(root, pseudocode_languages)
    if not candidates:
        return root

    for embed in candidates.embeds:
        replace_with_embed(embed.node, embed.href)

    algorithms = 0
    for candidate in candidates.algorithms:
        block = parse_pseudocode(candidate.lines)
        if block is None:
            continue
        replace_with_algorithm(candidate.node, block)
        algorithms += 1

    if candidates.mentions:
        records = await asyncio.gather(
            *(cache.get(mention.href) for mention in candidates.mentions)
        )
        for mention, record in zip(candidates.mentions, records):
            title = resolve_title(record, mention.href, mention.fallback_text)
            apply_link_mention(mention.node, record, title)

    logger.debug(
        "Enriched document: %s mentions, %s embeds, %s algorithms",
        len(candidates.mentions),
        len(candidates.embeds),
        algorithms,
    )
    return root


def rich_content_enhancer(html: str, context: dict) -> str:
    """
    Synchronous postprocessor entry point.

    The metadata cache is taken from ``context["metadata_cache"]`` when the
    caller supplies one, otherwise the process-wide cache is used.

    Args:
        html: HTML string to process
        context: Context dictionary for shared soup caching and the cache

    Returns:
        Processed HTML with mentions, embeds and algorithms
    """
    soup = get_shared_soup(html, context)
    cache = context.get(METADATA_CACHE_KEY)
    if cache is None:
        cache = get_metadata_cache()

    async_to_sync(enhance_tree)(soup, cache)

    return soup_to_html(context, soup)


def rich_content_enhancer_default(html: str, context: dict) -> str:
    """
    Default configuration for rich_content_enhancer.

    This is the function that should be registered in POSTPROCESSORS.
    """
    return rich_content_enhancer(html, context)
