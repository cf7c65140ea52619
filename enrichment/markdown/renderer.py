# enrichment/markdown/renderer.py

import pypandoc

from .config import get_pandoc_config
from .postprocessors import apply_postprocessors


def render_markdown(text, context=None):
    """
    Main rendering function with post processing pipeline using pypandoc

    Args:
        text: Raw markdown text
        context: Optional dict for processors that need additional data
            (e.g. "metadata_cache" to use a build-scoped MetadataCache)
    """
    context = context or {}

    pandoc_config = get_pandoc_config()

    html = pypandoc.convert_text(
        text or "",
        to="html5",
        format="markdown",
        extra_args=pandoc_config["extra_args"],
        filters=pandoc_config.get("filters", []),
    )

    # Post-processing: After markdown conversion
    html = apply_postprocessors(html, context)

    return html
