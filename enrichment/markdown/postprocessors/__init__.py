# enrichment/markdown/postprocessors/__init__.py

from .rich_content import rich_content_enhancer_default
from .utils import clear_shared_soup

POSTPROCESSORS = [
    rich_content_enhancer_default,  # Link mentions, embed frames and algorithm blocks
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    clear_shared_soup(context)
    return html
