from django.conf import settings

from enrichment.metadata.fetcher import DEFAULT_USER_AGENT

ENRICHMENT_DEFAULTS = {
    "METADATA_TIMEOUT": 6.5,
    "USER_AGENT": DEFAULT_USER_AGENT,
    "OEMBED_ENDPOINT": "https://publish.twitter.com/oembed",
    "PSEUDOCODE_LANGUAGES": ["pseudocode", "pseudo", "algorithm", "algo"],
}


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    ``autolink_bare_uris`` matters for the enrichment postprocessor: a bare
    URL in the source becomes an anchor whose text is the URL itself, which
    is exactly what gets upgraded to a link mention. Fenced code attributes
    keep the declared language on ``<pre>`` so pseudocode blocks can be found.
    """
    return {
        "extra_args": [
            # Enable Pandoc markdown extensions (all in --from argument)
            "--from=markdown+autolink_bare_uris+strikeout+superscript+subscript+task_lists+smart+pipe_tables+footnotes+fenced_code_blocks+fenced_code_attributes+raw_html+header_attributes+tex_math_dollars",
            # Math rendering with MathJax
            "--mathjax",
        ],
        "filters": [],
    }


def get_enrichment_config():
    """
    Settings for the rich content postprocessor.

    ``settings.ENRICHMENT`` is merged over ENRICHMENT_DEFAULTS, so a site
    only needs to declare the keys it changes.
    """
    config = dict(ENRICHMENT_DEFAULTS)
    config.update(getattr(settings, "ENRICHMENT", None) or {})
    config["METADATA_TIMEOUT"] = float(config["METADATA_TIMEOUT"])
    config["PSEUDOCODE_LANGUAGES"] = frozenset(
        lang.lower() for lang in config["PSEUDOCODE_LANGUAGES"]
    )
    return config
