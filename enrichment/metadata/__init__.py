"""
Remote link metadata: fetching, caching and title resolution for link mentions.
"""

from .attributes import parse_attributes, pick_icon, pick_title
from .cache import MetadataCache, get_metadata_cache
from .fetcher import MetadataFetcher
from .hosts import derive_title, host_label, is_twitter_url
from .records import MetadataRecord
from .titles import resolve_title

__all__ = [
    'MetadataCache',
    'MetadataFetcher',
    'MetadataRecord',
    'derive_title',
    'get_metadata_cache',
    'host_label',
    'is_twitter_url',
    'parse_attributes',
    'pick_icon',
    'pick_title',
    'resolve_title',
]
