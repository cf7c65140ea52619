from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MetadataRecord:
    """Everything known about one linked URL, fetched once per process."""

    title: Optional[str]
    icon: Optional[str]
    host_label: str
    derived_title: Optional[str] = None
    oembed_title: Optional[str] = None
