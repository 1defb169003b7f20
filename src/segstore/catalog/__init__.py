"""
Topic listing and segment catalog.
"""

from .catalog import SegmentCatalog, build_catalog
from .listing import list_topic_segments, topic_prefix

__all__ = ["SegmentCatalog", "build_catalog", "list_topic_segments", "topic_prefix"]
