"""
Monitoring utilities for segstore.
"""

from segstore.monitoring.metrics import (
    BYTES_UPLOADED,
    CATALOG_BUILD_DURATION,
    SEGMENT_DECODE_FAILURES,
    SEGMENTS_DECODED,
    SEGMENTS_LISTED,
    SEGMENTS_UPLOADED,
)

__all__ = [
    "SEGMENTS_LISTED",
    "SEGMENTS_DECODED",
    "SEGMENT_DECODE_FAILURES",
    "CATALOG_BUILD_DURATION",
    "SEGMENTS_UPLOADED",
    "BYTES_UPLOADED",
]
