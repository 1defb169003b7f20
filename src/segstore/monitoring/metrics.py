"""Prometheus metrics for segment listing, cataloging and upload."""

from prometheus_client import Counter, Histogram

# Catalog
SEGMENTS_LISTED = Counter(
    "segstore_segments_listed_total",
    "Segment objects returned by topic listings",
    ["topic"],
)
SEGMENTS_DECODED = Counter(
    "segstore_segments_decoded_total",
    "Segment names decoded into descriptors",
    ["topic"],
)
SEGMENT_DECODE_FAILURES = Counter(
    "segstore_segment_decode_failures_total",
    "Segment names that failed to decode",
    ["topic", "error"],
)
CATALOG_BUILD_DURATION = Histogram(
    "segstore_catalog_build_duration_seconds",
    "Duration of catalog builds",
    ["topic"],
)

# Upload
SEGMENTS_UPLOADED = Counter(
    "segstore_segments_uploaded_total",
    "Segments copied from local files into the bucket",
)
BYTES_UPLOADED = Counter(
    "segstore_bytes_uploaded_total",
    "Bytes copied from local files into the bucket",
)

__all__ = [
    "SEGMENTS_LISTED",
    "SEGMENTS_DECODED",
    "SEGMENT_DECODE_FAILURES",
    "CATALOG_BUILD_DURATION",
    "SEGMENTS_UPLOADED",
    "BYTES_UPLOADED",
]
