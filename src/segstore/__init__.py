"""Segment Store - timestamp-indexed topic segments in S3."""

__version__ = "0.1.0"

from .catalog import SegmentCatalog, build_catalog, list_topic_segments
from .core import (
    CopyIOError,
    IntegerOverflow,
    InvalidObjectKey,
    InvalidSegmentFilename,
    MalformedTimestamp,
    ObjectRef,
    SegmentDecodeError,
    SegmentDescriptor,
    SegmentStoreError,
    decode_segment,
    format_segment_key,
    format_timestamp,
    parse_timestamp,
)
from .storage import S3SegmentStorage, copy_local_file_to_segment

__all__ = [
    "SegmentCatalog",
    "build_catalog",
    "list_topic_segments",
    "ObjectRef",
    "SegmentDescriptor",
    "decode_segment",
    "format_segment_key",
    "format_timestamp",
    "parse_timestamp",
    "S3SegmentStorage",
    "copy_local_file_to_segment",
    "SegmentStoreError",
    "SegmentDecodeError",
    "InvalidObjectKey",
    "InvalidSegmentFilename",
    "IntegerOverflow",
    "MalformedTimestamp",
    "CopyIOError",
]
