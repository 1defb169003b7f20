"""Segment naming core."""

from .errors import (
    CopyIOError,
    IntegerOverflow,
    InvalidObjectKey,
    InvalidSegmentFilename,
    MalformedTimestamp,
    SegmentDecodeError,
    SegmentStoreError,
)
from .models import ObjectRef, SegmentDescriptor
from .naming import (
    decode_segment,
    format_filename,
    format_segment_key,
    parse_filename,
    split_topic_and_filename,
)
from .timestamps import format_timestamp, parse_timestamp

__all__ = [
    "ObjectRef",
    "SegmentDescriptor",
    "decode_segment",
    "format_filename",
    "format_segment_key",
    "parse_filename",
    "split_topic_and_filename",
    "format_timestamp",
    "parse_timestamp",
    "SegmentStoreError",
    "SegmentDecodeError",
    "InvalidObjectKey",
    "InvalidSegmentFilename",
    "IntegerOverflow",
    "MalformedTimestamp",
    "CopyIOError",
]
