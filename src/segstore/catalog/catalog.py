"""
Timestamp-ordered catalog of a topic's segments.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from segstore.catalog.listing import list_topic_segments
from segstore.core.errors import SegmentDecodeError
from segstore.core.models import SegmentDescriptor
from segstore.core.naming import decode_segment
from segstore.monitoring.metrics import (
    CATALOG_BUILD_DURATION,
    SEGMENT_DECODE_FAILURES,
    SEGMENTS_DECODED,
)
from segstore.utils.logging import get_logger, log_context

logger = get_logger(__name__)


class SegmentCatalog:
    """
    Immutable index of segments keyed by ``from_timestamp``, sorted ascending.

    Built once from a listing snapshot and never modified. A segment covers
    timestamps from its own ``from_timestamp`` (inclusive) up to the next
    segment's ``from_timestamp`` (exclusive), so ``floor_entry(t)`` is the
    segment that would hold an entry written at ``t``.

    When two segments share a ``from_timestamp`` the one supplied last wins.
    """

    def __init__(self, segments: Iterable[SegmentDescriptor] = ()) -> None:
        by_timestamp: dict[int, SegmentDescriptor] = {}
        for segment in segments:
            replaced = by_timestamp.get(segment.from_timestamp)
            if replaced is not None:
                logger.warning(
                    "duplicate_segment_timestamp",
                    from_timestamp=segment.from_timestamp,
                    replaced_key=replaced.key,
                    key=segment.key,
                )
            by_timestamp[segment.from_timestamp] = segment

        self._keys: Tuple[int, ...] = tuple(sorted(by_timestamp))
        self._segments: Tuple[SegmentDescriptor, ...] = tuple(
            by_timestamp[ts] for ts in self._keys
        )

    def _at(self, index: int) -> Optional[SegmentDescriptor]:
        if 0 <= index < len(self._segments):
            return self._segments[index]
        return None

    def floor_entry(self, timestamp: int) -> Optional[SegmentDescriptor]:
        """Segment with the greatest from_timestamp <= timestamp."""
        return self._at(bisect_right(self._keys, timestamp) - 1)

    def ceiling_entry(self, timestamp: int) -> Optional[SegmentDescriptor]:
        """Segment with the least from_timestamp >= timestamp."""
        return self._at(bisect_left(self._keys, timestamp))

    def lower_entry(self, timestamp: int) -> Optional[SegmentDescriptor]:
        """Segment with the greatest from_timestamp < timestamp."""
        return self._at(bisect_left(self._keys, timestamp) - 1)

    def higher_entry(self, timestamp: int) -> Optional[SegmentDescriptor]:
        """Segment with the least from_timestamp > timestamp."""
        return self._at(bisect_right(self._keys, timestamp))

    def first_entry(self) -> Optional[SegmentDescriptor]:
        return self._at(0)

    def last_entry(self) -> Optional[SegmentDescriptor]:
        return self._at(len(self._segments) - 1)

    def get(self, timestamp: int) -> Optional[SegmentDescriptor]:
        """Segment starting exactly at timestamp."""
        index = bisect_left(self._keys, timestamp)
        if index < len(self._keys) and self._keys[index] == timestamp:
            return self._segments[index]
        return None

    def keys(self) -> Tuple[int, ...]:
        return self._keys

    def descending(self) -> Iterator[SegmentDescriptor]:
        return reversed(self._segments)

    def segments_between(self, start: int, end: int) -> List[SegmentDescriptor]:
        """
        Segments that may hold entries with timestamps in [start, end).

        Includes the segment covering ``start`` (its floor entry) followed by
        every segment starting before ``end``.
        """
        if end <= start:
            return []
        first = max(bisect_right(self._keys, start) - 1, 0)
        stop = bisect_left(self._keys, end)
        return list(self._segments[first:stop])

    def find_position(self, position: str) -> Optional[SegmentDescriptor]:
        """Segment whose first entry has the given position, if any."""
        for segment in self._segments:
            if segment.first_position == position:
                return segment
        return None

    def __iter__(self) -> Iterator[SegmentDescriptor]:
        return iter(self._segments)

    def __reversed__(self) -> Iterator[SegmentDescriptor]:
        return self.descending()

    def __len__(self) -> int:
        return len(self._segments)

    def __contains__(self, timestamp: object) -> bool:
        return isinstance(timestamp, int) and self.get(timestamp) is not None

    def __repr__(self) -> str:
        return f"SegmentCatalog(segments={len(self._segments)})"


def build_catalog(
    s3_client: Any,
    bucket: str,
    topic: str,
    skip_invalid: bool = False,
) -> SegmentCatalog:
    """
    List a topic and index its segments by from_timestamp.

    Args:
        s3_client: boto3 S3 client
        bucket: Bucket name
        topic: Topic name
        skip_invalid: Log and skip objects whose names do not decode instead
            of failing the whole build

    Raises:
        SegmentDecodeError: First object name that fails to decode, unless
            skip_invalid is set
    """
    segments: List[SegmentDescriptor] = []
    skipped = 0

    with log_context(bucket=bucket, topic=topic):
        with CATALOG_BUILD_DURATION.labels(topic=topic).time():
            for ref in list_topic_segments(s3_client, bucket, topic):
                try:
                    segment = decode_segment(ref)
                except SegmentDecodeError as exc:
                    SEGMENT_DECODE_FAILURES.labels(
                        topic=topic, error=type(exc).__name__
                    ).inc()
                    if not skip_invalid:
                        logger.error("segment_decode_failed", key=ref.key, error=str(exc))
                        raise
                    skipped += 1
                    logger.warning("segment_decode_skipped", key=ref.key, error=str(exc))
                    continue
                SEGMENTS_DECODED.labels(topic=topic).inc()
                segments.append(segment)

            catalog = SegmentCatalog(segments)

        logger.info("catalog_built", segments=len(catalog), skipped=skipped)
    return catalog


__all__ = ["SegmentCatalog", "build_catalog"]
