"""
Segment data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from segstore.core.constants import KEY_SEPARATOR
from segstore.core.timestamps import format_timestamp


@dataclass(frozen=True)
class ObjectRef:
    """
    Handle to an object in the bucket, as returned by a listing.

    Attributes:
        bucket: Bucket name
        key: Full object key (e.g. "orders/2021-01-01T00:00:00.000Z_150_48213_pos-1.avro")
        size: Content length in bytes
        etag: Entity tag without surrounding quotes
        last_modified: Last modification time reported by the store
    """

    bucket: str
    key: str
    size: int = 0
    etag: str = ""
    last_modified: Optional[datetime] = None

    @property
    def is_directory_marker(self) -> bool:
        """Zero-content pseudo-object standing for a folder."""
        return self.key.endswith(KEY_SEPARATOR)

    @classmethod
    def from_listing(cls, bucket: str, entry: Mapping[str, Any]) -> "ObjectRef":
        """Build from one ``Contents`` item of a ``list_objects_v2`` page."""
        return cls(
            bucket=bucket,
            key=entry["Key"],
            size=int(entry.get("Size", 0)),
            etag=str(entry.get("ETag", "")).strip('"'),
            last_modified=entry.get("LastModified"),
        )


@dataclass(frozen=True)
class SegmentDescriptor:
    """
    Metadata of one segment, decoded from its object name.

    Attributes:
        topic: Stream name (first key component)
        from_timestamp: Inclusive lower bound of entries, epoch milliseconds
        message_count: Number of entries in the segment
        last_block_offset: Offset of the last internal block
        first_position: Position of the first entry, kept verbatim
        object_ref: Handle to the stored object
    """

    topic: str
    from_timestamp: int
    message_count: int
    last_block_offset: int
    first_position: str
    object_ref: ObjectRef

    @property
    def key(self) -> str:
        return self.object_ref.key

    @property
    def size(self) -> int:
        return self.object_ref.size

    def __repr__(self) -> str:
        return (
            f"SegmentDescriptor(topic={self.topic!r}, "
            f"from={format_timestamp(self.from_timestamp)}, "
            f"count={self.message_count}, "
            f"position={self.first_position!r})"
        )


__all__ = ["ObjectRef", "SegmentDescriptor"]
