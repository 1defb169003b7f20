"""Segment storage backend bound to one S3 bucket."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

from segstore.catalog.catalog import SegmentCatalog, build_catalog
from segstore.catalog.listing import list_topic_segments
from segstore.core.constants import DEFAULT_CHUNK_SIZE, DEFAULT_CONTENT_TYPE
from segstore.core.models import ObjectRef
from segstore.core.naming import format_segment_key
from segstore.storage.copy import copy_local_file_to_segment


class S3SegmentStorage:
    """Thin wrapper around a boto3 S3 client for one bucket of topics."""

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        self.s3 = s3_client
        self.bucket = bucket
        self.chunk_size = chunk_size
        self.content_type = content_type

    def list_segments(self, topic: str) -> Iterator[ObjectRef]:
        """Lazily list segment objects of a topic."""
        return list_topic_segments(self.s3, self.bucket, topic)

    def build_catalog(self, topic: str, skip_invalid: bool = False) -> SegmentCatalog:
        """Build a fresh catalog snapshot of a topic."""
        return build_catalog(self.s3, self.bucket, topic, skip_invalid=skip_invalid)

    def upload_segment(self, local_path: str | Path, key: str) -> int:
        """Upload a local file under an explicit key."""
        return copy_local_file_to_segment(
            self.s3,
            self.bucket,
            local_path,
            key,
            content_type=self.content_type,
            chunk_size=self.chunk_size,
        )

    def upload_new_segment(
        self,
        local_path: str | Path,
        topic: str,
        from_timestamp: int,
        message_count: int,
        last_block_offset: int,
        first_position: str,
    ) -> str:
        """Name a segment from its metadata, upload it and return its key."""
        key = format_segment_key(
            topic, from_timestamp, message_count, last_block_offset, first_position
        )
        self.upload_segment(local_path, key)
        return key

    def __repr__(self) -> str:
        return f"S3SegmentStorage(bucket={self.bucket!r})"
