"""Copy local files into the bucket as segment objects."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from segstore.core.constants import DEFAULT_CHUNK_SIZE, DEFAULT_CONTENT_TYPE
from segstore.core.errors import CopyIOError
from segstore.monitoring.metrics import BYTES_UPLOADED, SEGMENTS_UPLOADED
from segstore.storage.writer import S3SegmentWriter
from segstore.utils.logging import get_logger
from segstore.utils.sizes import human_readable_byte_count

logger = get_logger(__name__)


class ByteSink(Protocol):
    def write(self, data: bytes) -> int:
        """Accept a chunk of bytes."""


def copy_file_to_sink(
    path: str | Path,
    sink: ByteSink,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Stream a local file into ``sink`` in chunks of at most ``chunk_size``.

    The file size is taken when the file is opened; reading continues until
    that many bytes have been handed to the sink. Short reads are fine.

    Returns:
        Number of bytes transferred

    Raises:
        CopyIOError: If the file ends before its initial size was reached
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    with open(path, "rb") as source:
        size = os.fstat(source.fileno()).st_size
        transferred = 0
        while transferred < size:
            chunk = source.read(min(chunk_size, size - transferred))
            if not chunk:
                raise CopyIOError(
                    f"Unexpected end of file {path} at byte {transferred} of {size}"
                )
            sink.write(chunk)
            transferred += len(chunk)
    return transferred


def copy_local_file_to_segment(
    s3_client: Any,
    bucket: str,
    path: str | Path,
    key: str,
    content_type: str = DEFAULT_CONTENT_TYPE,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Upload a local file to ``s3://bucket/key``.

    Returns:
        Size of the uploaded object in bytes

    Raises:
        CopyIOError: Local read or remote write failed; the original
            exception is chained as ``__cause__``
    """
    try:
        with S3SegmentWriter(
            s3_client, bucket, key, content_type=content_type, chunk_size=chunk_size
        ) as sink:
            size = copy_file_to_sink(path, sink, chunk_size=chunk_size)
    except (OSError, BotoCoreError, ClientError) as exc:
        logger.error(
            "segment_upload_failed", bucket=bucket, key=key, path=str(path), error=str(exc)
        )
        raise CopyIOError(f"Failed to copy {path} to s3://{bucket}/{key}: {exc}") from exc

    SEGMENTS_UPLOADED.inc()
    BYTES_UPLOADED.inc(size)
    logger.info(
        "segment_uploaded",
        bucket=bucket,
        key=key,
        path=str(path),
        size_bytes=size,
        size=human_readable_byte_count(size),
    )
    return size


__all__ = ["ByteSink", "copy_file_to_sink", "copy_local_file_to_segment"]
