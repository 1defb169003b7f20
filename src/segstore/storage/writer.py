"""
Scoped byte sink that streams into a new S3 object.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from segstore.core.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONTENT_TYPE,
    MIN_MULTIPART_CHUNK_SIZE,
)
from segstore.utils.logging import get_logger

logger = get_logger(__name__)


class S3SegmentWriter:
    """
    Write-only stream to ``s3://bucket/key``.

    Bytes are buffered and shipped as multipart upload parts of
    ``chunk_size`` bytes. An object that never grows past one chunk is stored
    with a single PutObject instead. Leaving the ``with`` block normally
    completes the object; leaving it with an exception aborts the upload so no
    partial object becomes visible.

    Usage:
        with S3SegmentWriter(s3, "bucket", "orders/...avro") as sink:
            sink.write(b"...")
    """

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        key: str,
        content_type: str = DEFAULT_CONTENT_TYPE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < MIN_MULTIPART_CHUNK_SIZE:
            raise ValueError(
                f"chunk_size must be at least {MIN_MULTIPART_CHUNK_SIZE} bytes"
            )
        self.s3 = s3_client
        self.bucket = bucket
        self.key = key
        self.content_type = content_type
        self.chunk_size = chunk_size

        self.bytes_written = 0
        self.closed = False
        self._buffer = bytearray()
        self._upload_id: Optional[str] = None
        self._parts: List[Dict[str, Any]] = []

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError(f"Writer for {self.key} is closed")
        self._buffer += data
        self.bytes_written += len(data)
        # Keep at least one byte buffered so the final part is never empty
        while len(self._buffer) > self.chunk_size:
            self._upload_part(bytes(self._buffer[: self.chunk_size]))
            del self._buffer[: self.chunk_size]
        return len(data)

    def _upload_part(self, data: bytes) -> None:
        if self._upload_id is None:
            resp = self.s3.create_multipart_upload(
                Bucket=self.bucket, Key=self.key, ContentType=self.content_type
            )
            self._upload_id = resp["UploadId"]

        part_number = len(self._parts) + 1
        resp = self.s3.upload_part(
            Bucket=self.bucket,
            Key=self.key,
            UploadId=self._upload_id,
            PartNumber=part_number,
            Body=data,
        )
        self._parts.append({"ETag": resp["ETag"], "PartNumber": part_number})

    def _finalize(self) -> None:
        if self._upload_id is None:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=self.key,
                Body=bytes(self._buffer),
                ContentType=self.content_type,
            )
        else:
            self._upload_part(bytes(self._buffer))
            self.s3.complete_multipart_upload(
                Bucket=self.bucket,
                Key=self.key,
                UploadId=self._upload_id,
                MultipartUpload={"Parts": self._parts},
            )
        self._buffer.clear()

    def _abort_upload(self) -> None:
        self._buffer.clear()
        if self._upload_id is None:
            return
        try:
            self.s3.abort_multipart_upload(
                Bucket=self.bucket, Key=self.key, UploadId=self._upload_id
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning(
                "multipart_abort_failed",
                bucket=self.bucket,
                key=self.key,
                upload_id=self._upload_id,
                error=str(exc),
            )

    def close(self) -> None:
        """Finalize the object. Subsequent calls are no-ops."""
        if self.closed:
            return
        self.closed = True
        try:
            self._finalize()
        except Exception:
            self._abort_upload()
            raise

    def abort(self) -> None:
        """Discard everything written. Subsequent calls are no-ops."""
        if self.closed:
            return
        self.closed = True
        self._abort_upload()

    def __enter__(self) -> "S3SegmentWriter":
        return self

    def __exit__(self, exc_type: Optional[type[BaseException]], exc: Optional[BaseException], tb: Any) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()

    def __repr__(self) -> str:
        return (
            f"S3SegmentWriter(bucket={self.bucket!r}, key={self.key!r}, "
            f"written={self.bytes_written}, closed={self.closed})"
        )


__all__ = ["S3SegmentWriter"]
