"""Exception hierarchy for segment naming, cataloging and upload."""

from __future__ import annotations

from typing import Optional


class SegmentStoreError(Exception):
    """Base class for all segment store errors."""


class SegmentDecodeError(SegmentStoreError, ValueError):
    """Object metadata could not be decoded from its name."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class InvalidObjectKey(SegmentDecodeError):
    """Key does not have the <topic>/<filename> structure."""


class InvalidSegmentFilename(SegmentDecodeError):
    """Filename does not match <from>_<count>_<lastBlockOffset>_<position>.avro."""


class IntegerOverflow(InvalidSegmentFilename):
    """Numeric filename field exceeds the signed 64-bit range."""


class MalformedTimestamp(SegmentDecodeError):
    """Timestamp text is not in the canonical format."""


class CopyIOError(SegmentStoreError):
    """Local read or remote write failed while copying a segment."""


__all__ = [
    "SegmentStoreError",
    "SegmentDecodeError",
    "InvalidObjectKey",
    "InvalidSegmentFilename",
    "IntegerOverflow",
    "MalformedTimestamp",
    "CopyIOError",
]
