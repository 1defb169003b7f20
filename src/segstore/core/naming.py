"""
Segment object naming.

Every segment object is named::

    <topic>/<fromTimestamp>_<count>_<lastBlockOffset>_<position>.avro

The name alone carries the segment metadata. ``count`` and
``lastBlockOffset`` are matched greedily as the first two numeric fields after
the timestamp; ``position`` takes everything else up to the ``.avro`` suffix,
underscores included. A position that itself starts with ``<digits>_<digits>_``
therefore cannot be told apart from extra numeric fields by a reader that does
not know this rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from segstore.core.constants import (
    FILENAME_PATTERN,
    KEY_SEPARATOR,
    MAX_INT64,
    MIN_INT64,
    SEGMENT_SUFFIX,
    TOPIC_AND_FILENAME_PATTERN,
)
from segstore.core.errors import (
    IntegerOverflow,
    InvalidObjectKey,
    InvalidSegmentFilename,
    MalformedTimestamp,
)
from segstore.core.models import ObjectRef, SegmentDescriptor
from segstore.core.timestamps import format_timestamp, parse_timestamp

KeyLike = Union[str, ObjectRef]


@dataclass(frozen=True)
class SegmentFilename:
    """Decoded fields of a segment filename."""

    from_timestamp: int
    message_count: int
    last_block_offset: int
    first_position: str


def _key_of(ref: KeyLike) -> str:
    return ref.key if isinstance(ref, ObjectRef) else ref


def split_topic_and_filename(key: str) -> Tuple[str, str]:
    """
    Split an object key into (topic, filename).

    Raises:
        InvalidObjectKey: If the key has no "/" or an empty topic
    """
    match = TOPIC_AND_FILENAME_PATTERN.fullmatch(key)
    if not match:
        raise InvalidObjectKey(
            f"Object key does not match <topic>/<filename>: {key!r}", key=key
        )
    return match.group("topic"), match.group("filename")


def _parse_int64(value: str, field_name: str, filename: str, key: Optional[str]) -> int:
    number = int(value)
    if number > MAX_INT64:
        raise IntegerOverflow(
            f"{field_name} out of 64-bit range in segment filename {filename!r}",
            key=key,
        )
    return number


def parse_filename(filename: str, key: Optional[str] = None) -> SegmentFilename:
    """
    Decode the four fields of a segment filename.

    Args:
        filename: Filename part of the object key
        key: Full object key, attached to errors when given

    Raises:
        InvalidSegmentFilename: If the filename does not match the pattern in full
        IntegerOverflow: If count or lastBlockOffset exceed 64-bit range
        MalformedTimestamp: If the timestamp field is not canonical
    """
    match = FILENAME_PATTERN.fullmatch(filename)
    if not match:
        raise InvalidSegmentFilename(
            f"Segment filename does not match "
            f"<from>_<count>_<lastBlockOffset>_<position>{SEGMENT_SUFFIX}: {filename!r}",
            key=key,
        )

    try:
        from_timestamp = parse_timestamp(match.group("from"))
    except MalformedTimestamp as exc:
        raise MalformedTimestamp(f"{exc} (filename={filename!r})", key=key) from exc

    return SegmentFilename(
        from_timestamp=from_timestamp,
        message_count=_parse_int64(match.group("count"), "count", filename, key),
        last_block_offset=_parse_int64(
            match.group("last_block_offset"), "lastBlockOffset", filename, key
        ),
        first_position=match.group("position"),
    )


def _filename_fields(ref: KeyLike) -> SegmentFilename:
    key = _key_of(ref)
    _, filename = split_topic_and_filename(key)
    return parse_filename(filename, key=key)


def topic_of(ref: KeyLike) -> str:
    return split_topic_and_filename(_key_of(ref))[0]


def filename_of(ref: KeyLike) -> str:
    return split_topic_and_filename(_key_of(ref))[1]


def from_timestamp_of(ref: KeyLike) -> int:
    """Lower-bound (inclusive) timestamp of the segment range."""
    return _filename_fields(ref).from_timestamp


def first_position_of(ref: KeyLike) -> str:
    """Lower-bound (inclusive) position of the segment range."""
    return _filename_fields(ref).first_position


def message_count_of(ref: KeyLike) -> int:
    """Number of entries in the segment."""
    return _filename_fields(ref).message_count


def last_block_offset_of(ref: KeyLike) -> int:
    """Offset of the last block in the segment."""
    return _filename_fields(ref).last_block_offset


def decode_segment(ref: KeyLike, bucket: str = "") -> SegmentDescriptor:
    """
    Decode a full SegmentDescriptor from an object reference or key.

    Plain key strings are wrapped in an ObjectRef for ``bucket``.
    """
    if not isinstance(ref, ObjectRef):
        ref = ObjectRef(bucket=bucket, key=ref)
    topic, filename = split_topic_and_filename(ref.key)
    fields = parse_filename(filename, key=ref.key)
    return SegmentDescriptor(
        topic=topic,
        from_timestamp=fields.from_timestamp,
        message_count=fields.message_count,
        last_block_offset=fields.last_block_offset,
        first_position=fields.first_position,
        object_ref=ref,
    )


def validate_topic(topic: str) -> str:
    """Return topic unchanged, or raise ValueError if it cannot be a key prefix."""
    if not topic:
        raise ValueError("topic must be non-empty")
    if KEY_SEPARATOR in topic:
        raise ValueError(f"topic must not contain {KEY_SEPARATOR!r}: {topic!r}")
    return topic


def _validate_count(value: int, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field_name} must be an int")
    if not (0 <= value <= MAX_INT64):
        raise ValueError(f"{field_name} must be in [0, {MAX_INT64}]")


def format_filename(
    from_timestamp: int,
    message_count: int,
    last_block_offset: int,
    first_position: str,
) -> str:
    """Encode segment fields into a filename that decodes back to the same fields."""
    if isinstance(from_timestamp, bool) or not isinstance(from_timestamp, int):
        raise TypeError("from_timestamp must be an int")
    if not (MIN_INT64 <= from_timestamp <= MAX_INT64):
        raise ValueError(f"from_timestamp must be in [{MIN_INT64}, {MAX_INT64}]")
    _validate_count(message_count, "message_count")
    _validate_count(last_block_offset, "last_block_offset")
    if not first_position:
        raise ValueError("first_position must be non-empty")
    if "\n" in first_position:
        raise ValueError("first_position must not contain newlines")

    return (
        f"{format_timestamp(from_timestamp)}_{message_count}_"
        f"{last_block_offset}_{first_position}{SEGMENT_SUFFIX}"
    )


def format_segment_key(
    topic: str,
    from_timestamp: int,
    message_count: int,
    last_block_offset: int,
    first_position: str,
) -> str:
    """Encode a full object key ``<topic>/<filename>``."""
    validate_topic(topic)
    filename = format_filename(
        from_timestamp, message_count, last_block_offset, first_position
    )
    return f"{topic}{KEY_SEPARATOR}{filename}"


__all__ = [
    "SegmentFilename",
    "split_topic_and_filename",
    "parse_filename",
    "topic_of",
    "filename_of",
    "from_timestamp_of",
    "first_position_of",
    "message_count_of",
    "last_block_offset_of",
    "decode_segment",
    "validate_topic",
    "format_filename",
    "format_segment_key",
]
