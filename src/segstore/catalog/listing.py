"""Lazy listing of a topic's segment objects."""

from __future__ import annotations

from typing import Any, Iterator

from segstore.core.constants import KEY_SEPARATOR
from segstore.core.models import ObjectRef
from segstore.core.naming import validate_topic
from segstore.monitoring.metrics import SEGMENTS_LISTED
from segstore.utils.logging import get_logger

logger = get_logger(__name__)


def topic_prefix(topic: str) -> str:
    return f"{validate_topic(topic)}{KEY_SEPARATOR}"


def list_topic_segments(s3_client: Any, bucket: str, topic: str) -> Iterator[ObjectRef]:
    """
    Yield every object under ``<topic>/`` except directory markers.

    Pages are requested from S3 only as the generator is consumed, so the
    result is forward-only and reflects a single pass over the listing.
    Materialize it (e.g. ``list(...)``) before iterating more than once.

    Args:
        s3_client: boto3 S3 client
        bucket: Bucket name
        topic: Topic name (non-empty, no "/")
    """
    prefix = topic_prefix(topic)
    paginator = s3_client.get_paginator("list_objects_v2")

    for page_number, page in enumerate(paginator.paginate(Bucket=bucket, Prefix=prefix)):
        contents = page.get("Contents", [])
        logger.debug(
            "listing_page_fetched",
            bucket=bucket,
            prefix=prefix,
            page=page_number,
            objects=len(contents),
        )
        for entry in contents:
            ref = ObjectRef.from_listing(bucket, entry)
            if ref.is_directory_marker:
                continue
            SEGMENTS_LISTED.labels(topic=topic).inc()
            yield ref


__all__ = ["list_topic_segments", "topic_prefix"]
