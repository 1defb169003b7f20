from unittest.mock import Mock

import pytest

from segstore.catalog.listing import list_topic_segments, topic_prefix
from segstore.core.models import ObjectRef

from conftest import TEST_BUCKET


def _paged_client(pages, fetched):
    """S3 client mock whose paginator records every page it hands out."""

    def paginate(**kwargs):
        for number, page in enumerate(pages):
            fetched.append((number, kwargs))
            yield page

    paginator = Mock()
    paginator.paginate.side_effect = paginate
    client = Mock()
    client.get_paginator.return_value = paginator
    return client


@pytest.mark.unit
def test_topic_prefix() -> None:
    assert topic_prefix("orders") == "orders/"
    with pytest.raises(ValueError):
        topic_prefix("")
    with pytest.raises(ValueError):
        topic_prefix("a/b")


@pytest.mark.unit
def test_listing_fetches_pages_lazily() -> None:
    fetched: list = []
    pages = [
        {"Contents": [{"Key": "orders/a", "Size": 1}, {"Key": "orders/b", "Size": 2}]},
        {"Contents": [{"Key": "orders/c", "Size": 3}]},
    ]
    client = _paged_client(pages, fetched)

    refs = list_topic_segments(client, "bucket", "orders")
    assert fetched == []

    first = next(refs)
    assert first == ObjectRef(bucket="bucket", key="orders/a", size=1)
    assert len(fetched) == 1
    assert fetched[0][1] == {"Bucket": "bucket", "Prefix": "orders/"}

    rest = list(refs)
    assert [r.key for r in rest] == ["orders/b", "orders/c"]
    assert len(fetched) == 2
    client.get_paginator.assert_called_once_with("list_objects_v2")


@pytest.mark.unit
def test_listing_skips_directory_markers_and_empty_pages() -> None:
    pages = [
        {"Contents": [{"Key": "orders/", "Size": 0}, {"Key": "orders/x", "Size": 5}]},
        {},
        {"Contents": [{"Key": "orders/sub/", "Size": 0}]},
    ]
    client = _paged_client(pages, [])

    refs = list(list_topic_segments(client, "bucket", "orders"))

    assert [r.key for r in refs] == ["orders/x"]


@pytest.mark.unit
def test_object_ref_from_listing_entry() -> None:
    ref = ObjectRef.from_listing("b", {"Key": "t/k", "Size": 42, "ETag": '"abc"'})
    assert ref.etag == "abc"
    assert ref.size == 42
    assert not ref.is_directory_marker
    assert ObjectRef(bucket="b", key="t/").is_directory_marker


@pytest.mark.integration
@pytest.mark.s3
def test_listing_against_s3_spans_pages(s3_client) -> None:
    for i in range(1005):
        s3_client.put_object(Bucket=TEST_BUCKET, Key=f"orders/{i:05d}", Body=b"")
    s3_client.put_object(Bucket=TEST_BUCKET, Key="orders/", Body=b"")
    s3_client.put_object(Bucket=TEST_BUCKET, Key="ordersx/00000", Body=b"")

    refs = list(list_topic_segments(s3_client, TEST_BUCKET, "orders"))

    assert len(refs) == 1005
    assert all(r.key.startswith("orders/") for r in refs)
    assert all(r.bucket == TEST_BUCKET for r in refs)
