import sys
from pathlib import Path
from typing import Callable, Iterator

import boto3
import pytest
from moto import mock_aws

# Ensure src/ is on sys.path for local test runs without installation
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from segstore.core.naming import format_segment_key  # noqa: E402

TEST_BUCKET = "test-segments"


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that require external services or are slower (S3, etc.)",
    )
    config.addinivalue_line("markers", "s3: tests that interact with S3 or moto S3")
    config.addinivalue_line("markers", "slow: slow-running tests")


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fake credentials so boto3 never reaches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials) -> Iterator:
    """Moto-backed S3 client with an empty test bucket."""
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=TEST_BUCKET)
        yield s3


@pytest.fixture
def put_segment(s3_client) -> Callable[..., str]:
    """Store a segment object named from its metadata and return its key."""

    def _put(
        topic: str,
        from_timestamp: int,
        count: int = 1,
        last_block_offset: int = 0,
        position: str = "pos-0",
        body: bytes = b"data",
    ) -> str:
        key = format_segment_key(topic, from_timestamp, count, last_block_offset, position)
        s3_client.put_object(Bucket=TEST_BUCKET, Key=key, Body=body)
        return key

    return _put
