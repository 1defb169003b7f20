from pathlib import Path

import pytest
from pydantic import ValidationError

from segstore.config.config import SegmentStoreConfig, create_s3_client


@pytest.mark.unit
def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEGSTORE_BUCKET", "streams")
    for name in (
        "SEGSTORE_REGION",
        "SEGSTORE_ENDPOINT_URL",
        "SEGSTORE_CHUNK_SIZE",
        "SEGSTORE_CONTENT_TYPE",
        "SEGSTORE_SKIP_INVALID",
        "SEGSTORE_LOG_LEVEL",
        "SEGSTORE_JSON_LOGS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = SegmentStoreConfig.from_env()

    assert config.bucket == "streams"
    assert config.region is None
    assert config.endpoint_url is None
    assert config.chunk_size == 8 * 1024 * 1024
    assert config.content_type == "text/plain"
    assert config.skip_invalid is False
    assert config.json_logs is True


@pytest.mark.unit
def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEGSTORE_BUCKET", "streams")
    monkeypatch.setenv("SEGSTORE_REGION", "eu-central-1")
    monkeypatch.setenv("SEGSTORE_ENDPOINT_URL", "http://minio:9000")
    monkeypatch.setenv("SEGSTORE_CHUNK_SIZE", str(16 * 1024 * 1024))
    monkeypatch.setenv("SEGSTORE_SKIP_INVALID", "TRUE")
    monkeypatch.setenv("SEGSTORE_JSON_LOGS", "false")

    config = SegmentStoreConfig.from_env()

    assert config.region == "eu-central-1"
    assert config.endpoint_url == "http://minio:9000"
    assert config.chunk_size == 16 * 1024 * 1024
    assert config.skip_invalid is True
    assert config.json_logs is False


@pytest.mark.unit
def test_from_env_requires_bucket(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEGSTORE_BUCKET", raising=False)
    with pytest.raises(RuntimeError, match="SEGSTORE_BUCKET"):
        SegmentStoreConfig.from_env()


@pytest.mark.unit
def test_chunk_size_below_s3_minimum() -> None:
    with pytest.raises(ValidationError):
        SegmentStoreConfig(bucket="b", chunk_size=1024)


@pytest.mark.unit
def test_from_yaml_section(tmp_path: Path) -> None:
    path = tmp_path / "segstore.yaml"
    path.write_text(
        "segstore:\n"
        "  bucket: streams\n"
        "  region: us-west-2\n"
        "  skip_invalid: true\n"
        "  log_level: DEBUG\n",
        encoding="utf-8",
    )

    config = SegmentStoreConfig.from_yaml(path)

    assert config.bucket == "streams"
    assert config.region == "us-west-2"
    assert config.skip_invalid is True
    assert config.log_level == "DEBUG"


@pytest.mark.unit
def test_from_yaml_flat(tmp_path: Path) -> None:
    path = tmp_path / "flat.yaml"
    path.write_text("bucket: flat-bucket\n", encoding="utf-8")
    assert SegmentStoreConfig.from_yaml(path).bucket == "flat-bucket"


@pytest.mark.unit
def test_from_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        SegmentStoreConfig.from_yaml(path)


@pytest.mark.unit
def test_create_s3_client(aws_credentials) -> None:
    config = SegmentStoreConfig(
        bucket="b", region="us-east-1", endpoint_url="http://localhost:9000"
    )
    client = create_s3_client(config)
    assert client.meta.endpoint_url == "http://localhost:9000"
    assert client.meta.region_name == "us-east-1"
