"""Tests for CLI commands."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from segstore.cli import main as cli_main
from segstore.cli.main import _parse_time_arg, cli

from conftest import TEST_BUCKET

runner = CliRunner()

T1 = 1609459200000  # 2021-01-01T00:00:00.000Z
T2 = 1609545600000  # 2021-01-02T00:00:00.000Z


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_main, "configure_logging", lambda *_args, **_kwargs: None)
    monkeypatch.delenv("SEGSTORE_BUCKET", raising=False)


def _invoke(s3_client, *args: str):
    return runner.invoke(cli, ["--bucket", TEST_BUCKET, *args], obj={"s3_client": s3_client})


@pytest.mark.unit
def test_parse_time_arg() -> None:
    assert _parse_time_arg("1609459200000") == T1
    assert _parse_time_arg("-1") == -1
    assert _parse_time_arg("2021-01-01T00:00:00.000Z") == T1


@pytest.mark.unit
def test_missing_bucket_is_usage_error() -> None:
    result = runner.invoke(cli, ["list", "orders"])
    assert result.exit_code == 2
    assert "Bucket not configured" in result.output


@pytest.mark.integration
@pytest.mark.s3
def test_list(s3_client, put_segment) -> None:
    key2 = put_segment("orders", T2, count=20, position="b")
    key1 = put_segment("orders", T1, count=10, position="a")

    result = _invoke(s3_client, "list", "orders")

    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.startswith("2021-")]
    assert [line.split()[-1] for line in lines] == [key1, key2]
    assert "2 segment(s)" in result.output


@pytest.mark.integration
@pytest.mark.s3
def test_list_descending(s3_client, put_segment) -> None:
    key2 = put_segment("orders", T2)
    key1 = put_segment("orders", T1)

    result = _invoke(s3_client, "list", "orders", "--descending")

    assert result.exit_code == 0, result.output
    keys = [line.split()[-1] for line in result.output.splitlines() if line.startswith("2021-")]
    assert keys == [key2, key1]


@pytest.mark.integration
@pytest.mark.s3
def test_list_invalid_name_fails(s3_client, put_segment) -> None:
    put_segment("orders", T1)
    s3_client.put_object(Bucket=TEST_BUCKET, Key="orders/not-a-valid-name.txt", Body=b"x")

    result = _invoke(s3_client, "list", "orders")
    assert result.exit_code == 1
    assert "not-a-valid-name.txt" in result.output

    result = _invoke(s3_client, "list", "orders", "--skip-invalid")
    assert result.exit_code == 0, result.output
    assert "1 segment(s)" in result.output


@pytest.mark.integration
@pytest.mark.s3
def test_lookup(s3_client, put_segment) -> None:
    key1 = put_segment("orders", T1)
    key2 = put_segment("orders", T2)

    result = _invoke(s3_client, "lookup", "orders", "2021-01-01T12:00:00.000Z")
    assert result.exit_code == 0, result.output
    assert key1 in result.output

    result = _invoke(s3_client, "lookup", "orders", str(T2 + 1))
    assert result.exit_code == 0, result.output
    assert key2 in result.output

    result = _invoke(s3_client, "lookup", "orders", str(T1 - 1))
    assert result.exit_code == 1
    assert "No segment" in result.output


@pytest.mark.integration
@pytest.mark.s3
def test_lookup_bad_timestamp(s3_client) -> None:
    result = _invoke(s3_client, "lookup", "orders", "yesterday")
    assert result.exit_code == 1
    assert "canonical format" in result.output


@pytest.mark.integration
@pytest.mark.s3
def test_upload(s3_client, tmp_path: Path) -> None:
    path = tmp_path / "segment.avro"
    path.write_bytes(b"payload")

    result = _invoke(
        s3_client,
        "upload",
        str(path),
        "orders",
        "--from",
        "2021-01-01T00:00:00.000Z",
        "--count",
        "150",
        "--last-block-offset",
        "48213",
        "--position",
        "pos-000042",
    )

    assert result.exit_code == 0, result.output
    key = "orders/2021-01-01T00:00:00.000Z_150_48213_pos-000042.avro"
    assert key in result.output
    head = s3_client.head_object(Bucket=TEST_BUCKET, Key=key)
    assert head["ContentLength"] == len(b"payload")


@pytest.mark.integration
@pytest.mark.s3
def test_config_file(s3_client, put_segment, tmp_path: Path) -> None:
    key = put_segment("orders", T1)
    config_path = tmp_path / "segstore.yaml"
    config_path.write_text(f"segstore:\n  bucket: {TEST_BUCKET}\n", encoding="utf-8")

    result = runner.invoke(
        cli, ["--config", str(config_path), "list", "orders"], obj={"s3_client": s3_client}
    )

    assert result.exit_code == 0, result.output
    assert key in result.output
