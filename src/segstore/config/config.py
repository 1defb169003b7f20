"""Configuration management."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import boto3
import yaml
from pydantic import BaseModel, Field

from segstore.core.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CONTENT_TYPE,
    MIN_MULTIPART_CHUNK_SIZE,
)


class SegmentStoreConfig(BaseModel):
    """Segment store configuration."""

    bucket: str = Field(..., description="S3 bucket holding topic segments")
    region: Optional[str] = Field(None, description="AWS region of the bucket")
    endpoint_url: Optional[str] = Field(
        None,
        description="Custom S3 endpoint (MinIO, HCP, localstack)",
    )
    chunk_size: int = Field(
        DEFAULT_CHUNK_SIZE,
        ge=MIN_MULTIPART_CHUNK_SIZE,
        description="Upload chunk size in bytes",
    )
    content_type: str = Field(
        DEFAULT_CONTENT_TYPE,
        description="Content type of uploaded segments",
    )
    skip_invalid: bool = Field(
        False,
        description="Skip objects with undecodable names when building catalogs",
    )
    log_level: str = Field("INFO", description="Log level")
    json_logs: bool = Field(True, description="Render logs as JSON")

    @classmethod
    def from_env(cls) -> "SegmentStoreConfig":
        bucket = os.getenv("SEGSTORE_BUCKET")
        if not bucket:
            raise RuntimeError("SEGSTORE_BUCKET must be set")

        return cls(
            bucket=bucket,
            region=os.getenv("SEGSTORE_REGION") or None,
            endpoint_url=os.getenv("SEGSTORE_ENDPOINT_URL") or None,
            chunk_size=int(os.getenv("SEGSTORE_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))),
            content_type=os.getenv("SEGSTORE_CONTENT_TYPE", DEFAULT_CONTENT_TYPE),
            skip_invalid=os.getenv("SEGSTORE_SKIP_INVALID", "false").lower() == "true",
            log_level=os.getenv("SEGSTORE_LOG_LEVEL", "INFO"),
            json_logs=os.getenv("SEGSTORE_JSON_LOGS", "true").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SegmentStoreConfig":
        with open(path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        # Allow the settings to sit under a top-level "segstore" section
        data = raw.get("segstore", raw)
        return cls(**data)


def create_s3_client(config: SegmentStoreConfig) -> Any:
    """Build a boto3 S3 client for the configured region/endpoint."""
    return boto3.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.endpoint_url,
    )


__all__ = ["SegmentStoreConfig", "create_s3_client"]
