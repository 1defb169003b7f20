"""Command line access to topic segments."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import click

from segstore.config.config import SegmentStoreConfig, create_s3_client
from segstore.core.errors import SegmentStoreError
from segstore.core.timestamps import format_timestamp, parse_timestamp
from segstore.storage.backend import S3SegmentStorage
from segstore.utils.logging import configure_logging
from segstore.utils.sizes import human_readable_byte_count


def _load_config(config_path: Optional[Path], bucket: Optional[str]) -> SegmentStoreConfig:
    if config_path is not None:
        config = SegmentStoreConfig.from_yaml(config_path)
    elif os.getenv("SEGSTORE_BUCKET"):
        config = SegmentStoreConfig.from_env()
    elif bucket:
        config = SegmentStoreConfig(bucket=bucket)
    else:
        raise click.UsageError("Bucket not configured: pass --bucket, --config or set SEGSTORE_BUCKET")

    if bucket:
        config = config.model_copy(update={"bucket": bucket})
    return config


def _parse_time_arg(value: str) -> int:
    """Accept epoch milliseconds or canonical timestamp text."""
    if value.lstrip("-").isdigit():
        return int(value)
    return parse_timestamp(value)


def _storage(ctx: click.Context) -> S3SegmentStorage:
    config: SegmentStoreConfig = ctx.obj["config"]
    s3_client: Any = ctx.obj.get("s3_client") or create_s3_client(config)
    return S3SegmentStorage(
        s3_client,
        config.bucket,
        chunk_size=config.chunk_size,
        content_type=config.content_type,
    )


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option("--bucket", help="S3 bucket (overrides config)")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], bucket: Optional[str]) -> None:
    """Inspect and upload topic segments stored in S3."""
    ctx.ensure_object(dict)
    config = _load_config(config_path, bucket)
    configure_logging(config)
    ctx.obj["config"] = config


@cli.command("list")
@click.argument("topic")
@click.option("--skip-invalid", is_flag=True, help="Skip objects with undecodable names")
@click.option("--descending", is_flag=True, help="Newest segment first")
@click.option("--si", is_flag=True, help="Use SI (1000-based) size units")
@click.pass_context
def list_segments(ctx: click.Context, topic: str, skip_invalid: bool, descending: bool, si: bool) -> None:
    """List the segments of TOPIC ordered by start time."""
    storage = _storage(ctx)
    skip_invalid = skip_invalid or ctx.obj["config"].skip_invalid
    try:
        catalog = storage.build_catalog(topic, skip_invalid=skip_invalid)
    except (SegmentStoreError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    segments = catalog.descending() if descending else iter(catalog)
    for segment in segments:
        click.echo(
            f"{format_timestamp(segment.from_timestamp)}  "
            f"{segment.message_count:>10}  "
            f"{human_readable_byte_count(segment.size, si):>10}  "
            f"{segment.key}"
        )
    click.echo(f"{len(catalog)} segment(s)")


@cli.command()
@click.argument("topic")
@click.argument("timestamp")
@click.pass_context
def lookup(ctx: click.Context, topic: str, timestamp: str) -> None:
    """Show the segment of TOPIC covering TIMESTAMP (ms or canonical text)."""
    storage = _storage(ctx)
    try:
        when = _parse_time_arg(timestamp)
        catalog = storage.build_catalog(topic, skip_invalid=ctx.obj["config"].skip_invalid)
    except (SegmentStoreError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    segment = catalog.floor_entry(when)
    if segment is None:
        click.echo(f"No segment of {topic} covers {timestamp}", err=True)
        ctx.exit(1)
    click.echo(segment.key)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("topic")
@click.option("--from", "from_time", required=True, help="Start time (ms or canonical text)")
@click.option("--count", type=click.IntRange(min=0), required=True, help="Number of entries")
@click.option(
    "--last-block-offset",
    type=click.IntRange(min=0),
    required=True,
    help="Offset of the last block",
)
@click.option("--position", required=True, help="Position of the first entry")
@click.pass_context
def upload(
    ctx: click.Context,
    path: Path,
    topic: str,
    from_time: str,
    count: int,
    last_block_offset: int,
    position: str,
) -> None:
    """Upload the file at PATH as a new segment of TOPIC."""
    storage = _storage(ctx)
    try:
        key = storage.upload_new_segment(
            path,
            topic,
            from_timestamp=_parse_time_arg(from_time),
            message_count=count,
            last_block_offset=last_block_offset,
            first_position=position,
        )
    except (SegmentStoreError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(key)


if __name__ == "__main__":
    cli()
