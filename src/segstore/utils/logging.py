"""
structlog setup for segstore.

Log events name segments by their raw millisecond keys (``from_timestamp``);
``add_segment_time`` adds the canonical text next to each so log lines can be
matched against object names directly.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, MutableMapping, cast

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from segstore.core.timestamps import format_timestamp

if TYPE_CHECKING:
    from segstore.config.config import SegmentStoreConfig

try:
    from segstore import __version__ as SEGSTORE_VERSION
except ImportError:
    SEGSTORE_VERSION = "unknown"

# Event keys holding epoch milliseconds -> key for their canonical text
TIMESTAMP_FIELDS = {
    "from_timestamp": "from_time",
}


def add_segment_time(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Render segment timestamps in the same text used by object keys."""
    for millis_key, text_key in TIMESTAMP_FIELDS.items():
        value = event_dict.get(millis_key)
        if isinstance(value, int) and not isinstance(value, bool):
            event_dict.setdefault(text_key, format_timestamp(value))
    return event_dict


def _level_number(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {name}")
    return level


def configure_logging(config: "SegmentStoreConfig") -> None:
    """Route structlog through stdlib logging using the configured level and renderer."""
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_segment_time,
    ]
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if config.json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )
    logging.basicConfig(level=_level_number(config.log_level), handlers=[handler], force=True)


def get_logger(name: str) -> BoundLogger:
    """Logger bound with the package version and the emitting component."""
    component = name.rsplit(".", 1)[-1]
    return cast(
        BoundLogger,
        structlog.get_logger(name).bind(
            component=component,
            version=os.getenv("APP_VERSION", SEGSTORE_VERSION),
        ),
    )


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Tag every event in the block (e.g. bucket and topic of a catalog build)."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
