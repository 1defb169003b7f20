"""
Utility helpers for segstore.
"""

from .logging import configure_logging, get_logger, log_context
from .sizes import human_readable_byte_count

__all__ = ["configure_logging", "get_logger", "log_context", "human_readable_byte_count"]
