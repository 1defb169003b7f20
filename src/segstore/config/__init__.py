"""
Configuration for segstore.
"""

from .config import SegmentStoreConfig, create_s3_client

__all__ = ["SegmentStoreConfig", "create_s3_client"]
