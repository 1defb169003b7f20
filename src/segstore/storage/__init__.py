"""
Segment upload and bucket access.
"""

from .backend import S3SegmentStorage
from .copy import copy_file_to_sink, copy_local_file_to_segment
from .writer import S3SegmentWriter

__all__ = [
    "S3SegmentStorage",
    "S3SegmentWriter",
    "copy_file_to_sink",
    "copy_local_file_to_segment",
]
