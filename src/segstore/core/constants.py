"""
Segment naming constants, limits and transfer defaults.
"""

import re

# Object key: <topic>/<filename>
TOPIC_AND_FILENAME_PATTERN = re.compile(r"(?P<topic>[^/]+)/(?P<filename>.+)")

# Filename: <from>_<count>_<lastBlockOffset>_<position>.avro
SEGMENT_SUFFIX = ".avro"
FILENAME_PATTERN = re.compile(
    r"(?P<from>[^_]+)_(?P<count>[0-9]+)_(?P<last_block_offset>[0-9]+)_(?P<position>.+)\.avro"
)

# Numeric fields must fit a signed 64-bit integer
MAX_INT64 = (1 << 63) - 1
MIN_INT64 = -(1 << 63)

# Separator between topic and filename in object keys
KEY_SEPARATOR = "/"

# Upload defaults
DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024  # 8 MiB
MIN_MULTIPART_CHUNK_SIZE = 5 * 1024 * 1024  # S3 minimum part size (except last)
