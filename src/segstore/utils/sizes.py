"""Human-readable byte counts."""

import math


def human_readable_byte_count(num_bytes: int, si: bool = False) -> str:
    """
    Format a byte count as e.g. "1.5 MiB" (binary) or "1.6 MB" (SI).

    Args:
        num_bytes: Byte count (non-negative)
        si: Use powers of 1000 with SI prefixes instead of powers of 1024
    """
    unit = 1000 if si else 1024
    if num_bytes < unit:
        return f"{num_bytes} B"
    exp = min(int(math.log(num_bytes) / math.log(unit)), 6)
    prefix = ("kMGTPE" if si else "KMGTPE")[exp - 1] + ("" if si else "i")
    return f"{num_bytes / unit ** exp:.1f} {prefix}B"
