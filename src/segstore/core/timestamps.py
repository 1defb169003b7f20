"""
Canonical timestamp text used inside segment names.

Timestamps are epoch milliseconds rendered in UTC as
``YYYY-MM-DDTHH:MM:SS.mmmZ``. Years outside 0000-9999 carry an explicit sign
and at least four digits (``+10000-01-01T00:00:00.000Z``), so every signed
64-bit millisecond value has exactly one rendering. Only that exact shape is
accepted back.

Calendar arithmetic is proleptic Gregorian on plain integers rather than
``datetime``, whose range stops at year 9999.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from segstore.core.constants import MAX_INT64, MIN_INT64
from segstore.core.errors import MalformedTimestamp

MILLIS_PER_DAY = 86_400_000
DAYS_PER_ERA = 146_097  # 400 Gregorian years
EPOCH_DAY_OFFSET = 719_468  # days from 0000-03-01 to 1970-01-01


def civil_from_days(days: int) -> tuple[int, int, int]:
    """(year, month, day) of a day count relative to 1970-01-01."""
    z = days + EPOCH_DAY_OFFSET
    era = z // DAYS_PER_ERA
    doe = z - era * DAYS_PER_ERA
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def days_from_civil(year: int, month: int, day: int) -> int:
    """Day count relative to 1970-01-01 of a valid (year, month, day)."""
    if month <= 2:
        year -= 1
    era = year // 400
    yoe = year - era * 400
    doy = (153 * ((month + 9) % 12) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * DAYS_PER_ERA + doe - EPOCH_DAY_OFFSET


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        leap = year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
        return 29 if leap else 28
    return 30 if month in (4, 6, 9, 11) else 31


@dataclass(frozen=True)
class TimestampFormat:
    """
    Immutable description of the canonical timestamp text.

    Attributes:
        pattern: Regex the whole text must match (groups: year, month, day,
            hour, minute, second, millis)
        offset_marker: Literal UTC offset designator
    """

    pattern: re.Pattern[str] = field(
        default=re.compile(
            r"([+-][0-9]{4,}|[0-9]{4})-([0-9]{2})-([0-9]{2})"
            r"T([0-9]{2}):([0-9]{2}):([0-9]{2})\.([0-9]{3})Z"
        )
    )
    offset_marker: str = "Z"

    @staticmethod
    def render_year(year: int) -> str:
        if 0 <= year <= 9999:
            return f"{year:04d}"
        return f"{'+' if year > 0 else '-'}{abs(year):04d}"

    def render(
        self, year: int, month: int, day: int, hour: int, minute: int, second: int, millis: int
    ) -> str:
        return (
            f"{self.render_year(year)}-{month:02d}-{day:02d}"
            f"T{hour:02d}:{minute:02d}:{second:02d}.{millis:03d}{self.offset_marker}"
        )


CANONICAL_FORMAT = TimestampFormat()


def format_timestamp(timestamp_ms: int) -> str:
    """Convert epoch milliseconds to canonical UTC text."""
    days, millis_of_day = divmod(timestamp_ms, MILLIS_PER_DAY)
    seconds_of_day, millis = divmod(millis_of_day, 1000)
    minutes_of_day, second = divmod(seconds_of_day, 60)
    hour, minute = divmod(minutes_of_day, 60)
    year, month, day = civil_from_days(days)
    return CANONICAL_FORMAT.render(year, month, day, hour, minute, second, millis)


def parse_timestamp(text: str) -> int:
    """
    Parse canonical UTC text back to epoch milliseconds.

    Raises:
        MalformedTimestamp: If text is not in the canonical format, holds
            out-of-range calendar fields, or lies outside the 64-bit range
    """
    if not isinstance(text, str):
        raise MalformedTimestamp(f"Timestamp must be a string, got {type(text).__name__}")

    match = CANONICAL_FORMAT.pattern.fullmatch(text)
    if not match:
        raise MalformedTimestamp(f"Timestamp does not match canonical format: {text!r}")

    year_text = match.group(1)
    year, month, day, hour, minute, second, millis = (int(g) for g in match.groups())
    # Signed years only outside 0000-9999, no extra leading zeros
    if CANONICAL_FORMAT.render_year(year) != year_text:
        raise MalformedTimestamp(f"Non-canonical year in timestamp {text!r}")
    if not 1 <= month <= 12:
        raise MalformedTimestamp(f"Invalid month in timestamp {text!r}")
    if not 1 <= day <= days_in_month(year, month):
        raise MalformedTimestamp(f"Invalid day in timestamp {text!r}")
    if hour > 23 or minute > 59 or second > 59:
        raise MalformedTimestamp(f"Invalid time of day in timestamp {text!r}")

    millis_of_day = ((hour * 60 + minute) * 60 + second) * 1000 + millis
    result = days_from_civil(year, month, day) * MILLIS_PER_DAY + millis_of_day
    if not MIN_INT64 <= result <= MAX_INT64:
        raise MalformedTimestamp(f"Timestamp outside 64-bit millisecond range: {text!r}")
    return result


__all__ = [
    "CANONICAL_FORMAT",
    "TimestampFormat",
    "civil_from_days",
    "days_from_civil",
    "format_timestamp",
    "parse_timestamp",
]
