"""Date helpers for the time-off range queries.

Personio filters time-offs by calendar date (start_date/end_date query
parameters, no time component). An absent lower bound means "since the
beginning of time" and an absent upper bound means PERSONIO_DATE_MAX.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

QUERY_DATE_FORMAT = "%Y-%m-%d"

PERSONIO_DATE_MIN = datetime.min.replace(tzinfo=UTC)
PERSONIO_DATE_MAX = datetime(9999, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)


def format_query_date(value: date | datetime) -> str:
    """Format a date or datetime as YYYY-MM-DD, dropping any time of day."""
    # strftime does not zero-pad years below 1000 on every platform
    return date(value.year, value.month, value.day).isoformat()


def time_intersection(
    start1: datetime, end1: datetime, start2: datetime, end2: datetime
) -> timedelta:
    """Overlap of two ranges, or the gap between them as a negative duration.

    A zero result means the ranges touch at a single instant.
    """
    end_min = min(end1, end2)
    start_max = max(start1, start2)
    return end_min - start_max


__all__ = [
    "PERSONIO_DATE_MAX",
    "PERSONIO_DATE_MIN",
    "QUERY_DATE_FORMAT",
    "format_query_date",
    "time_intersection",
]
