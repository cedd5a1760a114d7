#!/usr/bin/env python3
"""
Datetime Utility Functions

Centralized timestamp parsing and window arithmetic shared by the calculators
and the command line.

Handles common patterns:
- Epoch-second strings and ISO 8601 timestamps (with or without 'Z' suffix)
- Splitting an inclusive window into weekly or calendar-month sub-windows
"""

from datetime import UTC, datetime

from delivery_metrics.domain.constants import time_constants
from delivery_metrics.domain.metrics import PeriodUnit


def parse_timestamp(value: str) -> int:
    """
    Parse an epoch-second string or an ISO 8601 timestamp to epoch seconds.

    Naive ISO timestamps are interpreted as UTC.

    Args:
        value: "1700000000", "2026-02-10T10:00:00Z", "2026-02-10T10:00:00+01:00" or "2026-02-10"

    Returns:
        Integer epoch seconds

    Raises:
        ValueError: If the value is neither an integer nor a valid ISO timestamp

    Examples:
        >>> parse_timestamp("1700000000")
        1700000000

        >>> parse_timestamp("1970-01-02T00:00:00Z")
        86400
    """
    text = value.strip()
    if text.lstrip("-").isdigit():
        return int(text)

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp: {value}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp())


def format_timestamp(epoch_seconds: int) -> str:
    """Render epoch seconds as an ISO 8601 UTC string with 'Z' suffix."""
    return datetime.fromtimestamp(epoch_seconds, UTC).isoformat().replace("+00:00", "Z")


def _next_month_start(epoch_seconds: int) -> int:
    current = datetime.fromtimestamp(epoch_seconds, UTC)
    if current.month == 12:
        boundary = datetime(current.year + 1, 1, 1, tzinfo=UTC)
    else:
        boundary = datetime(current.year, current.month + 1, 1, tzinfo=UTC)
    return int(boundary.timestamp())


def split_window(start_timestamp: int, end_timestamp: int, unit: PeriodUnit) -> list[tuple[int, int]]:
    """
    Split an inclusive window into consecutive inclusive sub-windows.

    WEEK produces 7-day chunks counted from the window start. MONTH cuts at
    UTC calendar month boundaries. The last sub-window is clipped to the
    window end. Sub-windows never overlap and together cover every second of
    the original window.

    Args:
        start_timestamp: Inclusive window start (epoch seconds)
        end_timestamp: Inclusive window end (epoch seconds)
        unit: Sub-window granularity

    Returns:
        List of (start, end) pairs; empty when start > end

    Examples:
        >>> split_window(0, 1_209_599, PeriodUnit.WEEK)
        [(0, 604799), (604800, 1209599)]
    """
    windows: list[tuple[int, int]] = []
    current = start_timestamp

    while current <= end_timestamp:
        if unit == PeriodUnit.WEEK:
            next_start = current + time_constants.SECONDS_PER_WEEK
        else:
            next_start = _next_month_start(current)

        windows.append((current, min(next_start - 1, end_timestamp)))
        current = next_start

    return windows
