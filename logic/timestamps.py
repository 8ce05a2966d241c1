"""Normalisation of fetched date values to epoch milliseconds."""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Any

EPOCH_ZERO = 0


def _aware(value: datetime) -> datetime:
    # Naive values are stored as UTC upstream.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _parse_string(value: str) -> int:
    text = value.strip()
    if not text:
        return EPOCH_ZERO
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return EPOCH_ZERO
    return int(_aware(parsed).timestamp() * 1000)


def to_timestamp(value: Any) -> int:
    """Return ``value`` as epoch milliseconds, or ``0`` when absent or invalid.

    Accepts datetimes, dates, ISO-8601 strings and numbers (already epoch
    milliseconds). Never raises and never returns NaN.
    """

    if value is None or isinstance(value, bool):
        return EPOCH_ZERO
    try:
        if isinstance(value, datetime):
            return int(_aware(value).timestamp() * 1000)
        if isinstance(value, date):
            return int(datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp() * 1000)
        if isinstance(value, (int, float)):
            if isinstance(value, float) and not math.isfinite(value):
                return EPOCH_ZERO
            return int(value)
        if isinstance(value, str):
            return _parse_string(value)
    except (OverflowError, OSError, ValueError):
        return EPOCH_ZERO
    return EPOCH_ZERO


__all__ = ["EPOCH_ZERO", "to_timestamp"]
