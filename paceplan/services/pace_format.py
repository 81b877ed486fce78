"""Parsing and formatting of race times and per-kilometre paces.

Race times are ``HH:MM:SS`` (or ``MM:SS``) strings, paces are ``M:SS`` per km.
Every helper here has a defined fallback for malformed input: time strings
degrade component-wise to 0, pace strings degrade to ``""`` / 0 seconds.
"""

from __future__ import annotations

import re
from typing import Any

NOT_AVAILABLE = "N/A"

_PACE_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_PACE_SUFFIX_RE = re.compile(r"\s*(min/km|/km)$", re.I)


def _component(raw: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return value if value == value else 0.0  # NaN


def time_to_seconds(time: Any) -> float:
    """Convert ``hh:mm:ss`` or ``mm:ss`` to seconds; unparsable parts count as 0."""
    if not isinstance(time, str) or not time.strip():
        return 0.0
    parts = [_component(p) for p in time.strip().split(":")]
    if len(parts) == 3:
        h, m, s = parts
        return h * 3600 + m * 60 + s
    if len(parts) == 2:
        m, s = parts
        return m * 60 + s
    return 0.0


def format_duration(seconds: float) -> str:
    """Format seconds as zero-padded ``HH:MM:SS``."""
    total = max(0, int(round(seconds)))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def normalize_pace(pace: Any) -> str:
    """Return ``M:SS`` for a valid single pace, ``""`` otherwise.

    An optional trailing ``/km`` is accepted. Minutes are 1-2 digits, seconds
    exactly 2 digits below 60, and a zero pace is rejected.
    """
    if not isinstance(pace, str):
        return ""
    cleaned = _PACE_SUFFIX_RE.sub("", pace.strip())
    match = _PACE_RE.match(cleaned)
    if not match:
        return ""
    minutes, seconds = int(match.group(1)), int(match.group(2))
    if seconds >= 60 or (minutes == 0 and seconds == 0):
        return ""
    return f"{minutes}:{seconds:02d}"


def is_valid_pace(pace: Any) -> bool:
    return normalize_pace(pace) != ""


def is_range_pace(pace: Any) -> bool:
    return isinstance(pace, str) and "-" in _PACE_SUFFIX_RE.sub("", pace.strip())


def pace_to_seconds(pace: Any) -> float:
    """Seconds per km for a pace; the midpoint for a ``fast-slow`` range; 0 if invalid."""
    if is_range_pace(pace):
        lo, _, hi = _PACE_SUFFIX_RE.sub("", pace.strip()).partition("-")
        lo_s, hi_s = pace_to_seconds(lo.strip()), pace_to_seconds(hi.strip())
        if lo_s <= 0 or hi_s <= 0:
            return 0.0
        return (lo_s + hi_s) / 2
    normalized = normalize_pace(pace)
    if not normalized:
        return 0.0
    minutes, seconds = normalized.split(":")
    return int(minutes) * 60 + int(seconds)


def seconds_to_pace(seconds: float) -> str:
    """Format seconds per km as ``M:SS``; seconds are rounded half-to-even."""
    if seconds is None or seconds <= 0:
        return ""
    total = int(round(seconds))
    return f"{total // 60}:{total % 60:02d}"


def pace_range(pace: str, spread_pct: float = 12.0) -> str:
    """Widen a single pace into ``fast-slow`` where slow is ``spread_pct`` percent slower."""
    base = pace_to_seconds(pace)
    if base <= 0 or is_range_pace(pace):
        return pace
    return f"{seconds_to_pace(base)}-{seconds_to_pace(base * (1 + spread_pct / 100))}"


def pace_for_time(total_seconds: float, distance_km: float) -> str:
    """Average pace for covering ``distance_km`` in ``total_seconds``."""
    if distance_km <= 0 or total_seconds <= 0:
        return ""
    return seconds_to_pace(total_seconds / distance_km)
