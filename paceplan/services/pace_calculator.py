"""Three-way pace calculator: any two of time, distance and pace give the third.

Distances are in km or miles, paces per km or per mile. Everything is
converted to km and seconds per km before calculating.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from paceplan.services.pace_format import (
    format_duration,
    normalize_pace,
    pace_to_seconds,
    seconds_to_pace,
    time_to_seconds,
)

KM_PER_MILE = 1.60934


@dataclass(frozen=True)
class PaceCalculation:
    time: str
    distance: float
    pace: str
    distance_unit: str = "km"
    pace_unit: str = "/km"


def _to_km(distance: float, unit: str) -> float:
    return distance * KM_PER_MILE if unit == "mi" else distance


def _from_km(distance_km: float, unit: str) -> float:
    return distance_km / KM_PER_MILE if unit == "mi" else distance_km


def _seconds_per_km(pace: str, unit: str) -> float:
    seconds = pace_to_seconds(pace)
    return seconds / KM_PER_MILE if unit == "/mi" else seconds


def _pace_in_unit(seconds_per_km: float, unit: str) -> str:
    return seconds_to_pace(seconds_per_km * KM_PER_MILE if unit == "/mi" else seconds_per_km)


def calculate_pace(time: str, distance: float, distance_unit: str = "km", pace_unit: str = "/km") -> str:
    """Average pace for ``distance`` covered in ``time``; ``""`` when either is missing."""
    seconds = time_to_seconds(time)
    if not distance or distance <= 0 or seconds <= 0:
        return ""
    return _pace_in_unit(seconds / _to_km(distance, distance_unit), pace_unit)


def calculate_time(pace: str, distance: float, pace_unit: str = "/km", distance_unit: str = "km") -> str:
    """Finish time for ``distance`` at ``pace``; ``""`` when either is missing."""
    per_km = _seconds_per_km(pace, pace_unit)
    if not distance or distance <= 0 or per_km <= 0:
        return ""
    return format_duration(per_km * _to_km(distance, distance_unit))


def calculate_distance(time: str, pace: str, pace_unit: str = "/km", distance_unit: str = "km") -> float:
    """Distance covered in ``time`` at ``pace``, rounded to 2 decimals; 0 when either is missing."""
    seconds = time_to_seconds(time)
    per_km = _seconds_per_km(pace, pace_unit)
    if seconds <= 0 or per_km <= 0:
        return 0.0
    return round(_from_km(seconds / per_km, distance_unit), 2)


def calculate(
    mode: str,
    time: Optional[str] = None,
    distance: Optional[float] = None,
    pace: Optional[str] = None,
    distance_unit: str = "km",
    pace_unit: str = "/km",
) -> Optional[PaceCalculation]:
    """Derive the field named by ``mode`` ("pace", "time" or "distance") from the other two.

    Returns None when the inputs needed for ``mode`` are missing or invalid.
    """
    if mode == "pace":
        result = calculate_pace(time or "", distance or 0.0, distance_unit, pace_unit)
        if not result:
            return None
        return PaceCalculation(format_duration(time_to_seconds(time)), distance, result, distance_unit, pace_unit)
    if mode == "time":
        result = calculate_time(pace or "", distance or 0.0, pace_unit, distance_unit)
        if not result:
            return None
        return PaceCalculation(result, distance, normalize_pace(pace), distance_unit, pace_unit)
    if mode == "distance":
        result = calculate_distance(time or "", pace or "", pace_unit, distance_unit)
        if result <= 0:
            return None
        return PaceCalculation(format_duration(time_to_seconds(time)), result, normalize_pace(pace), distance_unit, pace_unit)
    return None
