"""Display pace for a scheduled activity.

Dispatch is on the activity type: running types map to a named pace, races
show a predicted finish time, and anything else is "N/A". Every function
here is pure in its inputs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence, Union

from paceplan.models import ScheduledActivity, Series
from paceplan.services.fitness_index import RANGE_PACES
from paceplan.services.pace_format import NOT_AVAILABLE, pace_range
from paceplan.services.pace_overrides import PaceSetting, pace_map
from paceplan.services.race_predictor import RacePrediction

ACTIVITY_TYPE_TO_PACE: dict[str, str] = {
    "easy": "Easy Km",
    "recovery": "Recovery Km",
    "threshold": "T Km",
    "interval": "I Km",
    "repetition": "R 1000m",
    "marathon": "M Km",
    "long": "M Km",
}

RACE_TYPE = "race"

_DISTANCE_RE = re.compile(r"^\s*([\d.]+)\s*(km|m)?\s*$", re.I)

ResolvedPaces = Union[Mapping[str, PaceSetting], Sequence[PaceSetting]]
PredictRace = Callable[[float], Optional[RacePrediction]]


@dataclass(frozen=True)
class SegmentPace:
    workout_index: int
    series_index: int
    series: Series
    pace: str


def _as_map(resolved: ResolvedPaces) -> Mapping[str, PaceSetting]:
    if isinstance(resolved, Mapping):
        return resolved
    return pace_map(list(resolved))


def parse_distance_km(value) -> Optional[float]:
    """Read a plan distance: numbers are km, strings may say '5', '5km' or '400m'."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else None
    if not isinstance(value, str):
        return None
    match = _DISTANCE_RE.match(value)
    if not match:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    if number <= 0:
        return None
    return number / 1000 if (match.group(2) or "").lower() == "m" else number


def pace_for_activity(
    activity: ScheduledActivity,
    resolved_paces: ResolvedPaces,
    predict_race: Optional[PredictRace] = None,
    range_spread_pct: float = 12.0,
) -> str:
    """Display pace for one activity, or "N/A" when it cannot be derived."""
    kind = (activity.type or "").strip().lower()

    if kind == RACE_TYPE:
        distance_km = parse_distance_km(activity.distance)
        if predict_race is None or distance_km is None:
            return NOT_AVAILABLE
        prediction = predict_race(distance_km)
        return prediction.time if prediction is not None else NOT_AVAILABLE

    pace_name = ACTIVITY_TYPE_TO_PACE.get(kind)
    if pace_name is None:
        return NOT_AVAILABLE
    setting = _as_map(resolved_paces).get(pace_name)
    if setting is None or not setting.value:
        return NOT_AVAILABLE
    if pace_name in RANGE_PACES:
        return pace_range(setting.value, range_spread_pct)
    return setting.value


def segment_paces(
    activity: ScheduledActivity,
    resolved_paces: ResolvedPaces,
    predict_race: Optional[PredictRace] = None,
    range_spread_pct: float = 12.0,
) -> list[SegmentPace]:
    """Pace for each interval segment, using the segment's own distance when it has one."""
    resolved = _as_map(resolved_paces)
    results: list[SegmentPace] = []
    for w_idx, workout in enumerate(activity.workouts):
        for s_idx, series in enumerate(workout.series):
            segment = activity
            if series.distance not in (None, ""):
                segment = activity.model_copy(update={"distance": series.distance})
            results.append(
                SegmentPace(
                    workout_index=w_idx,
                    series_index=s_idx,
                    series=series,
                    pace=pace_for_activity(segment, resolved, predict_race, range_spread_pct),
                )
            )
    return results
