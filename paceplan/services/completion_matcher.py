"""Matching of completed workouts to scheduled plan days.

Forward matching (:func:`match_completions`) answers "which logs complete
this day?" for the calendar. Reverse linking (:func:`find_matching_plan_day`)
answers "which plan day does this imported log belong to?" and is used when
a tracker import is attached to the active plan.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Optional, Sequence

from paceplan.config import get_settings
from paceplan.models import ScheduledActivity, WorkoutLog
from paceplan.services.activity_pace import parse_distance_km
from paceplan.services.schedule import DayView, WeeklyBlock, flatten_blocks, to_date

logger = logging.getLogger(__name__)

RUNNING_TYPES = ["easy", "recovery", "threshold", "interval", "repetition", "long", "marathon", "race"]

# Log activity type -> compatible plan activity types. Tracker types come
# first, manual entries map to themselves.
COMPATIBLE_TYPES: dict[str, list[str]] = {
    "Run": RUNNING_TYPES,
    "Walk": ["walk"],
    "Workout": ["strength"],
    "WeightTraining": ["strength"],
    "Ride": ["bike", "cycling"],
    "easy": ["easy"],
    "recovery": ["recovery"],
    "threshold": ["threshold"],
    "interval": ["interval"],
    "repetition": ["repetition"],
    "long": ["long"],
    "marathon": ["marathon"],
    "race": ["race"],
    "walk": ["walk"],
    "strength": ["strength"],
    "other": ["easy", "recovery"],
}


def validate_plan_day_index(value: Any) -> Optional[int]:
    """Normalise a stored plan day index; blanks, negatives and junk become None."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        index = float(value)
    except (TypeError, ValueError):
        return None
    if index != index or index < 0 or not index.is_integer():
        return None
    return int(index)


def _is_linked(log: WorkoutLog, plan_path: Optional[str], day_index: Optional[int]) -> bool:
    if plan_path is None or day_index is None:
        return False
    return log.plan_path == plan_path and validate_plan_day_index(log.plan_day_index) == day_index


def _type_matches(log: WorkoutLog, activities: Sequence[ScheduledActivity]) -> bool:
    log_type = (log.activity_type or "").strip().lower()
    return bool(log_type) and any((a.type or "").strip().lower() == log_type for a in activities)


def _distance_matches(log: WorkoutLog, activities: Sequence[ScheduledActivity], tolerance: float) -> bool:
    if log.distance is None or log.distance == "":
        return False
    log_km = float(log.distance)
    for activity in activities:
        if activity.units != "km":
            continue
        planned = parse_distance_km(activity.distance)
        if planned is None:
            continue
        if abs(log_km - planned) / planned < tolerance:
            return True
    return False


def match_completions(
    day_date: Any,
    activities: Sequence[ScheduledActivity],
    logs: Iterable[WorkoutLog],
    plan_path: Optional[str] = None,
    day_index: Optional[int] = None,
    tolerance: Optional[float] = None,
) -> list[WorkoutLog]:
    """Logs that complete one plan day.

    A log explicitly linked to this plan path and day index always matches.
    Otherwise it must fall on the same calendar date and either share an
    activity type with the day or be within ``tolerance`` (relative) of one
    of the day's kilometre distances. A log that cannot be compared is
    skipped, never fatal.
    """
    if tolerance is None:
        tolerance = get_settings().distance_match_tolerance
    try:
        target = to_date(day_date)
    except ValueError:
        logger.warning("unreadable plan day date %r, only linked logs can match", day_date)
        target = None

    matched: list[WorkoutLog] = []
    for log in logs:
        try:
            if _is_linked(log, plan_path, day_index):
                matched.append(log)
                continue
            if target is None or to_date(log.date) != target:
                continue
            if _type_matches(log, activities) or _distance_matches(log, activities, tolerance):
                matched.append(log)
        except Exception as exc:
            logger.warning(
                "skipping log during completion match: %s",
                exc,
                extra={"ctx_log_id": log.id, "ctx_day": str(day_date)},
            )
    return matched


def completions_by_day(
    blocks: Iterable[WeeklyBlock],
    logs: Sequence[WorkoutLog],
    plan_path: Optional[str] = None,
    tolerance: Optional[float] = None,
) -> dict[int, list[WorkoutLog]]:
    """Run the matcher for every composed day, keyed by plan day index."""
    return {
        day.index: match_completions(day.date, day.activities, logs, plan_path, day.index, tolerance)
        for day in flatten_blocks(blocks)
    }


def find_matching_plan_day(log_date: Any, log_type: str, days: Sequence[DayView]) -> Optional[int]:
    """Plan day index for a log when that date has a compatible activity."""
    if not log_date or not days:
        return None
    try:
        target = to_date(log_date)
    except ValueError:
        logger.warning("cannot link log with unreadable date %r", log_date)
        return None

    day = next((d for d in days if d.date == target.isoformat()), None)
    if day is None:
        return None
    compatible = COMPATIBLE_TYPES.get(log_type, [])
    if any(a.type in compatible for a in day.activities):
        return day.index
    return None


def link_log_to_plan(log: WorkoutLog, blocks: Iterable[WeeklyBlock], plan_path: str) -> WorkoutLog:
    """Attach an unlinked log to its plan day; already linked or unmatched logs are returned as is."""
    if validate_plan_day_index(log.plan_day_index) is not None and log.plan_path:
        return log
    index = find_matching_plan_day(log.date, log.activity_type, flatten_blocks(blocks))
    if index is None:
        return log
    return replace(log, plan_path=plan_path, plan_day_index=index)
