"""Weekly training volume (distance, time, workout count) for composed weeks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from paceplan.models import ScheduledActivity, Series
from paceplan.services.activity_pace import parse_distance_km
from paceplan.services.pace_format import NOT_AVAILABLE, pace_to_seconds

PaceLookup = Callable[[ScheduledActivity], str]

OFF_DAY_TYPES = frozenset({"off", "offday"})

_WORK_RE = re.compile(r"^([\d.]+)\s*([a-z]+)$")
_SETS_RE = re.compile(r"^(\d+)\s*x", re.I)
_EASY_SEGMENT_WORDS = ("warm", "cool")

_KM_UNITS = {"km", "kms"}
_M_UNITS = {"m", "meters", "metres"}
_MIN_UNITS = {"min", "mins", "minutes"}
_SEC_UNITS = {"s", "sec", "secs", "seconds"}


@dataclass(frozen=True)
class Volume:
    km: float = 0.0
    minutes: float = 0.0

    def __add__(self, other: "Volume") -> "Volume":
        return Volume(self.km + other.km, self.minutes + other.minutes)


@dataclass(frozen=True)
class WeeklyStats:
    km: float
    minutes: float
    total_workouts: int


def pace_minutes(pace: Optional[str]) -> float:
    """Minutes per km for a pace or pace range; 0 when unknown."""
    if not pace or pace == NOT_AVAILABLE:
        return 0.0
    return pace_to_seconds(pace) / 60


def parse_work(work: Optional[str]) -> Volume:
    """Read '400 m', '5km', '20 min' or '90 s' into distance or time."""
    if not work or not isinstance(work, str):
        return Volume()
    match = _WORK_RE.match(work.strip().lower())
    if not match:
        return Volume()
    try:
        value = float(match.group(1))
    except ValueError:
        return Volume()
    unit = match.group(2)
    if unit in _KM_UNITS:
        return Volume(km=value)
    if unit in _M_UNITS:
        return Volume(km=value / 1000)
    if unit in _MIN_UNITS:
        return Volume(minutes=value)
    if unit in _SEC_UNITS:
        return Volume(minutes=value / 60)
    return Volume()


def extract_repetitions(sets: Optional[str]) -> int:
    if not sets:
        return 1
    match = _SETS_RE.match(sets.strip())
    return int(match.group(1)) if match else 1


def _series_volume(activity: ScheduledActivity, series: Series, pace_lookup: PaceLookup) -> Volume:
    work = parse_work(series.work)
    reps = extract_repetitions(series.sets)

    if activity.type == "race":
        pace = pace_lookup(activity.model_copy(update={"type": "threshold"}))
    else:
        kind = activity.type
        if not series.distance and any(word in (series.work or "").lower() for word in _EASY_SEGMENT_WORDS):
            kind = "easy"
        pace = pace_lookup(activity.model_copy(update={"type": kind, "distance": series.distance or activity.distance}))
    per_km = pace_minutes(pace)

    km, minutes = work.km, work.minutes
    if km > 0 and minutes == 0 and per_km > 0:
        minutes = km * per_km
    elif minutes > 0 and km == 0 and per_km > 0:
        km = minutes / per_km
    total = Volume(km * reps, minutes * reps)

    if series.rest:
        rest = parse_work(series.rest)
        rest_km, rest_minutes = rest.km, rest.minutes
        if rest_km > 0 and per_km > 0:
            rest_minutes = rest_km * per_km
        elif rest_minutes > 0:
            recovery = pace_minutes(pace_lookup(activity.model_copy(update={"type": "recovery"})))
            if recovery > 0:
                rest_km = rest_minutes / recovery
        # recovery happens between repetitions only
        gaps = max(0, reps - 1)
        total = total + Volume(rest_km * gaps, rest_minutes * gaps)
    return total


def activity_volume(activity: ScheduledActivity, pace_lookup: PaceLookup) -> Volume:
    if activity.has_series:
        total = Volume()
        for workout in activity.workouts:
            for series in workout.series:
                total = total + _series_volume(activity, series, pace_lookup)
        return total

    amount = parse_distance_km(activity.distance) or 0.0
    if amount == 0:
        return Volume()
    lookup_activity = activity.model_copy(update={"type": "threshold"}) if activity.type == "race" else activity
    per_km = pace_minutes(pace_lookup(lookup_activity))
    if activity.units == "km":
        return Volume(km=amount, minutes=amount * per_km)
    return Volume(km=amount / per_km if per_km > 0 else 0.0, minutes=amount)


def day_volume(activities: Iterable[ScheduledActivity], pace_lookup: PaceLookup) -> Volume:
    total = Volume()
    for activity in activities:
        total = total + activity_volume(activity, pace_lookup)
    return total


def weekly_stats(days: Iterable, pace_lookup: PaceLookup) -> WeeklyStats:
    """Sum volume over a week's days (TrainingDay or DayView) and count non-rest workouts."""
    total = Volume()
    workouts = 0
    for day in days:
        total = total + day_volume(day.activities, pace_lookup)
        workouts += sum(1 for a in day.activities if a.type not in OFF_DAY_TYPES)
    return WeeklyStats(km=round(total.km, 2), minutes=round(total.minutes, 1), total_workouts=workouts)
