"""Split-by-split race planning with weather adjustment."""

from __future__ import annotations

import math
from dataclasses import dataclass

from paceplan.services.pace_adjustment import environmental_factor
from paceplan.services.pace_format import format_duration, pace_to_seconds, seconds_to_pace

DEFAULT_SPLIT_PACE = "5:00"


@dataclass(frozen=True)
class Split:
    number: int
    distance_km: float
    pace: str


@dataclass(frozen=True)
class RacePlan:
    total_distance_km: float
    total_seconds: float
    total_time: str
    average_pace: str
    adjustment: float
    splits: tuple[Split, ...]


def initial_splits(distance_km: float, pace: str = DEFAULT_SPLIT_PACE) -> list[Split]:
    """One split per whole km plus a final split for the remainder."""
    if distance_km is None or distance_km <= 0:
        return []
    full_km = math.floor(distance_km)
    splits = [Split(number=i + 1, distance_km=1.0, pace=pace) for i in range(full_km)]
    remainder = round(distance_km - full_km, 2)
    if remainder > 0:
        splits.append(Split(number=full_km + 1, distance_km=remainder, pace=pace))
    return splits


def apply_pace_to_all(splits: list[Split], pace: str) -> list[Split]:
    if not pace:
        return list(splits)
    return [Split(number=s.number, distance_km=s.distance_km, pace=pace) for s in splits]


def plan_race(
    splits: list[Split],
    temperature: float = 20.0,
    humidity: float = 60.0,
    wind: float = 0.0,
) -> RacePlan:
    """Total time and average pace for a set of splits under given conditions.

    Each split's base pace is scaled by the environmental factor before its
    time is added; splits with an unreadable pace contribute distance only.
    """
    adjustment = environmental_factor(temperature, humidity, wind)
    total_distance = sum(max(0.0, s.distance_km or 0.0) for s in splits)
    total_seconds = sum(pace_to_seconds(s.pace) * adjustment * max(0.0, s.distance_km or 0.0) for s in splits)
    average = seconds_to_pace(total_seconds / total_distance) if total_distance > 0 else ""
    return RacePlan(
        total_distance_km=round(total_distance, 2),
        total_seconds=round(total_seconds, 1),
        total_time=format_duration(total_seconds),
        average_pace=average,
        adjustment=round(adjustment, 4),
        splits=tuple(splits),
    )
