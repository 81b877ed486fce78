"""Race time prediction from the race reference table.

Predictions are read straight from the fitness index's race row. When
extrapolation is enabled, distances missing from the table are estimated
with Riegel's power law from the nearest tabulated distance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from paceplan.services.pace_format import format_duration, pace_for_time, time_to_seconds
from paceplan.services.reference_tables import (
    RACE_DISTANCE_KEYS,
    RACE_DISTANCES_KM,
    ReferenceTables,
    load_reference_tables,
)


@dataclass(frozen=True)
class RacePrediction:
    """Predicted finish time and average pace for a distance."""
    distance_km: float
    time: str
    pace: str
    method: str = "table"


RacePredictorFn = Callable[[float], Optional[RacePrediction]]


def predict_riegel(
    known_distance_km: float,
    known_time_seconds: float,
    target_distance_km: float,
    fatigue_factor: float = 1.06,
) -> float:
    """Predict finish time using Riegel's formula: T2 = T1 * (D2/D1)^fatigue_factor."""
    if known_distance_km <= 0 or known_time_seconds <= 0 or target_distance_km <= 0:
        return 0.0
    ratio = target_distance_km / known_distance_km
    return known_time_seconds * (ratio ** fatigue_factor)


def distance_key_for(distance_km: float) -> list[str]:
    """Candidate table keys for a distance in km, e.g. 5 -> '5km', 1.5 -> '1500m'."""
    keys = [f"{distance_km:g}km"]
    metres = distance_km * 1000
    if abs(metres - round(metres)) < 1e-6:
        keys.append(f"{int(round(metres))}m")
    return keys


def _to_km(distance) -> Optional[float]:
    try:
        value = float(distance)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def race_predictor(
    index: Optional[int],
    tables: Optional[ReferenceTables] = None,
    allow_extrapolation: bool = False,
) -> RacePredictorFn:
    """Build a pure ``distance_km -> RacePrediction | None`` function for one index."""
    tables = tables if tables is not None else load_reference_tables()
    row = tables.race_row(index) if index is not None else None

    def predict(distance) -> Optional[RacePrediction]:
        distance_km = _to_km(distance)
        if row is None or distance_km is None:
            return None
        for key in distance_key_for(distance_km):
            time = row.get(key)
            if time is not None:
                return RacePrediction(
                    distance_km=distance_km,
                    time=time,
                    pace=pace_for_time(time_to_seconds(time), distance_km),
                )
        if not allow_extrapolation:
            return None

        known = [(k, RACE_DISTANCES_KM[k]) for k in RACE_DISTANCE_KEYS if row.get(k) and k in RACE_DISTANCES_KM]
        if not known:
            return None
        key, known_km = min(known, key=lambda item: abs(item[1] - distance_km))
        seconds = predict_riegel(known_km, time_to_seconds(row.get(key)), distance_km)
        if seconds <= 0:
            return None
        return RacePrediction(
            distance_km=distance_km,
            time=format_duration(seconds),
            pace=pace_for_time(seconds, distance_km),
            method="riegel",
        )

    return predict


def race_predictions(index: Optional[int], tables: Optional[ReferenceTables] = None) -> dict[str, RacePrediction]:
    """Predicted time and pace for every tabulated distance of an index."""
    tables = tables if tables is not None else load_reference_tables()
    row = tables.race_row(index) if index is not None else None
    if row is None:
        return {}
    results: dict[str, RacePrediction] = {}
    for key in RACE_DISTANCE_KEYS:
        time = row.get(key)
        if time is None:
            continue
        distance_km = RACE_DISTANCES_KM[key]
        results[key] = RacePrediction(
            distance_km=distance_km,
            time=time,
            pace=pace_for_time(time_to_seconds(time), distance_km),
        )
    return results
