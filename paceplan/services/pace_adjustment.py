"""Pure pace transforms: global percentage scaling and environmental scaling."""

from __future__ import annotations

from paceplan.services.pace_format import is_range_pace, pace_to_seconds, seconds_to_pace

FACTOR_NEUTRAL = 100.0


def adjust_pace(pace: str, factor: float) -> str:
    """Scale a pace by a percentage factor.

    Factor < 100 gives a faster pace, factor > 100 a slower one. Seconds are
    rounded half-to-even, so 5:30 at 105% is 346.5s -> 5:46. Ranges are
    adjusted on both ends. Returns ``""`` for an invalid pace or a
    non-positive factor.
    """
    if factor is None or factor <= 0:
        return ""
    if is_range_pace(pace):
        lo, _, hi = pace.replace("/km", "").partition("-")
        adjusted_lo, adjusted_hi = adjust_pace(lo.strip(), factor), adjust_pace(hi.strip(), factor)
        if not adjusted_lo or not adjusted_hi:
            return ""
        return f"{adjusted_lo}-{adjusted_hi}"

    seconds = pace_to_seconds(pace)
    if seconds <= 0:
        return ""
    # multiply before dividing so integral inputs stay exact
    return seconds_to_pace(seconds * factor / 100)


def inverse_factor(factor: float) -> float:
    """Factor that undoes ``factor``; applying both lands within 1s of the start."""
    if not factor or factor <= 0:
        return FACTOR_NEUTRAL
    return 10000 / factor


def environmental_factor(temperature: float = 20.0, humidity: float = 60.0, wind: float = 0.0) -> float:
    """Multiplicative slow-down for heat, cold, humidity and wind.

    Neutral conditions are 10-20 degrees C, humidity up to 60% and no wind.
    """
    adjustment = 1.0
    if temperature > 20:
        adjustment += (temperature - 20) * 0.0038
    elif temperature < 10:
        adjustment += (10 - temperature) * 0.002
    if humidity > 60:
        adjustment += (humidity - 60) * 0.001
    if wind > 0:
        adjustment += wind * 0.002
    return adjustment
