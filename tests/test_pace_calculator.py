"""Tests for the time / distance / pace calculator."""

from __future__ import annotations

import pytest

from paceplan.services.pace_calculator import calculate, calculate_distance, calculate_pace, calculate_time


def test_pace_from_time_and_distance():
    assert calculate_pace("00:25:00", 5) == "5:00"
    assert calculate_pace("40:00", 5, "mi", "/mi") == "8:00"
    assert calculate_pace("40:00", 5, "mi", "/km") == "4:58"


def test_time_from_pace_and_distance():
    assert calculate_time("5:00", 10) == "00:50:00"
    assert calculate_time("8:00", 10, "/mi", "km") == "00:49:43"
    assert calculate_time("4:58", 26.2, "/km", "mi") == "03:29:25"


def test_distance_from_time_and_pace():
    assert calculate_distance("00:25:00", "5:00") == 5.0
    assert calculate_distance("01:00:00", "4:00") == 15.0
    assert calculate_distance("00:40:00", "8:00", "/mi", "mi") == 5.0
    assert calculate_distance("00:50:00", "4:30") == 11.11


@pytest.mark.parametrize(
    "call",
    [
        lambda: calculate_pace("", 5),
        lambda: calculate_pace("00:25:00", 0),
        lambda: calculate_time("fast", 5),
        lambda: calculate_time("5:00", -1),
    ],
)
def test_missing_inputs_give_empty_result(call):
    assert call() == ""


def test_missing_distance_inputs_give_zero():
    assert calculate_distance("00:25:00", "N/A") == 0.0
    assert calculate_distance("", "5:00") == 0.0


def test_calculate_by_mode():
    by_pace = calculate("pace", time="25:00", distance=5)
    assert (by_pace.time, by_pace.distance, by_pace.pace) == ("00:25:00", 5, "5:00")

    by_time = calculate("time", pace="5:00/km", distance=10)
    assert (by_time.time, by_time.pace) == ("00:50:00", "5:00")

    by_distance = calculate("distance", time="00:25:00", pace="5:00")
    assert by_distance.distance == 5.0


def test_calculate_without_enough_inputs():
    assert calculate("pace", distance=5) is None
    assert calculate("time", pace="5:00") is None
    assert calculate("distance", time="00:25:00") is None
    assert calculate("speed", time="00:25:00", pace="5:00", distance=5) is None
