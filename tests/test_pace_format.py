"""Tests for time and pace parsing helpers."""

from __future__ import annotations

from paceplan.services.pace_format import (
    format_duration,
    is_range_pace,
    is_valid_pace,
    normalize_pace,
    pace_for_time,
    pace_range,
    pace_to_seconds,
    seconds_to_pace,
    time_to_seconds,
)


def test_time_to_seconds_hms_and_ms():
    assert time_to_seconds("00:19:57") == 1197
    assert time_to_seconds("19:57") == 1197
    assert time_to_seconds("01:31:35") == 5495


def test_time_to_seconds_unparsable_components_are_zero():
    assert time_to_seconds("00:19:") == 1140
    assert time_to_seconds("aa:19:57") == 1197
    assert time_to_seconds("") == 0
    assert time_to_seconds(None) == 0
    assert time_to_seconds("1197") == 0


def test_format_duration():
    assert format_duration(1197) == "00:19:57"
    assert format_duration(11449) == "03:10:49"
    assert format_duration(-5) == "00:00:00"


def test_normalize_pace_accepts_suffix_and_padding():
    assert normalize_pace("5:30") == "5:30"
    assert normalize_pace("05:30") == "5:30"
    assert normalize_pace("5:30/km") == "5:30"
    assert normalize_pace(" 4:05 min/km") == "4:05"


def test_normalize_pace_rejects_malformed():
    assert normalize_pace("5:3") == ""
    assert normalize_pace("5:75") == ""
    assert normalize_pace("0:00") == ""
    assert normalize_pace("123:00") == ""
    assert normalize_pace("fast") == ""
    assert normalize_pace(None) == ""
    assert is_valid_pace("4:15") is True
    assert is_valid_pace("4.15") is False


def test_pace_to_seconds_single_and_range():
    assert pace_to_seconds("4:15") == 255
    assert pace_to_seconds("5:00-6:00") == 330
    assert pace_to_seconds("N/A") == 0
    assert is_range_pace("5:00-6:00") is True
    assert is_range_pace("5:00") is False


def test_seconds_to_pace_rounds_half_to_even():
    assert seconds_to_pace(346.5) == "5:46"
    assert seconds_to_pace(347.5) == "5:48"
    assert seconds_to_pace(299.6) == "5:00"
    assert seconds_to_pace(0) == ""


def test_pace_range_widens_single_pace():
    assert pace_range("5:30") == "5:30-6:10"
    assert pace_range("5:52") == "5:52-6:34"
    assert pace_range("5:00-5:30") == "5:00-5:30"
    assert pace_range("bad") == "bad"


def test_pace_for_time():
    assert pace_for_time(1197, 5) == "3:59"
    assert pace_for_time(0, 5) == ""
    assert pace_for_time(1197, 0) == ""
