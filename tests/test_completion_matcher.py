"""Tests for matching completed workouts to plan days."""

from __future__ import annotations

import logging

import pytest

from paceplan.models import ScheduledActivity, WorkoutLog
from paceplan.services.completion_matcher import (
    completions_by_day,
    find_matching_plan_day,
    link_log_to_plan,
    match_completions,
    validate_plan_day_index,
)
from paceplan.services.schedule import compose_schedule, flatten_blocks

PLAN = "plans/half-marathon"


def _easy(distance=10):
    return [ScheduledActivity(type="easy", distance=distance)]


def test_linked_log_matches_regardless_of_date():
    log = WorkoutLog(date="2024-02-20", activity_type="strength", plan_path=PLAN, plan_day_index=3)
    assert match_completions("2024-01-04", _easy(), [log], PLAN, 3) == [log]


def test_linked_log_for_other_plan_does_not_short_circuit():
    log = WorkoutLog(date="2024-02-20", activity_type="easy", plan_path="plans/other", plan_day_index=3)
    assert match_completions("2024-01-04", _easy(), [log], PLAN, 3) == []


def test_same_date_same_type():
    log = WorkoutLog(date="2024-01-04T18:30:00", activity_type="Easy", distance=3)
    assert match_completions("2024-01-04", _easy(), [log], PLAN, 3) == [log]


def test_different_date_never_matches():
    log = WorkoutLog(date="2024-01-05", activity_type="easy", distance=10)
    assert match_completions("2024-01-04", _easy(), [log]) == []


@pytest.mark.parametrize("distance, matched", [(10.9, True), (9.2, True), (11.5, False), (8.0, False)])
def test_distance_tolerance(distance, matched):
    log = WorkoutLog(date="2024-01-04", activity_type="Run", distance=distance)
    assert bool(match_completions("2024-01-04", _easy(10), [log], tolerance=0.10)) is matched


def test_distance_ignored_for_minute_activities():
    activities = [ScheduledActivity(type="easy", distance=30, units="min")]
    log = WorkoutLog(date="2024-01-04", activity_type="Run", distance=30)
    assert match_completions("2024-01-04", activities, [log], tolerance=0.10) == []


def test_malformed_logs_are_skipped(caplog):
    good = WorkoutLog(date="2024-01-04", activity_type="easy")
    bad_distance = WorkoutLog(date="2024-01-04", activity_type="Run", distance="ten")
    bad_date = WorkoutLog(date=None, activity_type="easy")
    with caplog.at_level(logging.WARNING):
        result = match_completions("2024-01-04", _easy(), [bad_distance, good, bad_date], tolerance=0.1)
    assert result == [good]
    assert "skipping log" in caplog.text


def test_unreadable_day_date_only_matches_linked():
    linked = WorkoutLog(date="2024-01-04", activity_type="easy", plan_path=PLAN, plan_day_index="2")
    unlinked = WorkoutLog(date="2024-01-04", activity_type="easy")
    assert match_completions("??", _easy(), [linked, unlinked], PLAN, 2) == [linked]


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (3, 3), ("4", 4), (2.0, 2), (-1, None), (1.5, None), ("", None), (None, None), ("x", None), (True, None)],
)
def test_validate_plan_day_index(value, expected):
    assert validate_plan_day_index(value) == expected


def _blocks():
    days = [
        {"activities": [{"type": "easy", "distance": 8}]},
        {"activities": [{"type": "strength", "distance": 30, "units": "min"}]},
        {"activities": []},
    ]
    return compose_schedule(days, "2024-01-01", now="2024-01-01")


def test_completions_by_day():
    logs = [WorkoutLog(date="2024-01-01", activity_type="Run", distance=8.2)]
    by_day = completions_by_day(_blocks(), logs, PLAN, 0.1)
    assert {k: len(v) for k, v in by_day.items()} == {0: 1, 1: 0, 2: 0}


def test_find_matching_plan_day():
    days = flatten_blocks(_blocks())
    assert find_matching_plan_day("2024-01-01T07:00:00", "Run", days) == 0
    assert find_matching_plan_day("2024-01-02", "WeightTraining", days) == 1
    assert find_matching_plan_day("2024-01-02", "Run", days) is None
    assert find_matching_plan_day("2024-01-03", "Run", days) is None
    assert find_matching_plan_day("2024-02-01", "Run", days) is None
    assert find_matching_plan_day("garbage!!", "Run", days) is None
    assert find_matching_plan_day(None, "Run", days) is None


def test_link_log_to_plan():
    blocks = _blocks()
    linked = link_log_to_plan(WorkoutLog(date="2024-01-01", activity_type="Run", source="strava"), blocks, PLAN)
    assert linked.plan_path == PLAN
    assert linked.plan_day_index == 0

    already = WorkoutLog(date="2024-01-01", activity_type="Run", plan_path="plans/other", plan_day_index=5)
    assert link_log_to_plan(already, blocks, PLAN) is already

    unmatched = WorkoutLog(date="2024-01-03", activity_type="Run")
    assert link_log_to_plan(unmatched, blocks, PLAN) is unmatched
