"""Tests for the composed plan view."""

from __future__ import annotations

from datetime import date

import pytest

from paceplan.config import Settings
from paceplan.models import TrainingPlan, WorkoutLog
from paceplan.services.plan_view import build_plan_view

PLAN_PATH = "plans/10k-base"


def _plan():
    days = [
        {"activities": [{"type": "easy", "distance": 8}]},
        {"activities": [{"type": "threshold", "distance": 6}]},
        {"activities": [{"type": "off"}], "note": "Rest"},
        {"activities": [{"type": "race", "distance": 5}]},
        {"activities": [{"type": "easy", "distance": 30, "units": "min"}]},
        {"activities": [{"type": "recovery", "distance": 5}]},
        {"activities": [{"type": "long", "distance": 20}]},
        {"activities": [{"type": "easy", "distance": 10}]},
    ]
    return TrainingPlan.model_validate({"path": PLAN_PATH, "name": "10K Base", "dailyWorkouts": days})


def _logs():
    docs = [
        {"_id": "a", "date": "2024-01-05", "activityType": "Run", "distance": 3, "planPath": PLAN_PATH, "planDayIndex": 0},
        {"_id": "b", "date": "2024-01-02", "activityType": "threshold", "distance": 6},
        {"_id": "c", "date": "2024-01-08T07:00:00", "activityType": "Run", "distance": 10.5},
    ]
    return [WorkoutLog.from_document(d) for d in docs]


@pytest.fixture
def view(small_tables):
    return build_plan_view(
        _plan(),
        {"baseTime": "00:19:57", "baseDistance": "5km", "startDate": "2024-01-01"},
        _logs(),
        now=date(2024, 1, 2),
        tables=small_tables,
        settings=Settings(),
    )


def test_weeks_and_paces(view):
    assert view.plan_name == "10K Base"
    assert view.derived.index == 50
    assert [len(w.days) for w in view.weeks] == [7, 1]
    paces = [d.activities[0].pace for w in view.weeks for d in w.days]
    assert paces == ["5:30-6:10", "4:15", "N/A", "00:19:57", "5:30-6:10", "5:52-6:34", "4:31", "5:30-6:10"]


def test_today_and_completions(view):
    assert view.today is not None
    assert view.today.day.index == 1
    completed = {d.day.index: [log.id for log in d.completions] for w in view.weeks for d in w.days if d.is_completed}
    assert completed == {0: ["a"], 1: ["b"], 7: ["c"]}
    assert view.completed_days == 3


def test_weekly_stats(view):
    stats = view.weeks[0].stats
    assert stats.total_workouts == 6
    assert stats.km == pytest.approx(49.14)
    assert stats.minutes == pytest.approx(244.8)
    assert view.weeks[1].stats.km == 10


def test_overrides_flow_into_view(small_tables):
    view = build_plan_view(
        _plan(),
        {"startDate": "2024-01-01", "custom_T Km": "4:05"},
        now=date(2024, 1, 1),
        tables=small_tables,
        settings=Settings(),
    )
    assert view.weeks[0].days[1].activities[0].pace == "4:05"
    assert view.completed_days == 0


def test_bad_start_date_gives_empty_view(small_tables):
    view = build_plan_view(_plan(), {"startDate": "soon"}, tables=small_tables, settings=Settings())
    assert view.weeks == []
    assert view.today is None
