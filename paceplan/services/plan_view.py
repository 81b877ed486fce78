"""Everything a plan calendar needs, derived in one pass.

The view is recomputed whole from its inputs (plan, stored override map,
completion logs, current date) whenever any of them changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Any, Iterable, Mapping, Optional

from paceplan.config import Settings, get_settings
from paceplan.models import ScheduledActivity, TrainingPlan, WorkoutLog
from paceplan.services.activity_pace import SegmentPace, pace_for_activity, segment_paces
from paceplan.services.completion_matcher import match_completions
from paceplan.services.pace_overrides import DerivedPaces, PaceOverrides, derive_all, pace_map
from paceplan.services.race_predictor import race_predictor
from paceplan.services.reference_tables import ReferenceTables, load_reference_tables
from paceplan.services.schedule import DayView, compose_schedule
from paceplan.services.volume import WeeklyStats, weekly_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityView:
    activity: ScheduledActivity
    pace: str
    segments: list[SegmentPace]


@dataclass(frozen=True)
class DayPlanView:
    day: DayView
    activities: list[ActivityView]
    completions: list[WorkoutLog]

    @property
    def is_completed(self) -> bool:
        return bool(self.completions)


@dataclass(frozen=True)
class WeekPlanView:
    week_number: int
    week_start: str
    days: list[DayPlanView]
    stats: WeeklyStats


@dataclass(frozen=True)
class PlanView:
    plan_path: str
    plan_name: str
    overrides: PaceOverrides
    derived: DerivedPaces
    weeks: list[WeekPlanView]

    @property
    def today(self) -> Optional[DayPlanView]:
        return next((d for w in self.weeks for d in w.days if d.day.is_today), None)

    @property
    def completed_days(self) -> int:
        return sum(1 for w in self.weeks for d in w.days if d.is_completed)


def build_plan_view(
    plan: TrainingPlan,
    override_map: Optional[Mapping[str, Any]],
    logs: Iterable[WorkoutLog] = (),
    now: Optional[date] = None,
    tables: Optional[ReferenceTables] = None,
    settings: Optional[Settings] = None,
) -> PlanView:
    settings = settings or get_settings()
    tables = tables if tables is not None else load_reference_tables(settings.reference_tables_path)
    overrides = PaceOverrides.from_override_map(override_map, settings)
    derived = derive_all(overrides, tables)
    resolved = pace_map(derived.paces)
    predict = race_predictor(derived.index, tables, settings.allow_race_extrapolation)
    lookup = partial(
        pace_for_activity,
        resolved_paces=resolved,
        predict_race=predict,
        range_spread_pct=settings.range_pace_spread_pct,
    )
    all_logs = list(logs)

    weeks: list[WeekPlanView] = []
    for block in compose_schedule(plan.daily_workouts, overrides.start_date, now):
        day_views = []
        for day in block.days:
            activities = [
                ActivityView(
                    activity=a,
                    pace=lookup(a),
                    segments=segment_paces(a, resolved, predict, settings.range_pace_spread_pct),
                )
                for a in day.activities
            ]
            completions = match_completions(
                day.date,
                day.activities,
                all_logs,
                plan.path,
                day.index,
                settings.distance_match_tolerance,
            )
            day_views.append(DayPlanView(day=day, activities=activities, completions=completions))
        weeks.append(
            WeekPlanView(
                week_number=block.week_number,
                week_start=block.week_start,
                days=day_views,
                stats=weekly_stats(block.days, lookup),
            )
        )
    logger.debug("plan view built for %s: index=%s weeks=%d", plan.path, derived.index, len(weeks))
    return PlanView(plan_path=plan.path, plan_name=plan.name, overrides=overrides, derived=derived, weeks=weeks)
