from __future__ import annotations

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_app_settings, get_tables
from api.schemas import (
    ActivityOut,
    AdjustRequest,
    BasisRequest,
    CustomPaceRequest,
    DayOut,
    FitnessIndexRequest,
    FitnessIndexResponse,
    LinkLogRequest,
    OverrideMapResponse,
    PaceCalculatorRequest,
    PaceCalculatorResponse,
    PaceSettingOut,
    PlanViewRequest,
    PlanViewResponse,
    RacePlanRequest,
    RacePlanResponse,
    RacePredictionOut,
    ResetRequest,
    WeekOut,
    WeeklyStatsOut,
)
from paceplan.config import Settings
from paceplan.models import WorkoutLog
from paceplan.services.completion_matcher import link_log_to_plan
from paceplan.services.fitness_index import index_percentage, pace_table_for, resolve_fitness_index
from paceplan.services.pace_calculator import calculate
from paceplan.services.pace_overrides import (
    PaceOverrides,
    apply_global_adjustment,
    change_basis,
    derive_all,
    reset_all_paces,
    reset_pace,
    resolve_paces,
    set_custom_pace,
)
from paceplan.services.plan_view import build_plan_view
from paceplan.services.race_planner import Split, apply_pace_to_all, initial_splits, plan_race
from paceplan.services.race_predictor import race_predictions
from paceplan.services.reference_tables import RACE_DISTANCE_KEYS, ReferenceTables
from paceplan.services.schedule import compose_schedule

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")


def _overrides_response(overrides: PaceOverrides, tables: ReferenceTables) -> OverrideMapResponse:
    derived = derive_all(overrides, tables)
    return OverrideMapResponse(
        index=derived.index,
        override_map=overrides.to_override_map(),
        paces=[PaceSettingOut.model_validate(p) for p in derived.paces],
    )


@router.get("/health", tags=["system"])
def health(tables: ReferenceTables = Depends(get_tables)):
    return {"status": "ok", "index_range": tables.index_range}


@router.post("/calculators/fitness-index", response_model=FitnessIndexResponse, tags=["calculators"])
def fitness_index(body: FitnessIndexRequest, tables: ReferenceTables = Depends(get_tables)):
    if body.distance not in RACE_DISTANCE_KEYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"distance must be one of {list(RACE_DISTANCE_KEYS)}",
        )
    index = resolve_fitness_index(body.time, body.distance, tables)
    paces = resolve_paces(pace_table_for(index, tables), {})
    return FitnessIndexResponse(
        index=index,
        percentage=index_percentage(index),
        paces=[PaceSettingOut.model_validate(p) for p in paces],
        predictions={k: RacePredictionOut.model_validate(v) for k, v in race_predictions(index, tables).items()},
    )


@router.post("/calculators/pace", response_model=PaceCalculatorResponse, tags=["calculators"])
def pace_calculator(body: PaceCalculatorRequest):
    result = calculate(body.mode, body.time, body.distance, body.pace, body.distance_unit, body.pace_unit)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"valid inputs for the other two fields are required to calculate {body.mode}",
        )
    return PaceCalculatorResponse.model_validate(result)


@router.post("/calculators/race-plan", response_model=RacePlanResponse, tags=["calculators"])
def race_plan(body: RacePlanRequest):
    if body.splits:
        splits = [Split(number=i + 1, distance_km=s.distance_km, pace=s.pace) for i, s in enumerate(body.splits)]
    elif body.distance_km:
        splits = initial_splits(body.distance_km)
        if body.pace:
            splits = apply_pace_to_all(splits, body.pace)
    else:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="distance_km or splits required")
    conditions = body.conditions
    result = plan_race(splits, conditions.temperature, conditions.humidity, conditions.wind)
    return RacePlanResponse.model_validate(result)


@router.post("/plans/view", response_model=PlanViewResponse, tags=["plans"])
def plan_view(
    body: PlanViewRequest,
    tables: ReferenceTables = Depends(get_tables),
    settings: Settings = Depends(get_app_settings),
):
    logs = [WorkoutLog.from_document(doc) for doc in body.logs]
    view = build_plan_view(body.plan, body.override_map, logs, body.today, tables, settings)
    weeks = []
    for week in view.weeks:
        days = [
            DayOut(
                index=d.day.index,
                date=d.day.date,
                is_today=d.day.is_today,
                is_past=d.day.is_past,
                note=d.day.note,
                activities=[
                    ActivityOut(
                        type=a.activity.type,
                        distance=a.activity.distance,
                        units=a.activity.units,
                        note=a.activity.note,
                        pace=a.pace,
                        segment_paces=[s.pace for s in a.segments],
                    )
                    for a in d.activities
                ],
                completions=[log.to_document() for log in d.completions],
            )
            for d in week.days
        ]
        weeks.append(
            WeekOut(
                week_number=week.week_number,
                week_start=week.week_start,
                stats=WeeklyStatsOut.model_validate(week.stats),
                days=days,
            )
        )
    return PlanViewResponse(
        plan_path=view.plan_path,
        plan_name=view.plan_name,
        index=view.derived.index,
        adjustment_factor=view.derived.adjustment_factor,
        paces=[PaceSettingOut.model_validate(p) for p in view.derived.paces],
        weeks=weeks,
    )


@router.post("/plans/paces/adjust", response_model=OverrideMapResponse, tags=["paces"])
def adjust_paces(
    body: AdjustRequest,
    tables: ReferenceTables = Depends(get_tables),
    settings: Settings = Depends(get_app_settings),
):
    if not settings.adjustment_factor_min <= body.factor <= settings.adjustment_factor_max:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"factor must be between {settings.adjustment_factor_min:g} and {settings.adjustment_factor_max:g}",
        )
    overrides = PaceOverrides.from_override_map(body.override_map, settings)
    table = derive_all(overrides, tables).table
    update = apply_global_adjustment(table, overrides, body.factor)
    if not update.ok:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=update.error)
    return _overrides_response(update.overrides, tables)


@router.post("/plans/paces/custom", response_model=OverrideMapResponse, tags=["paces"])
def custom_pace(
    body: CustomPaceRequest,
    tables: ReferenceTables = Depends(get_tables),
    settings: Settings = Depends(get_app_settings),
):
    overrides = PaceOverrides.from_override_map(body.override_map, settings)
    table = derive_all(overrides, tables).table
    update = set_custom_pace(overrides, body.pace_name, body.value, table)
    if not update.ok:
        logger.info("custom pace rejected", extra={"ctx_pace_name": body.pace_name})
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=update.error)
    return _overrides_response(update.overrides, tables)


@router.post("/plans/paces/reset", response_model=OverrideMapResponse, tags=["paces"])
def reset_paces(
    body: ResetRequest,
    tables: ReferenceTables = Depends(get_tables),
    settings: Settings = Depends(get_app_settings),
):
    overrides = PaceOverrides.from_override_map(body.override_map, settings)
    if body.pace_name:
        overrides = reset_pace(overrides, body.pace_name)
    else:
        overrides = reset_all_paces(overrides)
    return _overrides_response(overrides, tables)


@router.post("/plans/paces/basis", response_model=OverrideMapResponse, tags=["paces"])
def change_pace_basis(
    body: BasisRequest,
    tables: ReferenceTables = Depends(get_tables),
    settings: Settings = Depends(get_app_settings),
):
    basis = body.basis
    overrides = change_basis(
        PaceOverrides.from_override_map(body.override_map, settings),
        basis.base_time,
        basis.base_distance,
    )
    if basis.start_date is not None:
        overrides = replace(overrides, start_date=basis.start_date.isoformat())
    if basis.adjustment_factor != overrides.adjustment_factor:
        update = apply_global_adjustment(derive_all(overrides, tables).table, overrides, basis.adjustment_factor)
        if not update.ok:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=update.error)
        overrides = update.overrides
    return _overrides_response(overrides, tables)


@router.post("/plans/logs/link", tags=["plans"])
def link_log(body: LinkLogRequest, settings: Settings = Depends(get_app_settings)):
    overrides = PaceOverrides.from_override_map(body.override_map, settings)
    blocks = compose_schedule(body.plan.daily_workouts, overrides.start_date)
    log = link_log_to_plan(body.log.to_log(), blocks, body.plan.path)
    if log.plan_day_index is None:
        logger.info("log not linked", extra={"ctx_plan_path": body.plan.path, "ctx_date": log.date})
    return log.to_document()
