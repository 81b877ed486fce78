from __future__ import annotations

from datetime import date as dt_date
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from paceplan.models import TrainingPlan
from paceplan.validators import ConditionsInput, PaceSettingsInput, WorkoutLogInput


class PaceSettingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: str
    default: str
    is_custom: bool
    description: str = ""
    display_name: str = ""


class RacePredictionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    distance_km: float
    time: str
    pace: str
    method: str = "table"


class FitnessIndexRequest(BaseModel):
    time: str = Field(min_length=3, max_length=8)
    distance: str


class FitnessIndexResponse(BaseModel):
    index: Optional[int] = None
    percentage: float = 0.0
    paces: list[PaceSettingOut] = Field(default_factory=list)
    predictions: dict[str, RacePredictionOut] = Field(default_factory=dict)


class SplitIn(BaseModel):
    distance_km: float = Field(gt=0, le=100)
    pace: str


class PaceCalculatorRequest(BaseModel):
    mode: Literal["pace", "time", "distance"]
    time: Optional[str] = Field(default=None, max_length=8)
    distance: Optional[float] = Field(default=None, gt=0, le=1000)
    pace: Optional[str] = Field(default=None, max_length=12)
    distance_unit: Literal["km", "mi"] = "km"
    pace_unit: Literal["/km", "/mi"] = "/km"


class PaceCalculatorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time: str
    distance: float
    pace: str
    distance_unit: str
    pace_unit: str


class RacePlanRequest(BaseModel):
    distance_km: Optional[float] = Field(default=None, gt=0, le=250)
    pace: Optional[str] = None
    splits: list[SplitIn] = Field(default_factory=list)
    conditions: ConditionsInput = Field(default_factory=ConditionsInput)


class SplitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: int
    distance_km: float
    pace: str


class RacePlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_distance_km: float
    total_seconds: float
    total_time: str
    average_pace: str
    adjustment: float
    splits: list[SplitOut]


class OverrideMapRequest(BaseModel):
    override_map: dict[str, str] = Field(default_factory=dict)


class AdjustRequest(OverrideMapRequest):
    factor: float = Field(gt=0)


class CustomPaceRequest(OverrideMapRequest):
    pace_name: str = Field(min_length=1, max_length=40)
    value: str = Field(max_length=20)


class ResetRequest(OverrideMapRequest):
    pace_name: Optional[str] = None


class BasisRequest(OverrideMapRequest):
    basis: PaceSettingsInput


class OverrideMapResponse(BaseModel):
    index: Optional[int] = None
    override_map: dict[str, str]
    paces: list[PaceSettingOut]


class PlanViewRequest(BaseModel):
    plan: TrainingPlan
    override_map: dict[str, str] = Field(default_factory=dict)
    logs: list[dict[str, Any]] = Field(default_factory=list)
    today: Optional[dt_date] = None


class ActivityOut(BaseModel):
    type: str
    distance: float | str
    units: str
    note: Optional[str] = None
    pace: str
    segment_paces: list[str] = Field(default_factory=list)


class DayOut(BaseModel):
    index: int
    date: str
    is_today: bool
    is_past: bool
    note: Optional[str] = None
    activities: list[ActivityOut]
    completions: list[dict[str, Any]]


class WeeklyStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    km: float
    minutes: float
    total_workouts: int


class WeekOut(BaseModel):
    week_number: int
    week_start: str
    stats: WeeklyStatsOut
    days: list[DayOut]


class PlanViewResponse(BaseModel):
    plan_path: str
    plan_name: str
    index: Optional[int] = None
    adjustment_factor: float
    paces: list[PaceSettingOut]
    weeks: list[WeekOut]


class LinkLogRequest(BaseModel):
    plan: TrainingPlan
    override_map: dict[str, str] = Field(default_factory=dict)
    log: WorkoutLogInput
