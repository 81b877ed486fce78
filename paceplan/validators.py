"""Pydantic validation models for all user-facing data entry points."""

from __future__ import annotations

import re
from datetime import date as dt_date
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from paceplan.models import WorkoutLog
from paceplan.services.pace_format import normalize_pace
from paceplan.services.reference_tables import RACE_DISTANCE_KEYS

_TIME_RE = re.compile(r"^(\d{1,2}:)?\d{1,2}:\d{2}$")


class PaceSettingsInput(BaseModel):
    base_time: str = "00:19:57"
    base_distance: str = "5km"
    adjustment_factor: float = Field(default=100, ge=80, le=120)
    start_date: Optional[dt_date] = None

    @field_validator("base_time")
    @classmethod
    def valid_time(cls, v):
        if not _TIME_RE.match(v.strip()):
            raise ValueError("base_time must be hh:mm:ss or mm:ss")
        return v.strip()

    @field_validator("base_distance")
    @classmethod
    def valid_distance(cls, v):
        if v not in RACE_DISTANCE_KEYS:
            raise ValueError(f"base_distance must be one of {list(RACE_DISTANCE_KEYS)}")
        return v


class WorkoutLogInput(BaseModel):
    date: dt_date
    title: str = Field(default="", max_length=140)
    activity_type: str = Field(min_length=1, max_length=40)
    distance: float = Field(default=0.0, ge=0.0)
    duration: float = Field(default=0.0, ge=0.0)
    pace: Optional[str] = None
    plan_path: Optional[str] = None
    plan_day_index: Optional[int] = Field(default=None, ge=0)
    source: Literal["manual", "strava", "garmin", "system"] = "manual"

    @field_validator("pace")
    @classmethod
    def valid_pace(cls, v):
        if v in (None, ""):
            return None
        normalized = normalize_pace(v)
        if not normalized:
            raise ValueError("pace must be MM:SS, e.g. 5:30")
        return normalized

    def to_log(self) -> WorkoutLog:
        return WorkoutLog(
            date=self.date.isoformat(),
            title=self.title,
            activity_type=self.activity_type,
            distance=self.distance,
            duration=self.duration,
            pace=self.pace,
            plan_path=self.plan_path,
            plan_day_index=self.plan_day_index,
            source=self.source,
        )


class ConditionsInput(BaseModel):
    temperature: float = Field(default=20.0, ge=-30, le=50)
    humidity: float = Field(default=60.0, ge=0, le=100)
    wind: float = Field(default=0.0, ge=0, le=100)
