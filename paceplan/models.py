"""Plan documents and completion records consumed by the pace engine.

Plan content arrives from the document store as plain JSON; the pydantic
models below parse it once at the boundary and are immutable afterwards.
Completion logs are kept as loose dataclasses because imported records may
carry malformed dates or distances that the matcher must tolerate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Series(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    sets: str = ""
    work: str = ""
    rest: Optional[str] = None
    distance: Optional[Union[float, str]] = None


class Workout(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    note: Optional[str] = None
    link: Optional[str] = None
    series: list[Series] = Field(default_factory=list)


class ScheduledActivity(BaseModel):
    """One prescribed unit of training for a day."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    distance: Union[float, str] = 0
    units: Literal["km", "min"] = "km"
    activity: Optional[str] = None
    note: Optional[str] = None
    workouts: list[Workout] = Field(default_factory=list)

    @property
    def has_series(self) -> bool:
        return any(w.series for w in self.workouts)


class TrainingDay(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    activities: list[ScheduledActivity] = Field(default_factory=list)
    note: Optional[str] = None


class TrainingPlan(BaseModel):
    """A prebuilt programme: day 0 of ``daily_workouts`` is the start date."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    path: str
    name: str = ""
    daily_workouts: list[TrainingDay] = Field(default_factory=list, alias="dailyWorkouts")


@dataclass(frozen=True)
class WorkoutLog:
    """A completed workout, entered manually or imported from a tracker."""

    date: Any
    title: str = ""
    activity_type: str = ""
    distance: Any = 0.0
    duration: Any = 0.0
    pace: Optional[str] = None
    plan_path: Optional[str] = None
    plan_day_index: Any = None
    source: str = "manual"
    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "WorkoutLog":
        """Build a log from a stored document using its camelCase keys."""
        return cls(
            date=doc.get("date"),
            title=doc.get("title") or "",
            activity_type=doc.get("activityType") or doc.get("activity_type") or "",
            distance=doc.get("distance", 0.0),
            duration=doc.get("duration", 0.0),
            pace=doc.get("pace"),
            plan_path=doc.get("planPath", doc.get("plan_path")),
            plan_day_index=doc.get("planDayIndex", doc.get("plan_day_index")),
            source=doc.get("source") or "manual",
            id=str(doc["_id"]) if doc.get("_id") is not None else doc.get("id"),
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "date": self.date,
            "title": self.title,
            "activityType": self.activity_type,
            "distance": self.distance,
            "duration": self.duration,
            "source": self.source,
        }
        if self.pace:
            doc["pace"] = self.pace
        if self.plan_path is not None:
            doc["planPath"] = self.plan_path
        if self.plan_day_index is not None:
            doc["planDayIndex"] = self.plan_day_index
        if self.id is not None:
            doc["id"] = self.id
        return doc
