from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from paceplan.models import ScheduledActivity, TrainingDay

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class DayView:
    index: int
    date: str
    is_today: bool
    is_past: bool
    activities: list[ScheduledActivity]
    note: Optional[str] = None


@dataclass(frozen=True)
class WeeklyBlock:
    week_number: int
    week_start: str
    days: list[DayView]


def to_date(value: Any) -> date:
    """Date-only view of a date, datetime or ISO string; raises ValueError otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value.strip()) >= 10:
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unrecognised date: {value!r}")


def _training_days(days: Iterable[Any]) -> list[TrainingDay]:
    """Parse plan days; an unreadable day becomes an empty one so positions hold."""
    parsed: list[TrainingDay] = []
    for index, day in enumerate(days):
        if isinstance(day, TrainingDay):
            parsed.append(day)
            continue
        try:
            parsed.append(TrainingDay.model_validate(day))
        except ValidationError as exc:
            logger.warning(
                "unreadable plan day %d replaced with an empty day (%d errors)",
                index,
                exc.error_count(),
                extra={"ctx_day_index": index},
            )
            parsed.append(TrainingDay())
    return parsed


def compose_schedule(days: Iterable[Any], start_date: Optional[DateLike], now: Optional[DateLike] = None) -> list[WeeklyBlock]:
    """Date every plan day from ``start_date`` and group them positionally by seven.

    Blocks are plan weeks (days 0-6, 7-13, ...), not calendar weeks, and a
    short final block is kept. An unreadable start date yields no blocks.
    """
    try:
        today = to_date(now) if now is not None else date.today()
        start = to_date(start_date) if start_date is not None else today
    except ValueError as exc:
        logger.warning("cannot compose schedule: %s", exc)
        return []

    blocks: list[WeeklyBlock] = []
    for index, day in enumerate(_training_days(days)):
        day_date = start + timedelta(days=index)
        if index % DAYS_PER_WEEK == 0:
            blocks.append(WeeklyBlock(week_number=len(blocks) + 1, week_start=day_date.isoformat(), days=[]))
        blocks[-1].days.append(
            DayView(
                index=index,
                date=day_date.isoformat(),
                is_today=day_date == today,
                is_past=day_date < today,
                activities=list(day.activities),
                note=day.note,
            )
        )
    return blocks


def flatten_blocks(blocks: Iterable[WeeklyBlock]) -> list[DayView]:
    return [day for block in blocks for day in block.days]


def plan_end_date(start_date: DateLike, day_count: int) -> Optional[date]:
    """Date of the last plan day, or None for an empty plan."""
    if day_count <= 0:
        return None
    return to_date(start_date) + timedelta(days=day_count - 1)


def todays_workout(days: Iterable[Any], start_date: Optional[DateLike], now: Optional[DateLike] = None) -> Optional[DayView]:
    """The day flagged as today, if ``now`` falls inside the plan."""
    for day in flatten_blocks(compose_schedule(days, start_date, now)):
        if day.is_today:
            return day
    return None
