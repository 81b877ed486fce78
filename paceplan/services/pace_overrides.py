"""Layering of table defaults and user overrides into resolved paces.

A user's customisation of a plan is a small set of inputs: the benchmark
race (time and distance), the global adjustment factor, the plan start date
and any per-pace overrides. :class:`PaceOverrides` holds them explicitly;
the flat ``custom_<PaceName>`` map used by the document store is only a
serialisation of it.

Resolution never applies the adjustment factor silently. Applying a factor
is an explicit action that writes the adjusted paces as overrides, so the
resolved value of a pace is always either its valid override or its table
default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Union

from paceplan.config import Settings, get_settings
from paceplan.services.fitness_index import PACE_DESCRIPTIONS, PACE_DISPLAY_NAMES, pace_table_for, resolve_fitness_index
from paceplan.services.pace_adjustment import FACTOR_NEUTRAL, adjust_pace
from paceplan.services.pace_format import normalize_pace
from paceplan.services.reference_tables import ReferenceTables

logger = logging.getLogger(__name__)

CUSTOM_PREFIX = "custom_"


@dataclass(frozen=True)
class PaceSetting:
    """A resolved, display-ready pace."""
    name: str
    value: str
    default: str
    is_custom: bool
    description: str = ""
    display_name: str = ""


def _parse_factor(raw: Any) -> float:
    try:
        factor = float(raw)
    except (TypeError, ValueError):
        return FACTOR_NEUTRAL
    return factor if factor > 0 else FACTOR_NEUTRAL


def _format_factor(factor: float) -> str:
    return f"{factor:g}"


@dataclass(frozen=True)
class PaceOverrides:
    """Persisted customisation state for one user and one plan."""

    base_time: str
    base_distance: str
    adjustment_factor: float = FACTOR_NEUTRAL
    start_date: Optional[str] = None
    overrides: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_override_map(cls, raw: Optional[Mapping[str, Any]], settings: Optional[Settings] = None) -> "PaceOverrides":
        """Read the flat stored map; missing entries fall back to configured defaults."""
        settings = settings or get_settings()
        raw = raw or {}
        overrides = {
            key[len(CUSTOM_PREFIX):]: value
            for key, value in raw.items()
            if key.startswith(CUSTOM_PREFIX) and isinstance(value, str) and value
        }
        return cls(
            base_time=str(raw.get("baseTime") or settings.default_base_time),
            base_distance=str(raw.get("baseDistance") or settings.default_base_distance),
            adjustment_factor=_parse_factor(raw.get("adjustmentFactor", FACTOR_NEUTRAL)),
            start_date=raw.get("startDate") or None,
            overrides=overrides,
        )

    def to_override_map(self) -> dict[str, str]:
        """Serialise back to the flat map the document store persists whole."""
        out = {
            "baseTime": self.base_time,
            "baseDistance": self.base_distance,
            "adjustmentFactor": _format_factor(self.adjustment_factor),
        }
        if self.start_date:
            out["startDate"] = self.start_date
        for name, value in self.overrides.items():
            out[f"{CUSTOM_PREFIX}{name}"] = value
        return out


@dataclass(frozen=True)
class OverrideUpdate:
    """Outcome of a user edit: the new state, or the old state plus a message."""
    overrides: PaceOverrides
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DerivedPaces:
    index: Optional[int]
    table: dict[str, str]
    paces: list[PaceSetting]
    adjustment_factor: float


OverridesLike = Union[PaceOverrides, Mapping[str, Any]]


def _custom_values(overrides: OverridesLike) -> Mapping[str, str]:
    if isinstance(overrides, PaceOverrides):
        return overrides.overrides
    return PaceOverrides.from_override_map(overrides).overrides


def resolve_paces(pace_table: Mapping[str, str], overrides: OverridesLike) -> list[PaceSetting]:
    """Merge table defaults with custom overrides, in table order.

    An override wins only when it parses as a valid pace; otherwise the
    default is used and the pace is not marked custom.
    """
    custom = _custom_values(overrides)
    settings: list[PaceSetting] = []
    for name, default in pace_table.items():
        value = default
        raw = custom.get(name)
        if raw is not None:
            normalized = normalize_pace(raw)
            if normalized:
                value = normalized
            else:
                logger.debug("ignoring invalid override %r for %s", raw, name)
        settings.append(
            PaceSetting(
                name=name,
                value=value,
                default=default,
                is_custom=value != default,
                description=PACE_DESCRIPTIONS.get(name, ""),
                display_name=PACE_DISPLAY_NAMES.get(name, name),
            )
        )
    return settings


def pace_map(settings: list[PaceSetting]) -> dict[str, PaceSetting]:
    return {s.name: s for s in settings}


def set_custom_pace(overrides: PaceOverrides, name: str, raw_value: str, pace_table: Optional[Mapping[str, str]] = None) -> OverrideUpdate:
    """Record a user-entered pace; invalid input keeps the prior state and reports why."""
    if pace_table is not None and name not in pace_table:
        return OverrideUpdate(overrides, error=f"Unknown pace '{name}'")
    normalized = normalize_pace(raw_value)
    if not normalized:
        return OverrideUpdate(overrides, error=f"Invalid pace '{raw_value}' for {name}: use MM:SS, e.g. 5:30")
    updated = dict(overrides.overrides)
    if pace_table is not None and pace_table.get(name) == normalized:
        updated.pop(name, None)
    else:
        updated[name] = normalized
    return OverrideUpdate(replace(overrides, overrides=updated))


def reset_pace(overrides: PaceOverrides, name: str) -> PaceOverrides:
    updated = {k: v for k, v in overrides.overrides.items() if k != name}
    return replace(overrides, overrides=updated)


def reset_all_paces(overrides: PaceOverrides) -> PaceOverrides:
    """Drop every override and return the adjustment factor to neutral."""
    return replace(overrides, overrides={}, adjustment_factor=FACTOR_NEUTRAL)


def apply_global_adjustment(pace_table: Mapping[str, str], overrides: PaceOverrides, factor: float) -> OverrideUpdate:
    """Scale every table default by ``factor`` and store the results as overrides.

    Existing overrides are replaced. Paces the factor leaves unchanged are
    not stored, so a neutral factor clears every override.
    """
    if factor is None or factor <= 0:
        return OverrideUpdate(overrides, error=f"Invalid adjustment factor '{factor}'")
    adjusted: dict[str, str] = {}
    for name, default in pace_table.items():
        value = adjust_pace(default, factor)
        if value and value != default:
            adjusted[name] = value
    logger.debug("applied adjustment factor %s to %d paces", factor, len(adjusted))
    return OverrideUpdate(replace(overrides, overrides=adjusted, adjustment_factor=float(factor)))


def change_basis(overrides: PaceOverrides, base_time: str, base_distance: str) -> PaceOverrides:
    """Switch the benchmark race; the adjustment factor returns to neutral.

    Overrides written by a global adjustment were scaled from the old table,
    so they are dropped together with the factor. Hand-set overrides under a
    neutral factor are kept.
    """
    kept = overrides.overrides if overrides.adjustment_factor == FACTOR_NEUTRAL else {}
    if not kept and overrides.overrides:
        logger.info("basis change dropped %d adjusted paces", len(overrides.overrides))
    return replace(
        overrides,
        base_time=base_time,
        base_distance=base_distance,
        adjustment_factor=FACTOR_NEUTRAL,
        overrides=kept,
    )


def derive_all(overrides: PaceOverrides, tables: Optional[ReferenceTables] = None) -> DerivedPaces:
    """Recompute index, pace table and resolved paces together from the inputs."""
    index = resolve_fitness_index(overrides.base_time, overrides.base_distance, tables)
    table = pace_table_for(index, tables)
    return DerivedPaces(
        index=index,
        table=table,
        paces=resolve_paces(table, overrides),
        adjustment_factor=overrides.adjustment_factor,
    )
