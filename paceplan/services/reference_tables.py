"""Static race-time and training-pace reference tables.

Both tables are keyed by fitness index (a VDOT-style score from 30 to 85).
The race table holds predicted finish times per distance, the pace table the
named training paces for the same index. The shipped values follow the
Daniels/Gilbert oxygen-cost model; they are loaded from a JSON asset so tests
and deployments can inject their own tables.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

RACE_DISTANCE_KEYS: tuple[str, ...] = ("1500m", "1600m", "3km", "3200m", "5km", "10km", "15km", "21km", "42km")

# Exact race distances in km for each table key.
RACE_DISTANCES_KM: dict[str, float] = {
    "1500m": 1.5,
    "1600m": 1.6,
    "3km": 3.0,
    "3200m": 3.2,
    "5km": 5.0,
    "10km": 10.0,
    "15km": 15.0,
    "21km": 21.0975,
    "42km": 42.195,
}


@dataclass(frozen=True)
class ReferenceRow:
    index: int
    values: Mapping[str, str]

    def get(self, key: str) -> Optional[str]:
        value = self.values.get(key)
        return value if isinstance(value, str) and value else None


def _rows(raw_rows: Iterable[Mapping[str, Any]]) -> tuple[ReferenceRow, ...]:
    rows = []
    for raw in raw_rows:
        values = {k: str(v) for k, v in raw.items() if k != "index" and v is not None}
        rows.append(ReferenceRow(index=int(raw["index"]), values=MappingProxyType(values)))
    return tuple(rows)


@dataclass(frozen=True)
class ReferenceTables:
    """Immutable pair of race and pace tables, rows in ascending index order."""

    races: tuple[ReferenceRow, ...]
    paces: tuple[ReferenceRow, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReferenceTables":
        races = sorted(_rows(data.get("races", [])), key=lambda r: r.index)
        paces = sorted(_rows(data.get("paces", [])), key=lambda r: r.index)
        return cls(races=tuple(races), paces=tuple(paces))

    @classmethod
    def empty(cls) -> "ReferenceTables":
        return cls(races=(), paces=())

    def race_row(self, index: Optional[int]) -> Optional[ReferenceRow]:
        return next((r for r in self.races if r.index == index), None)

    def pace_row(self, index: Optional[int]) -> Optional[ReferenceRow]:
        return next((r for r in self.paces if r.index == index), None)

    @property
    def index_range(self) -> tuple[int, int] | None:
        if not self.races:
            return None
        return self.races[0].index, self.races[-1].index


@lru_cache(maxsize=8)
def _load(path: str) -> ReferenceTables:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    tables = ReferenceTables.from_dict(data)
    logger.debug("reference tables loaded from %s (%d race rows, %d pace rows)", path, len(tables.races), len(tables.paces))
    return tables


def load_reference_tables(path: str | Path | None = None) -> ReferenceTables:
    """Load (and cache) tables from ``path``, defaulting to the configured asset."""
    if path is None:
        from paceplan.config import get_settings

        path = get_settings().reference_tables_path
    return _load(str(path))
