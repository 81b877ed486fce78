"""Fitness index lookup and training pace tables.

The fitness index is a VDOT-style score: a runner's recent race result is
matched against the race reference table and the closest row's index is
used to look up the named training paces. Nothing is computed analytically
here; both steps are table lookups, so results are approximate by nature.
"""

from __future__ import annotations

import logging
from typing import Optional

from paceplan.services.pace_format import time_to_seconds
from paceplan.services.reference_tables import ReferenceTables, load_reference_tables

logger = logging.getLogger(__name__)

# Paces every plan needs to render its activities.
ESSENTIAL_PACES: tuple[str, ...] = ("Easy Km", "Recovery Km", "T Km", "I Km", "R 1000m", "M Km")

# Easy and recovery runs are prescribed as a band rather than a single pace.
RANGE_PACES: frozenset[str] = frozenset({"Recovery Km", "Easy Km"})

PACE_DESCRIPTIONS: dict[str, str] = {
    "Recovery Km": "Very light running for active recovery after hard sessions",
    "Easy Km": "Conversational pace for most of the weekly volume",
    "M Km": "Marathon pace, sustainable for long races",
    "T Km": "Threshold pace, comfortably hard and sustainable for about an hour",
    "I Km": "Interval pace for VO2max work in 3-5 minute repeats",
    "R 1000m": "Repetition pace for speed and running economy",
    "T 400m": "Split for 400m at threshold pace",
    "I 400m": "Split for 400m at interval pace",
    "I 800m": "Split for 800m at interval pace",
    "I 1200m": "Split for 1200m at interval pace",
    "R 200m": "Split for 200m at repetition pace",
    "R 400m": "Split for 400m at repetition pace",
    "R 800m": "Split for 800m at repetition pace",
}

PACE_DISPLAY_NAMES: dict[str, str] = {
    "Recovery Km": "Recovery",
    "Easy Km": "Easy",
    "M Km": "Marathon",
    "T Km": "Threshold",
    "I Km": "Interval",
    "R 1000m": "Repetition 1000m",
    "T 400m": "Threshold 400m",
    "I 400m": "Interval 400m",
    "I 800m": "Interval 800m",
    "I 1200m": "Interval 1200m",
    "R 200m": "Repetition 200m",
    "R 400m": "Repetition 400m",
    "R 800m": "Repetition 800m",
}


def resolve_fitness_index(time: str, distance_key: str, tables: Optional[ReferenceTables] = None) -> Optional[int]:
    """Return the index of the race row whose time at ``distance_key`` is closest to ``time``.

    Rows are scanned in ascending index order and the first minimum wins.
    An unknown distance falls back to the first row; an empty table yields
    ``None``.
    """
    tables = tables if tables is not None else load_reference_tables()
    if not tables.races:
        logger.warning("fitness index lookup on an empty race table")
        return None

    input_seconds = time_to_seconds(time)
    best_index: Optional[int] = None
    best_diff = float("inf")
    for row in tables.races:
        row_time = row.get(distance_key)
        if row_time is None:
            continue
        diff = abs(time_to_seconds(row_time) - input_seconds)
        if diff < best_diff:
            best_diff = diff
            best_index = row.index

    if best_index is None:
        logger.info("unknown distance %r, falling back to index %s", distance_key, tables.races[0].index)
        return tables.races[0].index
    return best_index


def pace_table_for(index: Optional[int], tables: Optional[ReferenceTables] = None) -> dict[str, str]:
    """Look up the training paces for an exact fitness index; empty when missing."""
    if index is None:
        return {}
    tables = tables if tables is not None else load_reference_tables()
    row = tables.pace_row(index)
    if row is None:
        logger.info("no pace row for index %s", index)
        return {}
    return dict(row.values)


def index_percentage(index: Optional[int], ceiling: int = 85) -> float:
    """Position of an index on the 0-100 gauge shown next to the calculators."""
    if not index or ceiling <= 0:
        return 0.0
    return round(min(100.0, index / ceiling * 100), 1)
