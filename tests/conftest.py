from __future__ import annotations

import pytest

from paceplan.services.reference_tables import ReferenceTables


@pytest.fixture
def small_tables() -> ReferenceTables:
    """Three-row synthetic tables for lookup tests."""
    return ReferenceTables.from_dict(
        {
            "races": [
                {"index": 40, "5km": "00:24:08", "10km": "00:50:03"},
                {"index": 45, "5km": "00:21:50", "10km": "00:45:16"},
                {"index": 50, "5km": "00:19:57", "10km": "00:41:21"},
            ],
            "paces": [
                {"index": 40, "Recovery Km": "6:58", "Easy Km": "6:33", "M Km": "5:26", "T Km": "5:06", "I Km": "4:41", "R 1000m": "4:25"},
                {"index": 45, "Recovery Km": "6:25", "Easy Km": "6:02", "M Km": "4:59", "T Km": "4:41", "I Km": "4:18", "R 1000m": "4:04"},
                {"index": 50, "Recovery Km": "5:52", "Easy Km": "5:30", "M Km": "4:31", "T Km": "4:15", "I Km": "3:55", "R 1000m": "3:41"},
            ],
        }
    )
