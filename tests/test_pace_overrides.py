"""Tests for override layering, custom paces and the global adjustment."""

from __future__ import annotations

from paceplan.config import Settings
from paceplan.services.fitness_index import pace_table_for
from paceplan.services.pace_overrides import (
    PaceOverrides,
    apply_global_adjustment,
    change_basis,
    derive_all,
    pace_map,
    reset_all_paces,
    reset_pace,
    resolve_paces,
    set_custom_pace,
)


def _overrides(**custom):
    return PaceOverrides(base_time="00:19:57", base_distance="5km", overrides=custom)


def test_from_override_map_reads_flat_keys():
    overrides = PaceOverrides.from_override_map(
        {
            "baseTime": "00:41:21",
            "baseDistance": "10km",
            "adjustmentFactor": "105",
            "startDate": "2024-01-01",
            "custom_Easy Km": "5:40",
            "custom_T Km": "",
            "unrelated": "x",
        }
    )
    assert overrides.base_time == "00:41:21"
    assert overrides.base_distance == "10km"
    assert overrides.adjustment_factor == 105.0
    assert overrides.start_date == "2024-01-01"
    assert dict(overrides.overrides) == {"Easy Km": "5:40"}


def test_from_override_map_defaults():
    settings = Settings(default_base_time="00:22:00", default_base_distance="5km")
    overrides = PaceOverrides.from_override_map({"adjustmentFactor": "abc"}, settings)
    assert overrides.base_time == "00:22:00"
    assert overrides.adjustment_factor == 100.0
    assert overrides.start_date is None
    assert dict(overrides.overrides) == {}


def test_override_map_round_trip():
    overrides = PaceOverrides("00:19:57", "5km", 95.0, "2024-03-04", {"I Km": "3:50"})
    assert overrides.to_override_map() == {
        "baseTime": "00:19:57",
        "baseDistance": "5km",
        "adjustmentFactor": "95",
        "startDate": "2024-03-04",
        "custom_I Km": "3:50",
    }
    assert PaceOverrides.from_override_map(overrides.to_override_map()) == overrides


def test_resolve_without_overrides_uses_table(small_tables):
    table = pace_table_for(50, small_tables)
    paces = resolve_paces(table, _overrides())
    assert [p.name for p in paces] == list(table)
    assert all(p.value == p.default and not p.is_custom for p in paces)
    assert pace_map(paces)["Easy Km"].description
    assert pace_map(paces)["Easy Km"].display_name == "Easy"
    assert pace_map(paces)["R 1000m"].display_name == "Repetition 1000m"


def test_valid_override_wins(small_tables):
    paces = pace_map(resolve_paces(pace_table_for(50, small_tables), _overrides(**{"T Km": "4:10/km"})))
    assert paces["T Km"].value == "4:10"
    assert paces["T Km"].default == "4:15"
    assert paces["T Km"].is_custom


def test_invalid_override_falls_back(small_tables):
    paces = pace_map(resolve_paces(pace_table_for(50, small_tables), _overrides(**{"T Km": "fast"})))
    assert paces["T Km"].value == "4:15"
    assert not paces["T Km"].is_custom


def test_override_equal_to_default_is_not_custom(small_tables):
    paces = pace_map(resolve_paces(pace_table_for(50, small_tables), _overrides(**{"M Km": "4:31"})))
    assert not paces["M Km"].is_custom


def test_resolve_accepts_flat_map(small_tables):
    paces = pace_map(resolve_paces(pace_table_for(50, small_tables), {"custom_I Km": "3:50"}))
    assert paces["I Km"].value == "3:50"


def test_set_custom_pace_valid():
    update = set_custom_pace(_overrides(), "Easy Km", " 5:45 ", {"Easy Km": "5:30"})
    assert update.ok
    assert dict(update.overrides.overrides) == {"Easy Km": "5:45"}


def test_set_custom_pace_rejects_invalid_and_keeps_state():
    before = _overrides(**{"Easy Km": "5:40"})
    update = set_custom_pace(before, "Easy Km", "5:75", {"Easy Km": "5:30"})
    assert not update.ok
    assert "Invalid pace" in update.error
    assert update.overrides is before


def test_set_custom_pace_unknown_name():
    update = set_custom_pace(_overrides(), "Z Km", "5:00", {"Easy Km": "5:30"})
    assert not update.ok
    assert "Unknown pace" in update.error


def test_set_custom_pace_back_to_default_clears_override():
    update = set_custom_pace(_overrides(**{"Easy Km": "5:40"}), "Easy Km", "5:30", {"Easy Km": "5:30"})
    assert update.ok
    assert dict(update.overrides.overrides) == {}


def test_reset_single_and_all():
    overrides = PaceOverrides("00:19:57", "5km", 105.0, None, {"Easy Km": "5:46", "T Km": "4:28"})
    assert dict(reset_pace(overrides, "Easy Km").overrides) == {"T Km": "4:28"}
    cleared = reset_all_paces(overrides)
    assert dict(cleared.overrides) == {}
    assert cleared.adjustment_factor == 100.0


def test_apply_global_adjustment(small_tables):
    table = pace_table_for(50, small_tables)
    update = apply_global_adjustment(table, _overrides(**{"Easy Km": "5:00"}), 105)
    assert update.ok
    assert update.overrides.adjustment_factor == 105.0
    assert dict(update.overrides.overrides) == {
        "Recovery Km": "6:10",
        "Easy Km": "5:46",
        "M Km": "4:45",
        "T Km": "4:28",
        "I Km": "4:07",
        "R 1000m": "3:52",
    }
    resolved = pace_map(resolve_paces(table, update.overrides))
    assert resolved["Easy Km"].value == "5:46"
    assert resolved["Easy Km"].is_custom


def test_neutral_adjustment_clears_overrides(small_tables):
    update = apply_global_adjustment(pace_table_for(50, small_tables), _overrides(**{"Easy Km": "5:00"}), 100)
    assert dict(update.overrides.overrides) == {}


def test_apply_global_adjustment_rejects_bad_factor(small_tables):
    update = apply_global_adjustment(pace_table_for(50, small_tables), _overrides(), 0)
    assert not update.ok


def test_change_basis_resets_factor():
    overrides = PaceOverrides("00:19:57", "5km", 110.0, None, {"Easy Km": "6:03"})
    changed = change_basis(overrides, "00:41:21", "10km")
    assert changed.base_distance == "10km"
    assert changed.adjustment_factor == 100.0
    assert dict(changed.overrides) == {}


def test_change_basis_keeps_hand_set_paces():
    overrides = PaceOverrides("00:19:57", "5km", 100.0, None, {"Easy Km": "6:03"})
    changed = change_basis(overrides, "00:41:21", "10km")
    assert changed.base_time == "00:41:21"
    assert dict(changed.overrides) == {"Easy Km": "6:03"}


def test_change_basis_after_adjustment(small_tables):
    adjusted = apply_global_adjustment(pace_table_for(50, small_tables), _overrides(), 105).overrides
    changed = change_basis(adjusted, "00:41:21", "10km")
    resolved = derive_all(changed, small_tables)
    assert all(not p.is_custom for p in resolved.paces)
    assert pace_map(resolved.paces)["Easy Km"].value == "5:30"


def test_derive_all(small_tables):
    derived = derive_all(_overrides(**{"I Km": "3:50"}), small_tables)
    assert derived.index == 50
    assert derived.table["Easy Km"] == "5:30"
    assert pace_map(derived.paces)["I Km"].value == "3:50"
    assert derived.adjustment_factor == 100.0


def test_derive_all_default_tables():
    derived = derive_all(_overrides())
    assert derived.index == 50
    assert derived.table["Easy Km"] == "5:30"
    assert derived.table["T Km"] == "4:15"
