from __future__ import annotations

from types import SimpleNamespace

import pytest

from tilecost.schemas import SubmittedCosts
from tilecost.services import costs
from tilecost.services.aggregate import (
    Ability,
    ArcSize,
    ArmorStat,
    Chassis,
    MountCategory,
    Targeting,
    Tile,
    TileType,
    TileWeapon,
    Weapon,
)
from tilecost.services.errors import AbilityNotApplicable


def _tile(abilities=(), stealth: int | None = 4) -> Tile:
    chassis = Chassis(
        name="Tracked hull",
        tile_type=TileType.VEHICLE,
        cost=20,
        tile_class=1,
        armor_stats={2: ArmorStat(level=2, cost=5)},
    )
    cannon = TileWeapon(
        weapon=Weapon(name="Cannon", attack_costs={"direct": 13}),
        arc_size=ArcSize(name="Front", cost_multiplier=1),
        category=MountCategory.GROUND,
        quantity=2,
    )
    return Tile(
        name="Tank",
        chassis=chassis,
        armor=2,
        targeting=Targeting(id=3, name="direct"),
        assault_id=2,
        tile_weapons=(cannon,),
        abilities=tuple(abilities),
        stealth=stealth,
    )


MATCHING = {"total": 54, "tile_weapons": 20, "abilities": 4, "stats": 30}


def test_matching_vector_has_no_diff():
    assert costs.get_cost_diff(_tile(), MATCHING) == []


def test_numeric_strings_compare_by_value():
    submitted = {"total": "54", "tile_weapons": "20.0", "abilities": 4.0, "stats": " 30 "}

    assert costs.get_cost_diff(_tile(), submitted) == []


def test_only_mismatching_rows_are_returned():
    submitted = dict(MATCHING, stats=31, tile_weapons=19)

    diff = costs.get_cost_diff(_tile(), submitted)

    assert diff == [
        {"key": "tile_weapons", "submitted": 19, "computed": 20},
        {"key": "stats", "submitted": 31, "computed": 30},
    ]


def test_abilities_row_carries_breakdown():
    submitted = dict(MATCHING, abilities=0)

    diff = costs.get_cost_diff(_tile(), submitted)

    assert diff == [
        {
            "key": "abilities",
            "submitted": 0,
            "computed": 4,
            "breakdown": [{"name": "Stealth", "cost": 4}],
        }
    ]


def test_missing_fields_are_not_zero():
    tile = _tile(stealth=None)

    diff = costs.get_cost_diff(tile, {"total": 50, "tile_weapons": 20, "stats": 30})

    assert [row["key"] for row in diff] == ["abilities"]
    assert diff[0]["submitted"] is None
    assert diff[0]["computed"] == 0


def test_empty_submission_reports_every_category_in_order():
    diff = costs.get_cost_diff(_tile(), {})

    assert [row["key"] for row in diff] == ["total", "tile_weapons", "abilities", "stats"]
    assert all(row["submitted"] is None for row in diff)
    assert [("breakdown" in row) for row in diff] == [False, False, True, False]


def test_non_numeric_submission_is_a_mismatch():
    diff = costs.get_cost_diff(_tile(), dict(MATCHING, total="lots"))

    assert diff == [{"key": "total", "submitted": "lots", "computed": 54}]


def test_accepts_objects_with_cost_attributes():
    assert costs.get_cost_diff(_tile(), SubmittedCosts(**MATCHING)) == []
    assert costs.get_cost_diff(_tile(), SimpleNamespace(**MATCHING)) == []


def test_diff_propagates_ability_faults():
    tile = _tile(abilities=[Ability(display_name="Dig in", tile_types=frozenset({TileType.INFANTRY}))])

    with pytest.raises(AbilityNotApplicable):
        costs.get_cost_diff(tile, MATCHING)
