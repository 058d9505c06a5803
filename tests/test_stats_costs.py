from __future__ import annotations

import pytest

from tilecost.services import costs
from tilecost.services.aggregate import ArmorStat, Chassis, Targeting, Tile, TileType
from tilecost.services.errors import UnresolvedReferenceData


def _tile(tile_type: TileType = TileType.VEHICLE, armor: int = 2, chassis_cost: float = 20) -> Tile:
    chassis = Chassis(
        name="Tracked hull",
        tile_type=tile_type,
        cost=chassis_cost,
        tile_class=1,
        armor_stats={
            1: ArmorStat(level=1, cost=2),
            2: ArmorStat(level=2, cost=5),
        },
    )
    return Tile(
        name="Tank",
        chassis=chassis,
        armor=armor,
        targeting=Targeting(id=3, name="direct"),
        assault_id=2,
    )


def test_stats_cost_sums_chassis_armor_and_attributes():
    assert costs.stats_cost(_tile()) == 30


def test_stats_cost_uses_selected_armor_level():
    assert costs.stats_cost(_tile(armor=1)) == 27


def test_stats_components_are_truncated():
    assert costs.stats_cost(_tile(chassis_cost=20.9)) == 30


def test_building_stats_are_free():
    assert costs.stats_cost(_tile(TileType.BUILDING)) == 0


def test_missing_armor_level_is_unresolved():
    with pytest.raises(UnresolvedReferenceData) as excinfo:
        costs.stats_cost(_tile(armor=7))
    assert excinfo.value.kind == "armor level"
    assert excinfo.value.owner == "Tracked hull"
