"""Authoritative tile cost calculator and client cost diff."""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypedDict

from ..data.reference import ANTI_MISSILE_SYSTEM_LABEL, STEALTH_LABEL
from .aggregate import Ability, MountCategory, Tile, TileType, TileWeapon
from .errors import (
    AbilityNotApplicable,
    CostResult,
    UnhandledTileType,
    UnresolvedReferenceData,
)
from .utils import loose_equals, round_half_up

logger = logging.getLogger(__name__)


TILE_WEAPON_TYPE_MULTIPLIERS = {
    MountCategory.GROUND.value: 10 / 13,
    MountCategory.WITH_AA.value: 1,
    MountCategory.ONLY_AA.value: 4 / 13,
}

MIN_WEAPON_UNIT_COST = 1

DIFF_KEYS = ("total", "tile_weapons", "abilities", "stats")


class BreakdownItem(TypedDict):
    name: str
    cost: int


class WeaponLine(TypedDict):
    name: str
    unit_cost: int
    quantity: int
    cost: int


class _DiffRowBase(TypedDict):
    key: str
    submitted: Any
    computed: int


class DiffRow(_DiffRowBase, total=False):
    breakdown: list[BreakdownItem]


def stats_cost(tile: Tile) -> int:
    if tile.is_building:
        return 0

    armor_stat = tile.chassis.armor_stat(tile.armor)
    cost = 0
    cost += int(tile.assault_id)
    cost += int(tile.targeting.id)
    cost += int(tile.chassis.cost)
    cost += int(armor_stat.cost)
    return cost


def tile_weapon_type_cost(tile_weapon_type: MountCategory | str) -> float:
    name = tile_weapon_type.value if isinstance(tile_weapon_type, MountCategory) else tile_weapon_type
    try:
        return TILE_WEAPON_TYPE_MULTIPLIERS[name]
    except KeyError:
        raise UnresolvedReferenceData("weapon mount category", name) from None


def tile_weapon_cost(tile: Tile, tile_weapon: TileWeapon) -> WeaponLine:
    weapon = tile_weapon.weapon
    attack_cost = weapon.attack_cost(tile.targeting.name)
    arc_multiplier = tile_weapon.arc_size.cost_multiplier
    type_multiplier = tile_weapon_type_cost(tile_weapon.category_name)

    # Rounded after the arc multiplier and again after the category multiplier.
    base_cost = round_half_up(attack_cost * arc_multiplier)
    category_cost = round_half_up(base_cost * type_multiplier)
    unit_cost = max(category_cost, MIN_WEAPON_UNIT_COST)
    quantity = int(tile_weapon.quantity)
    return {
        "name": weapon.name,
        "unit_cost": unit_cost,
        "quantity": quantity,
        "cost": unit_cost * quantity,
    }


def weapon_cost_breakdown(tile: Tile) -> list[WeaponLine]:
    if tile.is_building:
        return []
    return [tile_weapon_cost(tile, tile_weapon) for tile_weapon in tile.tile_weapons]


def weapon_cost(tile: Tile) -> int:
    return sum(line["cost"] for line in weapon_cost_breakdown(tile))


def warhead_weapon_cost(tile: Tile) -> int:
    """Severity-weighted munitions count of warhead weapons, not a price."""
    total_value = 0
    for tile_weapon in tile.tile_weapons:
        weapon = tile_weapon.weapon
        if weapon.has_warheads:
            total_value += int(weapon.weapon_class) * int(tile_weapon.quantity)
    return total_value


def _required_price(value: int | None, column: str, ability: Ability) -> CostResult:
    if value is None:
        return CostResult.failure(
            UnresolvedReferenceData(column, None, owner=ability.display_name)
        )
    return CostResult.success(int(value))


def ability_cost(tile: Tile, ability: Ability) -> CostResult:
    tile_type = tile.tile_type

    if not ability.is_valid_tile_type(tile_type):
        return CostResult.failure(AbilityNotApplicable(ability.display_name, tile_type))

    if ability.cost_static:
        return CostResult.success(int(ability.cost_static))

    if tile_type == TileType.INFANTRY:
        return _required_price(ability.cost_infantry, "infantry cost", ability)

    if tile_type == TileType.CAVALRY:
        return _required_price(ability.cost_cavalry, "cavalry cost", ability)

    if tile_type == TileType.VEHICLE:
        multiplier = float(ability.warhead_cost_multiplier or 0)
        if multiplier > 0:
            # Truncated toward zero like every other ability price.
            return CostResult.success(int(warhead_weapon_cost(tile) * multiplier))

        tile_class = tile.tile_class
        if tile_class not in ability.vehicle_class_costs:
            return CostResult.failure(
                UnresolvedReferenceData("vehicle class", tile_class, owner=ability.display_name)
            )
        return _required_price(
            ability.vehicle_class_costs[tile_class],
            f"vehicle class {tile_class} cost",
            ability,
        )

    if tile_type == TileType.BUILDING:
        return CostResult.success(0)

    return CostResult.failure(UnhandledTileType(tile_type))


def abilities_cost_breakdown(tile: Tile) -> CostResult:
    results: list[BreakdownItem] = []
    for ability in tile.abilities:
        priced = ability_cost(tile, ability)
        if not priced.ok:
            logger.debug("Ability pricing failed for tile %s: %s", tile.name, priced.error)
            return priced
        results.append({"name": ability.display_name, "cost": priced.value})

    if tile.stealth:
        results.append({"name": STEALTH_LABEL, "cost": int(tile.stealth)})

    ams = tile.anti_missile_system
    if ams is not None and ams.cost:
        results.append({"name": ANTI_MISSILE_SYSTEM_LABEL, "cost": int(ams.cost)})

    return CostResult.success(results)


def abilities_cost(tile: Tile) -> int:
    breakdown = abilities_cost_breakdown(tile).unwrap()
    return sum(item["cost"] for item in breakdown)


def total(tile: Tile) -> int:
    if tile.is_building:
        return 0

    cost = stats_cost(tile)
    cost += weapon_cost(tile)
    cost += abilities_cost(tile)
    return cost


def cost_report(tile: Tile) -> dict[str, Any]:
    abilities_breakdown = abilities_cost_breakdown(tile).unwrap()
    weapons_breakdown = weapon_cost_breakdown(tile)
    return {
        "total": total(tile),
        "stats": stats_cost(tile),
        "tile_weapons": sum(line["cost"] for line in weapons_breakdown),
        "abilities": sum(item["cost"] for item in abilities_breakdown),
        "tile_weapons_breakdown": weapons_breakdown,
        "abilities_breakdown": abilities_breakdown,
    }


def _submitted_value(submitted: Mapping[str, Any] | Any, key: str) -> Any:
    if submitted is None:
        return None
    if isinstance(submitted, Mapping):
        return submitted.get(key)
    return getattr(submitted, key, None)


def get_cost_diff(tile: Tile, submitted: Mapping[str, Any] | Any) -> list[DiffRow]:
    """Rows for every cost category where the client value disagrees.

    Categories are compared in the fixed order total, tile_weapons, abilities,
    stats. Matching categories produce no row.
    """
    abilities_breakdown = abilities_cost_breakdown(tile).unwrap()
    computed = {
        "total": total(tile),
        "tile_weapons": weapon_cost(tile),
        "abilities": sum(item["cost"] for item in abilities_breakdown),
        "stats": stats_cost(tile),
    }

    diff: list[DiffRow] = []
    for key in DIFF_KEYS:
        submitted_value = _submitted_value(submitted, key)
        if loose_equals(submitted_value, computed[key]):
            continue
        row: DiffRow = {
            "key": key,
            "submitted": submitted_value,
            "computed": computed[key],
        }
        if key == "abilities":
            row["breakdown"] = abilities_breakdown
        diff.append(row)
    return diff
