from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from .. import models
from . import aggregate
from .errors import UnresolvedReferenceData

logger = logging.getLogger(__name__)


def _tile_type(chassis: models.Chassis) -> aggregate.TileType:
    try:
        return aggregate.TileType(chassis.tile_type_id)
    except ValueError:
        raise UnresolvedReferenceData("tile type", chassis.tile_type_id, owner=chassis.name) from None


def _mount_category(tile_weapon: models.TileWeapon) -> aggregate.MountCategory:
    name = tile_weapon.tile_weapon_type.name if tile_weapon.tile_weapon_type else None
    try:
        return aggregate.MountCategory(name)
    except ValueError:
        raise UnresolvedReferenceData("weapon mount category", name) from None


def chassis_from_model(chassis: models.Chassis) -> aggregate.Chassis:
    return aggregate.Chassis(
        name=chassis.name,
        tile_type=_tile_type(chassis),
        cost=chassis.cost or 0,
        tile_class=chassis.tile_class_id,
        armor_stats={
            stat.armor: aggregate.ArmorStat(level=stat.armor, cost=stat.cost or 0)
            for stat in chassis.armor_stats
        },
    )


def weapon_from_model(weapon: models.Weapon) -> aggregate.Weapon:
    return aggregate.Weapon(
        name=weapon.name,
        attack_costs={
            attack_cost.targeting.name: attack_cost.cost for attack_cost in weapon.attack_costs
        },
        weapon_class=weapon.weapon_class or 0,
        has_warheads=bool(weapon.has_warheads),
    )


def tile_weapon_from_model(tile_weapon: models.TileWeapon) -> aggregate.TileWeapon:
    arc_size = tile_weapon.arc_size
    quantity = int(tile_weapon.quantity or 0)
    if quantity < 0:
        raise UnresolvedReferenceData("weapon quantity", quantity, owner=tile_weapon.weapon.name)
    return aggregate.TileWeapon(
        weapon=weapon_from_model(tile_weapon.weapon),
        arc_size=aggregate.ArcSize(name=arc_size.name, cost_multiplier=arc_size.cost_multiplier),
        category=_mount_category(tile_weapon),
        quantity=quantity,
    )


def ability_from_model(ability: models.Ability) -> aggregate.Ability:
    tile_types = set()
    for link in ability.tile_types:
        try:
            tile_types.add(aggregate.TileType(link.tile_type_id))
        except ValueError:
            raise UnresolvedReferenceData(
                "tile type", link.tile_type_id, owner=ability.display_name
            ) from None
    return aggregate.Ability(
        display_name=ability.display_name,
        tile_types=frozenset(tile_types),
        cost_static=ability.cost_static,
        cost_infantry=ability.cost_infantry,
        cost_cavalry=ability.cost_cavalry,
        vehicle_class_costs={row.tile_class_id: row.cost for row in ability.vehicle_class_costs},
        warhead_cost_multiplier=ability.warhead_cost_multiplier or 0.0,
    )


def tile_from_model(tile: models.Tile) -> aggregate.Tile:
    """Build the immutable aggregate priced by :mod:`tilecost.services.costs`.

    Every relationship is read here; the result never touches the session.
    """
    ams = tile.anti_missile_system
    return aggregate.Tile(
        name=tile.name,
        chassis=chassis_from_model(tile.chassis),
        armor=tile.armor,
        targeting=aggregate.Targeting(id=tile.targeting.id, name=tile.targeting.name),
        assault_id=tile.assault_id,
        tile_weapons=tuple(tile_weapon_from_model(link) for link in tile.tile_weapons),
        abilities=tuple(ability_from_model(link.ability) for link in tile.ability_links),
        stealth=tile.stealth,
        anti_missile_system=(
            aggregate.AntiMissileSystem(name=ams.name, cost=ams.cost or 0) if ams is not None else None
        ),
    )


def _tile_query():
    return select(models.Tile).options(
        selectinload(models.Tile.chassis).selectinload(models.Chassis.armor_stats),
        selectinload(models.Tile.targeting),
        selectinload(models.Tile.anti_missile_system),
        selectinload(models.Tile.tile_weapons)
        .selectinload(models.TileWeapon.weapon)
        .selectinload(models.Weapon.attack_costs)
        .selectinload(models.WeaponAttackCost.targeting),
        selectinload(models.Tile.tile_weapons).selectinload(models.TileWeapon.arc_size),
        selectinload(models.Tile.tile_weapons).selectinload(models.TileWeapon.tile_weapon_type),
        selectinload(models.Tile.ability_links)
        .selectinload(models.TileAbility.ability)
        .selectinload(models.Ability.tile_types),
        selectinload(models.Tile.ability_links)
        .selectinload(models.TileAbility.ability)
        .selectinload(models.Ability.vehicle_class_costs),
    )


def load_tile(db: Session, tile_id: int) -> aggregate.Tile | None:
    tile = db.execute(_tile_query().where(models.Tile.id == tile_id)).scalar_one_or_none()
    if tile is None:
        return None
    logger.debug(
        "Loaded tile %s with %d weapons and %d abilities",
        tile_id,
        len(tile.tile_weapons),
        len(tile.ability_links),
    )
    return tile_from_model(tile)
