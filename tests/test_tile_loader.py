from __future__ import annotations

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from tilecost import models
from tilecost.db import Base, seed_reference_data
from tilecost.services import costs, loader
from tilecost.services.aggregate import MountCategory, TileType
from tilecost.services.errors import UnresolvedReferenceData


def _session():
    engine = create_engine("sqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)()


def _weapon_type(session, name: str) -> models.TileWeaponType:
    return session.execute(
        select(models.TileWeaponType).where(models.TileWeaponType.name == name)
    ).scalar_one()


def _build_tank(session, *, weapon_type_name: str = "ground", quantity: int = 2) -> models.Tile:
    seed_reference_data(session)
    heavy = models.TileClass(name="Heavy")
    chassis = models.Chassis(
        name="Tracked hull",
        tile_type_id=int(TileType.VEHICLE),
        tile_class=heavy,
        cost=20,
    )
    chassis.armor_stats = [
        models.ChassisArmorStat(armor=1, cost=2),
        models.ChassisArmorStat(armor=2, cost=5),
    ]
    direct = models.Targeting(id=3, name="direct")
    indirect = models.Targeting(id=4, name="indirect")
    assault = models.Assault(id=2, name="Standard")
    cannon = models.Weapon(name="Cannon", weapon_class=10, has_warheads=True)
    cannon.attack_costs = [
        models.WeaponAttackCost(targeting=direct, cost=13),
        models.WeaponAttackCost(targeting=indirect, cost=26),
    ]
    front = models.ArcSize(name="Front", cost_multiplier=1.0)

    if weapon_type_name == "ground":
        weapon_type = _weapon_type(session, "ground")
    else:
        weapon_type = models.TileWeaponType(name=weapon_type_name)

    smoke = models.Ability(display_name="Smoke launchers", warhead_cost_multiplier=0.5)
    smoke.tile_types = [models.AbilityTileType(tile_type_id=int(TileType.VEHICLE))]
    tracks = models.Ability(display_name="Reinforced tracks")
    tracks.tile_types = [models.AbilityTileType(tile_type_id=int(TileType.VEHICLE))]
    tracks.vehicle_class_costs = [models.AbilityVehicleClassCost(tile_class=heavy, cost=6)]
    trophy = models.AntiMissileSystem(name="Trophy", cost=4)

    tile = models.Tile(
        name="Tank",
        chassis=chassis,
        armor=2,
        targeting=direct,
        assault=assault,
        stealth=3,
        anti_missile_system=trophy,
    )
    tile.tile_weapons = [
        models.TileWeapon(weapon=cannon, arc_size=front, tile_weapon_type=weapon_type, quantity=quantity)
    ]
    tile.ability_links = [
        models.TileAbility(ability=tracks, position=1),
        models.TileAbility(ability=smoke, position=0),
    ]
    session.add(tile)
    session.flush()
    return tile


def test_seed_reference_data_is_idempotent():
    session = _session()
    try:
        assert seed_reference_data(session) == 7
        assert seed_reference_data(session) == 0
        names = set(session.execute(select(models.TileWeaponType.name)).scalars())
        assert names == {"ground", "with_aa", "only_aa"}
    finally:
        session.close()


def test_load_tile_builds_resolved_aggregate():
    session = _session()
    try:
        tile_id = _build_tank(session).id
        session.expunge_all()

        tile = loader.load_tile(session, tile_id)

        assert tile.tile_type == TileType.VEHICLE
        assert tile.chassis.armor_stat(2).cost == 5
        assert tile.tile_weapons[0].category == MountCategory.GROUND
        assert tile.tile_weapons[0].weapon.attack_costs == {"direct": 13, "indirect": 26}
        assert [ability.display_name for ability in tile.abilities] == [
            "Smoke launchers",
            "Reinforced tracks",
        ]
        assert tile.abilities[1].vehicle_class_costs == {tile.tile_class: 6}
    finally:
        session.close()


def test_loaded_tile_prices_like_hand_built_aggregate():
    session = _session()
    try:
        tile_id = _build_tank(session).id
        session.expunge_all()

        tile = loader.load_tile(session, tile_id)

        assert costs.stats_cost(tile) == 30
        assert costs.weapon_cost(tile) == 20
        # Smoke: 10 * 2 warhead severity halved; tracks 6; stealth 3; AMS 4.
        assert costs.abilities_cost(tile) == 23
        assert costs.total(tile) == 73
    finally:
        session.close()


def test_load_missing_tile_returns_none():
    session = _session()
    try:
        assert loader.load_tile(session, 404) is None
    finally:
        session.close()


def test_unknown_mount_category_is_rejected_at_load_time():
    session = _session()
    try:
        tile_id = _build_tank(session, weapon_type_name="naval").id
        session.expunge_all()

        with pytest.raises(UnresolvedReferenceData) as excinfo:
            loader.load_tile(session, tile_id)
        assert excinfo.value.key == "naval"
    finally:
        session.close()


def test_negative_weapon_quantity_is_rejected_at_load_time():
    session = _session()
    try:
        tile_id = _build_tank(session, quantity=-2).id
        session.expunge_all()

        with pytest.raises(UnresolvedReferenceData) as excinfo:
            loader.load_tile(session, tile_id)
        assert excinfo.value.kind == "weapon quantity"
        assert excinfo.value.key == -2
    finally:
        session.close()
