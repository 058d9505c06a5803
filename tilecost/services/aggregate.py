"""Immutable, fully resolved tile aggregate consumed by the cost engine.

Everything the calculators read is attached here before pricing starts:
column-style lookups of the stored data (attack cost per targeting mode,
ability price per vehicle class) are explicit mappings, so a missing key is a
typed failure instead of a silent ``None``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Mapping

from .errors import UnresolvedReferenceData


class TileType(enum.IntEnum):
    INFANTRY = 1
    CAVALRY = 2
    VEHICLE = 3
    BUILDING = 4


class MountCategory(str, enum.Enum):
    GROUND = "ground"
    WITH_AA = "with_aa"
    ONLY_AA = "only_aa"


@dataclass(frozen=True)
class ArmorStat:
    level: int
    cost: int


@dataclass(frozen=True)
class Chassis:
    name: str
    tile_type: TileType
    cost: int
    tile_class: int | None = None
    armor_stats: Mapping[int, ArmorStat] = field(default_factory=dict)

    def armor_stat(self, level: int) -> ArmorStat:
        stat = self.armor_stats.get(level)
        if stat is None:
            raise UnresolvedReferenceData("armor level", level, owner=self.name)
        return stat


@dataclass(frozen=True)
class Targeting:
    id: int
    name: str


@dataclass(frozen=True)
class Weapon:
    name: str
    attack_costs: Mapping[str, float] = field(default_factory=dict)
    weapon_class: int = 0
    has_warheads: bool = False

    def attack_cost(self, targeting_name: str) -> float:
        cost = self.attack_costs.get(targeting_name)
        if cost is None:
            raise UnresolvedReferenceData("targeting mode", targeting_name, owner=self.name)
        return cost


@dataclass(frozen=True)
class ArcSize:
    name: str
    cost_multiplier: float


@dataclass(frozen=True)
class TileWeapon:
    weapon: Weapon
    arc_size: ArcSize
    category: MountCategory | str
    quantity: int = 1

    @property
    def category_name(self) -> str:
        if isinstance(self.category, MountCategory):
            return self.category.value
        return str(self.category)


@dataclass(frozen=True)
class Ability:
    display_name: str
    tile_types: frozenset[TileType] = frozenset()
    cost_static: int | None = None
    cost_infantry: int | None = None
    cost_cavalry: int | None = None
    vehicle_class_costs: Mapping[int, int | None] = field(default_factory=dict)
    warhead_cost_multiplier: float = 0.0

    def is_valid_tile_type(self, tile_type: TileType) -> bool:
        return tile_type in self.tile_types


@dataclass(frozen=True)
class AntiMissileSystem:
    name: str
    cost: int = 0


@dataclass(frozen=True)
class Tile:
    name: str
    chassis: Chassis
    armor: int
    targeting: Targeting
    assault_id: int
    tile_weapons: tuple[TileWeapon, ...] = ()
    abilities: tuple[Ability, ...] = ()
    stealth: int | None = None
    anti_missile_system: AntiMissileSystem | None = None

    @property
    def tile_type(self) -> TileType:
        return self.chassis.tile_type

    @property
    def tile_class(self) -> int | None:
        return self.chassis.tile_class

    @property
    def is_building(self) -> bool:
        return self.chassis.tile_type == TileType.BUILDING
