from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


def touch_timestamps(mapper, connection, target) -> None:  # pragma: no cover - SQLAlchemy hook
    now = datetime.utcnow()
    if getattr(target, "created_at", None) is None:
        target.created_at = now
    target.updated_at = now


class TileTypeRecord(Base):
    __tablename__ = "tile_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    chassis: Mapped[List["Chassis"]] = relationship(back_populates="tile_type")


class TileClass(TimestampMixin, Base):
    __tablename__ = "tile_classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    chassis: Mapped[List["Chassis"]] = relationship(back_populates="tile_class")


class Chassis(TimestampMixin, Base):
    __tablename__ = "chassis"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    tile_type_id: Mapped[int] = mapped_column(ForeignKey("tile_types.id"), nullable=False)
    tile_class_id: Mapped[Optional[int]] = mapped_column(ForeignKey("tile_classes.id"), nullable=True)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tile_type: Mapped[TileTypeRecord] = relationship(back_populates="chassis")
    tile_class: Mapped[Optional[TileClass]] = relationship(back_populates="chassis")
    armor_stats: Mapped[List["ChassisArmorStat"]] = relationship(
        back_populates="chassis", cascade="all, delete-orphan", order_by="ChassisArmorStat.armor"
    )
    tiles: Mapped[List["Tile"]] = relationship(back_populates="chassis")


class ChassisArmorStat(TimestampMixin, Base):
    __tablename__ = "chassis_armor_stats"
    __table_args__ = (UniqueConstraint("chassis_id", "armor"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    chassis_id: Mapped[int] = mapped_column(ForeignKey("chassis.id"), nullable=False)
    armor: Mapped[int] = mapped_column(Integer, nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    chassis: Mapped[Chassis] = relationship(back_populates="armor_stats")


class Targeting(TimestampMixin, Base):
    """Targeting mode. The id is also the stat cost of choosing it."""

    __tablename__ = "targetings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)


class Assault(TimestampMixin, Base):
    """Assault rating. The id is also the stat cost of choosing it."""

    __tablename__ = "assaults"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)


class Weapon(TimestampMixin, Base):
    __tablename__ = "weapons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    weapon_class: Mapped[int] = mapped_column("class", Integer, nullable=False, default=0)
    has_warheads: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    attack_costs: Mapped[List["WeaponAttackCost"]] = relationship(
        back_populates="weapon", cascade="all, delete-orphan"
    )


class WeaponAttackCost(TimestampMixin, Base):
    __tablename__ = "weapon_attack_costs"
    __table_args__ = (UniqueConstraint("weapon_id", "targeting_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    weapon_id: Mapped[int] = mapped_column(ForeignKey("weapons.id"), nullable=False)
    targeting_id: Mapped[int] = mapped_column(ForeignKey("targetings.id"), nullable=False)
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    weapon: Mapped[Weapon] = relationship(back_populates="attack_costs")
    targeting: Mapped[Targeting] = relationship()


class ArcSize(TimestampMixin, Base):
    __tablename__ = "arc_sizes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    cost_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)


class TileWeaponType(TimestampMixin, Base):
    __tablename__ = "tile_weapon_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)


class TileWeapon(TimestampMixin, Base):
    __tablename__ = "tile_weapons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tile_id: Mapped[int] = mapped_column(ForeignKey("tiles.id"), nullable=False)
    weapon_id: Mapped[int] = mapped_column(ForeignKey("weapons.id"), nullable=False)
    arc_size_id: Mapped[int] = mapped_column(ForeignKey("arc_sizes.id"), nullable=False)
    tile_weapon_type_id: Mapped[int] = mapped_column(ForeignKey("tile_weapon_types.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tile: Mapped["Tile"] = relationship(back_populates="tile_weapons")
    weapon: Mapped[Weapon] = relationship()
    arc_size: Mapped[ArcSize] = relationship()
    tile_weapon_type: Mapped[TileWeaponType] = relationship()


class Ability(TimestampMixin, Base):
    __tablename__ = "abilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    display_name: Mapped[str] = mapped_column(String(120), nullable=False)
    cost_static: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    cost_infantry: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    cost_cavalry: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    warhead_cost_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    tile_types: Mapped[List["AbilityTileType"]] = relationship(
        back_populates="ability", cascade="all, delete-orphan"
    )
    vehicle_class_costs: Mapped[List["AbilityVehicleClassCost"]] = relationship(
        back_populates="ability", cascade="all, delete-orphan"
    )
    tile_links: Mapped[List["TileAbility"]] = relationship(back_populates="ability")


class AbilityTileType(Base):
    __tablename__ = "ability_tile_types"
    __table_args__ = (UniqueConstraint("ability_id", "tile_type_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ability_id: Mapped[int] = mapped_column(ForeignKey("abilities.id"), nullable=False)
    tile_type_id: Mapped[int] = mapped_column(ForeignKey("tile_types.id"), nullable=False)

    ability: Mapped[Ability] = relationship(back_populates="tile_types")


class AbilityVehicleClassCost(TimestampMixin, Base):
    __tablename__ = "ability_vehicle_class_costs"
    __table_args__ = (UniqueConstraint("ability_id", "tile_class_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ability_id: Mapped[int] = mapped_column(ForeignKey("abilities.id"), nullable=False)
    tile_class_id: Mapped[int] = mapped_column(ForeignKey("tile_classes.id"), nullable=False)
    cost: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    ability: Mapped[Ability] = relationship(back_populates="vehicle_class_costs")
    tile_class: Mapped[TileClass] = relationship()


class AntiMissileSystem(TimestampMixin, Base):
    __tablename__ = "anti_missile_systems"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Tile(TimestampMixin, Base):
    __tablename__ = "tiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    chassis_id: Mapped[int] = mapped_column(ForeignKey("chassis.id"), nullable=False)
    armor: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    targeting_id: Mapped[int] = mapped_column(ForeignKey("targetings.id"), nullable=False)
    assault_id: Mapped[int] = mapped_column(ForeignKey("assaults.id"), nullable=False)
    stealth: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    anti_missile_system_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("anti_missile_systems.id"), nullable=True
    )

    chassis: Mapped[Chassis] = relationship(back_populates="tiles")
    targeting: Mapped[Targeting] = relationship()
    assault: Mapped[Assault] = relationship()
    anti_missile_system: Mapped[Optional[AntiMissileSystem]] = relationship()
    tile_weapons: Mapped[List[TileWeapon]] = relationship(
        back_populates="tile",
        cascade="all, delete-orphan",
        order_by="TileWeapon.position",
    )
    ability_links: Mapped[List["TileAbility"]] = relationship(
        back_populates="tile",
        cascade="all, delete-orphan",
        order_by="TileAbility.position",
    )


class TileAbility(TimestampMixin, Base):
    __tablename__ = "tile_abilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tile_id: Mapped[int] = mapped_column(ForeignKey("tiles.id"), nullable=False)
    ability_id: Mapped[int] = mapped_column(ForeignKey("abilities.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tile: Mapped[Tile] = relationship(back_populates="ability_links")
    ability: Mapped[Ability] = relationship(back_populates="tile_links")


for cls in [
    TileClass,
    Chassis,
    ChassisArmorStat,
    Targeting,
    Assault,
    Weapon,
    WeaponAttackCost,
    ArcSize,
    TileWeaponType,
    TileWeapon,
    Ability,
    AbilityVehicleClassCost,
    AntiMissileSystem,
    Tile,
    TileAbility,
]:
    event.listen(cls, "before_insert", touch_timestamps)
    event.listen(cls, "before_update", touch_timestamps)
