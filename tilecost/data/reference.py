"""Fixed reference enumerations shared by the database seed and the cost engine."""

from __future__ import annotations

from ..services.aggregate import MountCategory, TileType

TILE_TYPE_NAMES: dict[int, str] = {
    TileType.INFANTRY: "Infantry",
    TileType.CAVALRY: "Cavalry",
    TileType.VEHICLE: "Vehicle",
    TileType.BUILDING: "Building",
}

TILE_WEAPON_TYPE_LABELS: dict[str, str] = {
    MountCategory.GROUND.value: "Ground",
    MountCategory.WITH_AA.value: "Ground and anti-air",
    MountCategory.ONLY_AA.value: "Anti-air only",
}

STEALTH_LABEL = "Stealth"
ANTI_MISSILE_SYSTEM_LABEL = "Anti Missile System"
