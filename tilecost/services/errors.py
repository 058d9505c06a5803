"""Faults raised or carried by the tile cost engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class CostError(Exception):
    """Base class for every pricing fault of a single tile."""


class AbilityNotApplicable(CostError):
    def __init__(self, ability_name: str, tile_type: Any) -> None:
        self.ability_name = ability_name
        self.tile_type = tile_type
        type_label = getattr(tile_type, "name", tile_type)
        super().__init__(f"Ability '{ability_name}' cannot be used on {type_label} tiles")


class UnresolvedReferenceData(CostError, LookupError):
    def __init__(self, kind: str, key: Any, owner: str | None = None) -> None:
        self.kind = kind
        self.key = key
        self.owner = owner
        message = f"Unknown {kind} {key!r}"
        if owner:
            message = f"{message} on {owner}"
        super().__init__(message)


class UnhandledTileType(CostError):
    def __init__(self, tile_type: Any) -> None:
        self.tile_type = tile_type
        super().__init__(f"No ability pricing rule for tile type {tile_type!r}")


@dataclass(frozen=True)
class CostResult:
    """Either a computed value or the fault that prevented computing it."""

    value: Any = None
    error: CostError | None = None

    @classmethod
    def success(cls, value: Any) -> "CostResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CostError) -> "CostResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value
