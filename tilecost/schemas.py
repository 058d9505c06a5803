from pydantic import BaseModel, ConfigDict


class SubmittedCosts(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total: int | float | str | None = None
    tile_weapons: int | float | str | None = None
    abilities: int | float | str | None = None
    stats: int | float | str | None = None
