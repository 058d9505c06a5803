from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import SubmittedCosts
from ..services import aggregate, costs, loader
from ..services.errors import CostError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tiles", tags=["tiles"])


def _get_tile(db: Session, tile_id: int) -> aggregate.Tile:
    try:
        tile = loader.load_tile(db, tile_id)
    except CostError as exc:
        raise _cost_error(tile_id, exc) from exc
    if tile is None:
        raise HTTPException(status_code=404, detail="Tile not found")
    return tile


def _cost_error(tile_id: int, exc: CostError) -> HTTPException:
    logger.warning("Cannot price tile %s: %s", tile_id, exc)
    return HTTPException(
        status_code=422,
        detail={"error": type(exc).__name__, "detail": str(exc)},
    )


@router.get("/{tile_id}/cost")
def tile_cost(tile_id: int, db: Session = Depends(get_db)):
    tile = _get_tile(db, tile_id)
    try:
        report = costs.cost_report(tile)
    except CostError as exc:
        raise _cost_error(tile_id, exc) from exc
    return {"tile_id": tile_id, **report}


@router.post("/{tile_id}/cost-check")
def check_tile_cost(
    tile_id: int,
    payload: SubmittedCosts = Body(...),
    db: Session = Depends(get_db),
):
    tile = _get_tile(db, tile_id)
    try:
        diff = costs.get_cost_diff(tile, payload.model_dump())
    except CostError as exc:
        raise _cost_error(tile_id, exc) from exc
    if diff:
        logger.warning(
            "Submitted cost mismatch for tile %s: %s",
            tile_id,
            ", ".join(row["key"] for row in diff),
        )
    return {"tile_id": tile_id, "matches": not diff, "diff": diff}
