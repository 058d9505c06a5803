from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from .config import DEBUG, HOST, PORT
from .db import init_db
from .routers import tiles

logger = logging.getLogger(__name__)

app = FastAPI(debug=DEBUG, title="Tile cost")


@app.on_event("startup")
def startup_event() -> None:
    init_db()
    logger.info("Application started")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(tiles.router)


def run() -> None:
    uvicorn.run(
        "tilecost.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )
