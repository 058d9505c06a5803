import logging
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, select
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import DB_URL

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_reference_data(session: Session) -> int:
    """Insert the tile types and mount categories the cost engine relies on.

    Existing rows are left untouched. Returns the number of inserted rows.
    """
    from . import models
    from .data import reference

    created = 0
    existing_types = {
        row.id: row for row in session.execute(select(models.TileTypeRecord)).scalars()
    }
    for tile_type_id, name in reference.TILE_TYPE_NAMES.items():
        if tile_type_id in existing_types:
            continue
        session.add(models.TileTypeRecord(id=tile_type_id, name=name))
        created += 1

    existing_categories = set(
        session.execute(select(models.TileWeaponType.name)).scalars()
    )
    for name, label in reference.TILE_WEAPON_TYPE_LABELS.items():
        if name in existing_categories:
            continue
        session.add(models.TileWeaponType(name=name, label=label))
        created += 1

    session.flush()
    return created


def init_db() -> None:
    db_path = Path(DB_URL.split("///")[-1]) if DB_URL.startswith("sqlite") else None
    first_start = db_path is not None and not db_path.exists()

    Base.metadata.create_all(bind=engine)

    with SessionLocal() as session:
        created = seed_reference_data(session)
        session.commit()

    if created:
        logger.info("Seeded %d reference rows", created)
    if first_start:
        logger.info("Database initialized at %s", DB_URL)
