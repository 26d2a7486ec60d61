# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mauka.db import models
from mauka.schemas import schemas


def get_cached_location(db: Session, address: str):
    return db.query(models.LocationCache).filter(models.LocationCache.address == address).first()


def cache_location(db: Session, location: schemas.LocationCacheEntry):
    db_location = models.LocationCache(**location.model_dump(exclude={"id", "created_at"}))
    try:
        db.add(db_location)
        db.commit()
        db.refresh(db_location)
        return db_location
    except SQLAlchemyError:
        db.rollback()
        raise
