# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from mauka.crud import crud_stats
from mauka.db.database import get_db
from mauka.dependencies import get_client_ip
from mauka.schemas import schemas
from mauka.services import location_service

router = APIRouter(
    prefix="/location",
    tags=["Location"],
)


@router.get("/detect", response_model=schemas.DetectedLocation)
def detect_location(
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    client_ip: Optional[str] = Depends(get_client_ip),
):
    """
    Best known location of the caller. Always answers; falls back to the default city.
    """
    coordinates = None
    if latitude is not None and longitude is not None:
        coordinates = schemas.Coordinates(latitude=latitude, longitude=longitude)
    return location_service.detect_location(coordinates, client_ip)


@router.get("/geocode", response_model=schemas.LocationCacheEntry)
def geocode(address: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    location = location_service.geocode_address(db, address)
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
    return location


@router.get("/distance", response_model=schemas.Distance)
def distance(
    lat1: float = Query(..., ge=-90, le=90),
    lng1: float = Query(..., ge=-180, le=180),
    lat2: float = Query(..., ge=-90, le=90),
    lng2: float = Query(..., ge=-180, le=180),
    db: Session = Depends(get_db),
):
    return schemas.Distance(distance_km=crud_stats.calculate_distance(db, lat1, lng1, lat2, lng2))
