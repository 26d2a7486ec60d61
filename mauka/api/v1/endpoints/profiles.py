# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from mauka.crud import crud_profile
from mauka.db.database import get_db
from mauka.dependencies import SessionContext, get_authenticated_session, get_client_ip
from mauka.schemas import schemas
from mauka.services import location_service, storage_service

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    responses={404: {"description": "Not found"}},
)


def _require_profile(session: SessionContext):
    if session.profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return session.profile


@router.get("/me", response_model=schemas.UserProfile)
def read_profile_me(session: SessionContext = Depends(get_authenticated_session)):
    return _require_profile(session)


@router.patch("/me", response_model=schemas.UserProfile)
def update_profile_me(
    updates: schemas.UserProfileUpdate,
    session: SessionContext = Depends(get_authenticated_session),
    db: Session = Depends(get_db),
):
    _require_profile(session)
    return crud_profile.update_profile(db, session.user_id, updates)


@router.post("/me/location", response_model=schemas.UserProfile)
def update_location_me(
    coordinates: Optional[schemas.Coordinates] = Body(None),
    session: SessionContext = Depends(get_authenticated_session),
    client_ip: Optional[str] = Depends(get_client_ip),
    db: Session = Depends(get_db),
):
    """
    Detects where the user is and saves it on their profile. Coordinates shared
    by the browser take precedence over the IP address.
    """
    _require_profile(session)
    location = location_service.detect_location(coordinates, client_ip)
    updates = schemas.UserProfileUpdate(
        city=location.city,
        state=location.state,
        latitude=location.latitude,
        longitude=location.longitude,
        location_address=f"{location.city}, {location.state}, {location.country}",
    )
    return crud_profile.update_profile(db, session.user_id, updates)


@router.post("/me/avatar", response_model=schemas.UserProfile)
async def upload_avatar_me(
    file: UploadFile = File(...),
    session: SessionContext = Depends(get_authenticated_session),
    db: Session = Depends(get_db),
):
    """
    Stores a new profile picture and points the profile at it.
    """
    _require_profile(session)
    content = await file.read()
    avatar_url = await run_in_threadpool(
        storage_service.upload_avatar, session.user_id, file.filename, content, file.content_type
    )
    return crud_profile.update_profile(db, session.user_id, schemas.UserProfileUpdate(avatar_url=avatar_url))


@router.get("/{user_id}", response_model=schemas.UserProfile)
def read_profile(
    user_id: str,
    session: SessionContext = Depends(get_authenticated_session),
    db: Session = Depends(get_db),
):
    db_profile = crud_profile.get_profile(db, user_id)
    if db_profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return db_profile
