# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from mauka.crud.guards import require_user
from mauka.db import models, procedures
from mauka.errors import RemoteProcedureFailure
from mauka.schemas import schemas


def get_profile(db: Session, user_id: str):
    return db.query(models.UserProfile).filter(models.UserProfile.id == user_id).first()


def get_profiles(db: Session, skip: int = 0, limit: int = 500):
    return (
        db.query(models.UserProfile)
        .order_by(models.UserProfile.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_profiles(db: Session, user_type: Optional[str] = None) -> int:
    query = db.query(func.count(models.UserProfile.id))
    if user_type:
        query = query.filter(models.UserProfile.user_type == user_type)
    return query.scalar() or 0


def update_profile(db: Session, user_id: Optional[str], updates: schemas.UserProfileUpdate):
    user_id = require_user(user_id)
    db_profile = get_profile(db, user_id)
    if db_profile is None:
        return None
    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(db_profile, key, value)
    db.commit()
    db.refresh(db_profile)
    return db_profile


def upsert_profile(db: Session, user_id: str, user_type: str, signup: schemas.SignupProfile):
    """
    Writes the profile row directly. Used only when the signup procedure reports a failure.
    """
    db_profile = models.UserProfile(
        id=user_id,
        full_name=signup.full_name,
        user_type=user_type,
        phone=signup.phone or None,
        bio=signup.bio or None,
        skills=signup.skills,
        interests=signup.interests,
        location_address=signup.address or None,
        city=signup.city or None,
        state=signup.state or None,
        pincode=signup.pincode or None,
        latitude=signup.latitude or None,
        longitude=signup.longitude or None,
        avatar_url=signup.avatar_url,
    )
    db_profile = db.merge(db_profile)
    db.commit()
    return db_profile


def create_profile_on_signup(db: Session, user_id: str, signup: schemas.SignupProfile) -> dict:
    result = procedures.call_scalar(
        db,
        "create_user_profile_on_signup",
        p_user_id=user_id,
        p_full_name=signup.full_name,
        p_user_type=signup.user_type,
        p_phone=signup.phone,
        p_bio=signup.bio,
        p_skills=signup.skills,
        p_interests=signup.interests,
        p_location_address=signup.address,
        p_city=signup.city,
        p_state=signup.state,
        p_pincode=signup.pincode,
        p_latitude=signup.latitude,
        p_longitude=signup.longitude,
    )
    db.commit()
    if not result or not result.get("success"):
        raise RemoteProcedureFailure("create_user_profile_on_signup", (result or {}).get("error"))
    return result


def create_missing_profile(db: Session, user_id: str) -> dict:
    """
    Asks the backend to create a profile for an authenticated user who has none.
    Returns the created profile payload.
    """
    result = procedures.call_scalar(db, "create_missing_user_profile", user_id=user_id)
    db.commit()
    if not result or not result.get("success"):
        raise RemoteProcedureFailure("create_missing_user_profile", (result or {}).get("error"))
    return result.get("profile") or {}
