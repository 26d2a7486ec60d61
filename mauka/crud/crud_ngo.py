# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from mauka.crud.guards import require_user
from mauka.db import models, procedures
from mauka.errors import RemoteProcedureFailure
from mauka.schemas import schemas


def _with_full_name(row) -> schemas.NGOApplication:
    application, full_name = row
    return schemas.NGOApplication.model_validate(application).model_copy(update={"full_name": full_name})


def get_application(db: Session, application_id: str):
    return db.query(models.NGOApplication).filter(models.NGOApplication.id == application_id).first()


def get_application_for_user(db: Session, user_id: Optional[str]):
    if not user_id:
        return None
    return db.query(models.NGOApplication).filter(models.NGOApplication.user_id == user_id).first()


def get_verification_status(db: Session, user_id: str) -> Optional[str]:
    return (
        db.query(models.NGOApplication.verification_status)
        .filter(models.NGOApplication.user_id == user_id)
        .scalar()
    )


def get_approved_ngo_ids(db: Session) -> List[str]:
    rows = (
        db.query(models.NGOApplication.user_id)
        .filter(models.NGOApplication.verification_status == "approved")
        .all()
    )
    return [row.user_id for row in rows]


def get_pending_ngos(db: Session) -> List[schemas.NGOApplication]:
    rows = (
        db.query(models.NGOApplication, models.UserProfile.full_name)
        .join(models.UserProfile, models.UserProfile.id == models.NGOApplication.user_id)
        .filter(models.NGOApplication.verification_status == "pending")
        .order_by(models.NGOApplication.created_at.asc())
        .all()
    )
    return [_with_full_name(row) for row in rows]


def get_all_ngos(db: Session) -> List[schemas.NGOApplication]:
    rows = (
        db.query(models.NGOApplication, models.UserProfile.full_name)
        .join(models.UserProfile, models.UserProfile.id == models.NGOApplication.user_id)
        .order_by(models.NGOApplication.created_at.desc())
        .all()
    )
    return [_with_full_name(row) for row in rows]


def count_applications(db: Session, verification_status: Optional[str] = None) -> int:
    query = db.query(func.count(models.NGOApplication.id))
    if verification_status:
        query = query.filter(models.NGOApplication.verification_status == verification_status)
    return query.scalar() or 0


def create_application(db: Session, user_id: str, application: schemas.NGOApplicationCreate):
    db_application = models.NGOApplication(user_id=user_id, **application.model_dump())
    db.add(db_application)
    db.commit()
    db.refresh(db_application)
    return db_application


def update_application_for_user(db: Session, user_id: Optional[str], updates: schemas.NGOApplicationUpdate):
    user_id = require_user(user_id)
    db_application = get_application_for_user(db, user_id)
    if db_application is None:
        return None
    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(db_application, key, value)
    db.commit()
    db.refresh(db_application)
    return db_application


def create_application_on_signup(db: Session, user_id: str, application: schemas.NGOApplicationCreate) -> dict:
    result = procedures.call_scalar(
        db,
        "create_ngo_application_on_signup",
        p_user_id=user_id,
        p_organization_name=application.organization_name,
        p_registration_number=application.registration_number,
        p_email=application.email,
        p_phone=application.phone,
        p_website=application.website or "",
        p_address=application.address,
        p_city=application.city,
        p_state=application.state,
        p_pincode=application.pincode,
        p_latitude=application.latitude or 0,
        p_longitude=application.longitude or 0,
        p_description=application.description,
        p_focus_areas=application.focus_areas,
        p_established_year=application.established_year or 0,
        p_team_size=application.team_size,
    )
    db.commit()
    if not result or not result.get("success"):
        raise RemoteProcedureFailure("create_ngo_application_on_signup", (result or {}).get("error"))
    return result


def _decide(db: Session, procedure: str, ngo_id: str, admin_id: Optional[str], admin_notes: Optional[str]) -> dict:
    admin_id = require_user(admin_id)
    result = procedures.call_scalar(
        db, procedure, p_ngo_id=ngo_id, p_admin_id=admin_id, p_admin_notes=admin_notes or None
    )
    db.commit()
    # The call going through does not mean the decision was recorded
    if not result or not result.get("success"):
        raise RemoteProcedureFailure(procedure, (result or {}).get("error"))
    return result


def approve_ngo(db: Session, ngo_id: str, admin_id: Optional[str], admin_notes: Optional[str] = None) -> dict:
    return _decide(db, "approve_ngo", ngo_id, admin_id, admin_notes)


def reject_ngo(db: Session, ngo_id: str, admin_id: Optional[str], admin_notes: Optional[str] = None) -> dict:
    return _decide(db, "reject_ngo", ngo_id, admin_id, admin_notes)
