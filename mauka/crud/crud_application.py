# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from mauka.crud.guards import require_user
from mauka.db import models
from mauka.errors import AlreadyApplied, InvalidTransition
from mauka.schemas import schemas

UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    True when the backend refused the row because of a uniqueness constraint.
    """
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(error.orig)


def _summarize_opportunity(opportunity: models.VolunteerOpportunity, organization_name: Optional[str]):
    return schemas.OpportunitySummary.model_validate(opportunity).model_copy(
        update={"organization_name": organization_name}
    )


def _to_schema(application: models.VolunteerApplication, **joined) -> schemas.Application:
    data = {
        column.name: getattr(application, column.name)
        for column in models.VolunteerApplication.__table__.columns
    }
    data.update(joined)
    return schemas.Application(**data)


def get_application(db: Session, application_id: str):
    return (
        db.query(models.VolunteerApplication)
        .filter(models.VolunteerApplication.id == application_id)
        .first()
    )


def apply_to_opportunity(db: Session, volunteer_id: Optional[str], application: schemas.ApplicationCreate):
    """
    Inserts one application for the caller.

    A uniqueness violation means the volunteer already applied to this opportunity;
    it is raised as AlreadyApplied. Any other backend error propagates unchanged.
    """
    volunteer_id = require_user(volunteer_id)
    db_application = models.VolunteerApplication(
        volunteer_id=volunteer_id,
        opportunity_id=application.opportunity_id,
        cover_letter=application.cover_letter,
        availability=application.availability,
        experience=application.experience,
        status="pending",
    )
    try:
        db.add(db_application)
        db.commit()
        db.refresh(db_application)
        return db_application
    except IntegrityError as error:
        db.rollback()
        if is_unique_violation(error):
            raise AlreadyApplied() from error
        raise


def get_my_applications(db: Session, volunteer_id: Optional[str]) -> List[schemas.Application]:
    volunteer_id = require_user(volunteer_id)
    rows = (
        db.query(models.VolunteerApplication, models.VolunteerOpportunity, models.UserProfile.full_name)
        .outerjoin(
            models.VolunteerOpportunity,
            models.VolunteerOpportunity.id == models.VolunteerApplication.opportunity_id,
        )
        .outerjoin(models.UserProfile, models.UserProfile.id == models.VolunteerOpportunity.ngo_id)
        .filter(models.VolunteerApplication.volunteer_id == volunteer_id)
        .order_by(models.VolunteerApplication.applied_at.desc())
        .all()
    )
    return [
        _to_schema(
            application,
            opportunity=_summarize_opportunity(opportunity, organization_name) if opportunity else None,
        )
        for application, opportunity, organization_name in rows
    ]


def get_applications_for_opportunity(db: Session, opportunity_id: str) -> List[schemas.Application]:
    rows = (
        db.query(models.VolunteerApplication, models.UserProfile)
        .outerjoin(models.UserProfile, models.UserProfile.id == models.VolunteerApplication.volunteer_id)
        .filter(models.VolunteerApplication.opportunity_id == opportunity_id)
        .order_by(models.VolunteerApplication.applied_at.desc())
        .all()
    )
    return [
        _to_schema(
            application,
            volunteer=schemas.ApplicantSummary.model_validate(volunteer) if volunteer else None,
        )
        for application, volunteer in rows
    ]


def get_applications_for_my_opportunities(db: Session, ngo_id: Optional[str]) -> List[schemas.Application]:
    """
    Applications against every opportunity the NGO owns, newest first.
    """
    ngo_id = require_user(ngo_id)
    applicant = aliased(models.UserProfile)
    rows = (
        db.query(models.VolunteerApplication, models.VolunteerOpportunity, applicant)
        .join(
            models.VolunteerOpportunity,
            models.VolunteerOpportunity.id == models.VolunteerApplication.opportunity_id,
        )
        .outerjoin(applicant, applicant.id == models.VolunteerApplication.volunteer_id)
        .filter(models.VolunteerOpportunity.ngo_id == ngo_id)
        .order_by(models.VolunteerApplication.applied_at.desc())
        .all()
    )
    return [
        _to_schema(
            application,
            opportunity=_summarize_opportunity(opportunity, None),
            volunteer=schemas.ApplicantSummary.model_validate(volunteer) if volunteer else None,
        )
        for application, opportunity, volunteer in rows
    ]


def count_applications(db: Session) -> int:
    return db.query(func.count(models.VolunteerApplication.id)).scalar() or 0


def update_application_status(
    db: Session, application_id: str, status: str, ngo_notes: Optional[str] = None
):
    """
    Records the NGO's decision. Only pending applications can be decided, and
    nothing ever moves an application back to pending.
    """
    if status not in ("approved", "rejected"):
        raise InvalidTransition(f"Cannot set an application to '{status}'")
    updated = (
        db.query(models.VolunteerApplication)
        .filter(
            models.VolunteerApplication.id == application_id,
            models.VolunteerApplication.status == "pending",
        )
        .update(
            {"status": status, "ngo_notes": ngo_notes, "reviewed_at": datetime.now(timezone.utc)},
            synchronize_session="fetch",
        )
    )
    db.commit()
    if not updated:
        raise InvalidTransition("Only pending applications can be reviewed")
    return get_application(db, application_id)
