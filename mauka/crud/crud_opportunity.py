# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from mauka.crud import crud_ngo
from mauka.crud.guards import require_user
from mauka.db import models, procedures
from mauka.schemas import schemas


def _flatten(row) -> schemas.Opportunity:
    opportunity, organization_name = row
    return schemas.Opportunity.model_validate(opportunity).model_copy(
        update={"organization_name": organization_name}
    )


def _with_organization(db: Session):
    return db.query(models.VolunteerOpportunity, models.UserProfile.full_name).outerjoin(
        models.UserProfile, models.UserProfile.id == models.VolunteerOpportunity.ngo_id
    )


def get_opportunity_row(db: Session, opportunity_id: str):
    return (
        db.query(models.VolunteerOpportunity)
        .filter(models.VolunteerOpportunity.id == opportunity_id)
        .first()
    )


def get_opportunity(db: Session, opportunity_id: str) -> Optional[schemas.Opportunity]:
    row = _with_organization(db).filter(models.VolunteerOpportunity.id == opportunity_id).first()
    return _flatten(row) if row else None


def get_opportunities(
    db: Session,
    category: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
) -> List[schemas.Opportunity]:
    """
    Lists active opportunities whose NGO has been approved.

    Runs in two phases: the approved NGO ids are resolved first, and when there
    are none the opportunity query is never issued.
    """
    approved_ngo_ids = crud_ngo.get_approved_ngo_ids(db)
    if not approved_ngo_ids:
        return []

    query = _with_organization(db).filter(
        models.VolunteerOpportunity.status == "active",
        models.VolunteerOpportunity.ngo_id.in_(approved_ngo_ids),
    )
    if category:
        query = query.filter(models.VolunteerOpportunity.category == category)
    if city:
        query = query.filter(models.VolunteerOpportunity.city == city)
    if state:
        query = query.filter(models.VolunteerOpportunity.state == state)

    rows = query.order_by(models.VolunteerOpportunity.created_at.desc()).all()
    return [_flatten(row) for row in rows]


def get_all_opportunities(db: Session) -> List[schemas.Opportunity]:
    rows = _with_organization(db).order_by(models.VolunteerOpportunity.created_at.desc()).all()
    return [_flatten(row) for row in rows]


def get_nearby_opportunities(
    db: Session,
    latitude: float,
    longitude: float,
    radius_km: int = 25,
    category: Optional[str] = None,
    limit: int = 20,
) -> List[schemas.NearbyOpportunity]:
    """
    Delegates the radius search to the backend, which returns rows sorted by distance.
    """
    rows = procedures.call_rows(
        db,
        "find_nearby_opportunities",
        user_lat=latitude,
        user_lng=longitude,
        radius_km=radius_km,
        category_filter=category,
        limit_count=limit,
    )
    return [schemas.NearbyOpportunity.model_validate(row) for row in rows]


def get_opportunities_for_ngo(db: Session, ngo_id: str, limit: Optional[int] = None):
    query = (
        db.query(models.VolunteerOpportunity)
        .filter(models.VolunteerOpportunity.ngo_id == ngo_id)
        .order_by(models.VolunteerOpportunity.created_at.desc())
    )
    if limit:
        query = query.limit(limit)
    return query.all()


def count_opportunities(db: Session) -> int:
    return db.query(func.count(models.VolunteerOpportunity.id)).scalar() or 0


def create_opportunity(db: Session, ngo_id: Optional[str], opportunity: schemas.OpportunityCreate):
    ngo_id = require_user(ngo_id)
    data = opportunity.model_dump()
    data["max_volunteers"] = data.get("max_volunteers") or 1
    db_opportunity = models.VolunteerOpportunity(ngo_id=ngo_id, status="active", **data)
    db.add(db_opportunity)
    db.commit()
    db.refresh(db_opportunity)
    return db_opportunity


def update_opportunity(db: Session, opportunity_id: str, ngo_id: str, updates: schemas.OpportunityUpdate):
    db_opportunity = (
        db.query(models.VolunteerOpportunity)
        .filter(models.VolunteerOpportunity.id == opportunity_id, models.VolunteerOpportunity.ngo_id == ngo_id)
        .first()
    )
    if db_opportunity is None:
        return None
    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(db_opportunity, key, value)
    db.commit()
    db.refresh(db_opportunity)
    return db_opportunity


def delete_opportunity(db: Session, opportunity_id: str, ngo_id: str) -> bool:
    deleted = (
        db.query(models.VolunteerOpportunity)
        .filter(models.VolunteerOpportunity.id == opportunity_id, models.VolunteerOpportunity.ngo_id == ngo_id)
        .delete()
    )
    db.commit()
    return bool(deleted)
