# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.crud import crud_application, crud_opportunity
from mauka.db.database import get_db
from mauka.dependencies import SessionContext, get_ngo_session, get_session
from mauka.events import notification_handlers
from mauka.schemas import schemas
from mauka.services import opportunity_service
from mauka.services.discovery_service import RADIUS_CHOICES, OpportunityDiscovery
from mauka.services.favorites import FavoriteStore

router = APIRouter(
    prefix="/opportunities",
    tags=["Opportunities"],
    responses={404: {"description": "Not found"}},
)


def _favorites(request: Request) -> FavoriteStore:
    return FavoriteStore(dict(request.cookies), key=settings.favorites_cookie_name)


@router.get("/discover", response_model=schemas.Discovery)
def discover_opportunities(
    request: Request,
    category: Optional[str] = None,
    radius_km: int = settings.default_radius_km,
    q: Optional[str] = None,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """
    The opportunity list as the current viewer sees it, with their application
    status and apply control per opportunity.
    """
    if radius_km not in RADIUS_CHOICES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"radius_km must be one of {', '.join(str(radius) for radius in RADIUS_CHOICES)}",
        )
    discovery = OpportunityDiscovery(db, session, favorites=_favorites(request))
    return discovery.search(category=category or None, radius_km=radius_km, query=q)


@router.get("/", response_model=List[schemas.Opportunity])
def read_opportunities(
    category: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    Active opportunities of approved NGOs, newest first.
    """
    return crud_opportunity.get_opportunities(db, category=category, city=city, state=state)


@router.get("/nearby", response_model=List[schemas.NearbyOpportunity])
def read_nearby_opportunities(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: int = settings.default_radius_km,
    category: Optional[str] = None,
    limit: int = settings.nearby_limit,
    db: Session = Depends(get_db),
):
    return crud_opportunity.get_nearby_opportunities(
        db, latitude, longitude, radius_km=radius_km, category=category, limit=limit
    )


@router.get("/mine", response_model=List[schemas.OwnOpportunity])
def read_my_opportunities(
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    """
    The current NGO's opportunities, flagged with whether volunteers can see them yet.
    """
    return opportunity_service.get_own_opportunities(db, session.user_id)


@router.post("/", response_model=schemas.Opportunity, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    opportunity: schemas.OpportunityCreate,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    """
    Posts a new opportunity for the current NGO. (NGO access required)
    """
    opportunity_service.validate_new_opportunity(opportunity)
    return crud_opportunity.create_opportunity(db, session.user_id, opportunity)


@router.get("/{opportunity_id}", response_model=schemas.Opportunity)
def read_opportunity(opportunity_id: str, db: Session = Depends(get_db)):
    db_opportunity = crud_opportunity.get_opportunity(db, opportunity_id)
    if db_opportunity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opportunity not found")
    return db_opportunity


@router.patch("/{opportunity_id}", response_model=schemas.Opportunity)
def update_opportunity(
    opportunity_id: str,
    updates: schemas.OpportunityUpdate,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    """
    Updates one of the current NGO's opportunities.
    """
    db_opportunity = crud_opportunity.update_opportunity(db, opportunity_id, session.user_id, updates)
    if db_opportunity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opportunity not found")
    return db_opportunity


@router.delete("/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_opportunity(
    opportunity_id: str,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    if not crud_opportunity.delete_opportunity(db, opportunity_id, session.user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opportunity not found")


@router.post("/{opportunity_id}/apply", response_model=schemas.ApplyResult)
def apply_to_opportunity(
    opportunity_id: str,
    application: schemas.ApplicationCreate,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """
    Applies the current volunteer to an opportunity. Applying twice is not an
    error: the answer reports the existing application instead.
    """
    if application.opportunity_id != opportunity_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Opportunity id mismatch"
        )
    discovery = OpportunityDiscovery(db, session)
    discovery.load_statuses()
    result = discovery.apply(application)
    if result.application_id is not None:
        background_tasks.add_task(notification_handlers.notify_new_application, result.application_id)
    return result


@router.get("/{opportunity_id}/applications", response_model=List[schemas.Application])
def read_opportunity_applications(
    opportunity_id: str,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    """
    Applications to one of the current NGO's opportunities, with applicant details.
    """
    db_opportunity = crud_opportunity.get_opportunity_row(db, opportunity_id)
    if db_opportunity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opportunity not found")
    if db_opportunity.ngo_id != session.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return crud_application.get_applications_for_opportunity(db, opportunity_id)
