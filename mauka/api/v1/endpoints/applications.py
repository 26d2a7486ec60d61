# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List, Literal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mauka.crud import crud_application
from mauka.db.database import get_db
from mauka.dependencies import SessionContext, get_authenticated_session, get_ngo_session
from mauka.schemas import schemas
from mauka.services.review_service import ApplicationReviewBoard

router = APIRouter(
    prefix="/applications",
    tags=["Applications"],
    responses={404: {"description": "Not found"}},
)


@router.get("/mine", response_model=List[schemas.Application])
def read_my_applications(
    session: SessionContext = Depends(get_authenticated_session),
    db: Session = Depends(get_db),
):
    """
    The current user's applications with the opportunity and organization they target.
    """
    return crud_application.get_my_applications(db, session.user_id)


@router.get("/received", response_model=schemas.ApplicationReview)
def read_received_applications(
    status_filter: Literal["all", "pending", "approved", "rejected"] = "all",
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    """
    Applications to every opportunity of the current NGO, with per-status counts. (NGO access required)
    """
    return ApplicationReviewBoard(db, session).load().snapshot(status_filter)


@router.post("/{application_id}/approve", response_model=schemas.Application)
def approve_application(
    application_id: str,
    decision: schemas.ApplicationDecision,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    return ApplicationReviewBoard(db, session).load().decide(application_id, "approved", decision.ngo_notes)


@router.post("/{application_id}/reject", response_model=schemas.Application)
def reject_application(
    application_id: str,
    decision: schemas.ApplicationDecision,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    return ApplicationReviewBoard(db, session).load().decide(application_id, "rejected", decision.ngo_notes)
