# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from mauka.crud import crud_ngo
from mauka.db.database import get_db
from mauka.dependencies import SessionContext, get_ngo_session
from mauka.schemas import schemas

router = APIRouter(
    prefix="/ngo",
    tags=["NGO"],
    responses={404: {"description": "Not found"}},
)


@router.get("/application", response_model=schemas.NGOApplication)
def read_my_ngo_application(
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    """
    The current NGO's registration details and verification status.
    """
    db_application = crud_ngo.get_application_for_user(db, session.user_id)
    if db_application is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="NGO application not found")
    return db_application


@router.patch("/application", response_model=schemas.NGOApplication)
def update_my_ngo_application(
    updates: schemas.NGOApplicationUpdate,
    session: SessionContext = Depends(get_ngo_session),
    db: Session = Depends(get_db),
):
    db_application = crud_ngo.update_application_for_user(db, session.user_id, updates)
    if db_application is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="NGO application not found")
    return db_application
