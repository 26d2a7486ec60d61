# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mauka.db.database import get_db
from mauka.dependencies import SessionContext, get_authenticated_session
from mauka.schemas import schemas
from mauka.services import signup_service

router = APIRouter(prefix="/signup", tags=["Signup"])


@router.post("/profile", response_model=schemas.UserProfile, status_code=status.HTTP_201_CREATED)
def complete_signup(
    signup: schemas.SignupProfile,
    session: SessionContext = Depends(get_authenticated_session),
    db: Session = Depends(get_db),
):
    """
    Creates the profile of a user who just signed up and, for NGOs, submits
    their organization for verification.
    """
    profile, _ = signup_service.complete_signup(db, session.user_id, signup)
    return profile
