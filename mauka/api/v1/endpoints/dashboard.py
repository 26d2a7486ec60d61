# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mauka.crud import crud_stats
from mauka.db.database import get_db, get_session_factory
from mauka.dependencies import SessionContext, get_authenticated_session
from mauka.schemas import schemas
from mauka.services.dashboard_service import DashboardService

router = APIRouter(tags=["Dashboard"])


@router.get("/dashboard", response_model=schemas.Dashboard)
async def read_dashboard(
    session: SessionContext = Depends(get_authenticated_session),
    session_factory=Depends(get_session_factory),
):
    return await DashboardService(session_factory).load(session)


@router.get("/stats/me", response_model=schemas.UserStats)
def read_my_stats(
    session: SessionContext = Depends(get_authenticated_session),
    db: Session = Depends(get_db),
):
    return crud_stats.get_user_stats(db, session.user_id)
