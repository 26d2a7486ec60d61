# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from mauka.db.database import get_db, get_session_factory
from mauka.dependencies import SessionContext, get_admin_session
from mauka.events import notification_handlers
from mauka.schemas import schemas
from mauka.services.admin_service import AdminConsoleService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={404: {"description": "Not found"}},
)


def get_admin_console(session_factory=Depends(get_session_factory)) -> AdminConsoleService:
    return AdminConsoleService(session_factory)


@router.get("/console", response_model=schemas.AdminConsole)
async def read_console(
    session: SessionContext = Depends(get_admin_session),
    console: AdminConsoleService = Depends(get_admin_console),
):
    """
    Counts, NGO verification queue, users, opportunities and inbox. (Admin access required)
    """
    return await console.load()


@router.post("/ngos/{ngo_id}/approve", response_model=schemas.AdminConsole)
async def approve_ngo(
    ngo_id: str,
    decision: schemas.NGODecision,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_admin_session),
    console: AdminConsoleService = Depends(get_admin_console),
    db: Session = Depends(get_db),
):
    """
    Approves an NGO, making its opportunities visible to volunteers, and returns the reloaded console.
    """
    console.approve_ngo(db, ngo_id, session.user_id, decision.admin_notes)
    background_tasks.add_task(notification_handlers.notify_ngo_decision, ngo_id)
    return await console.load()


@router.post("/ngos/{ngo_id}/reject", response_model=schemas.AdminConsole)
async def reject_ngo(
    ngo_id: str,
    decision: schemas.NGODecision,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_admin_session),
    console: AdminConsoleService = Depends(get_admin_console),
    db: Session = Depends(get_db),
):
    console.reject_ngo(db, ngo_id, session.user_id, decision.admin_notes)
    background_tasks.add_task(notification_handlers.notify_ngo_decision, ngo_id)
    return await console.load()


@router.post("/messages/{message_id}/read", response_model=schemas.ContactMessage)
def mark_message_read(
    message_id: str,
    session: SessionContext = Depends(get_admin_session),
    console: AdminConsoleService = Depends(get_admin_console),
    db: Session = Depends(get_db),
):
    db_message = console.mark_message_read(db, message_id)
    if db_message is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return db_message
