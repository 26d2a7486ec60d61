"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Tue Jul 15 2025
# SPDX-License-Identifier: MIT
"""

import logging

from sqlalchemy.orm import Session

from mauka.crud import crud_application, crud_ngo, crud_opportunity, crud_profile
from mauka.db.database import get_db
from mauka.services.email_service import EmailService

logger = logging.getLogger(__name__)


async def notify_new_application(application_id: str):
    """
    Emails the owning NGO about a new volunteer application.
    This function is designed to run as a background task.
    """
    db: Session = next(get_db())
    try:
        application = crud_application.get_application(db, application_id)
        if application is None:
            logger.warning("Background Task Warning: Application with ID %s not found for notification.", application_id)
            return
        opportunity = crud_opportunity.get_opportunity_row(db, application.opportunity_id)
        ngo = crud_ngo.get_application_for_user(db, opportunity.ngo_id) if opportunity else None
        if ngo is None:
            logger.warning("Background Task Warning: No NGO contact for application %s.", application_id)
            return
        volunteer = crud_profile.get_profile(db, application.volunteer_id)
        await EmailService().send_new_application_notification(ngo, opportunity, volunteer)
    finally:
        db.close()


async def notify_ngo_decision(ngo_id: str):
    """
    Emails an NGO the outcome of its verification review.
    This function is designed to run as a background task.
    """
    db: Session = next(get_db())
    try:
        ngo = crud_ngo.get_application(db, ngo_id)
        if ngo is None:
            logger.warning("Background Task Warning: NGO application with ID %s not found for notification.", ngo_id)
            return
        await EmailService().send_ngo_verification_notification(ngo)
    finally:
        db.close()
