"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Thu Oct 09 2025
# SPDX-License-Identifier: MIT
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.crud import crud_application, crud_opportunity
from mauka.dependencies import SessionContext
from mauka.errors import (
    AlreadyApplied,
    InvalidTransition,
    NotAllowed,
    NotAuthenticated,
    NotFound,
    PartialDataUnavailable,
)
from mauka.schemas import schemas
from mauka.services.favorites import FavoriteStore

logger = logging.getLogger(__name__)

UNAPPLIED = "unapplied"

CONTROL_LABELS = {
    UNAPPLIED: "Apply Now",
    "pending": "Pending",
    "approved": "Approved",
    "rejected": "Rejected",
}

RADIUS_CHOICES = (5, 10, 25, 50, 100)

CATEGORIES = (
    "education",
    "healthcare",
    "environment",
    "social-service",
    "disaster-relief",
    "animal-welfare",
)


class ControlAction(str, Enum):
    APPLY = "apply"
    SHOW_DETAILS = "show_details"
    SIGN_IN_REQUIRED = "sign_in_required"
    NOT_A_VOLUNTEER = "not_a_volunteer"
    REAPPLY_NOT_PERMITTED = "reapply_not_permitted"


def resolve_control(application_status: str, session: SessionContext) -> ControlAction:
    """
    What pressing an opportunity's apply control does for this viewer.
    """
    if application_status in ("pending", "approved"):
        return ControlAction.SHOW_DETAILS
    if not session.is_authenticated:
        return ControlAction.SIGN_IN_REQUIRED
    if session.user_type != "volunteer":
        return ControlAction.NOT_A_VOLUNTEER
    if application_status == "rejected":
        return ControlAction.REAPPLY_NOT_PERMITTED
    return ControlAction.APPLY


def filter_by_text(opportunities: Iterable[schemas.Opportunity], query: Optional[str]) -> List[schemas.Opportunity]:
    """
    Case-insensitive substring match on title, organization and description.
    Only narrows the list it is given.
    """
    opportunities = list(opportunities)
    needle = (query or "").strip().lower()
    if not needle:
        return opportunities
    return [
        opportunity
        for opportunity in opportunities
        if needle in opportunity.title.lower()
        or needle in (opportunity.organization_name or "").lower()
        or needle in opportunity.description.lower()
    ]


def profile_needs_location(session: SessionContext) -> bool:
    profile = session.profile
    if profile is None:
        return False
    return not (profile.latitude and profile.longitude and profile.city and profile.state)


class OpportunityDiscovery:
    """
    The volunteer-facing opportunity list for one viewer.

    Holds the viewer's application status per opportunity. The status map is
    updated in place when the viewer applies; opportunity counters such as
    ``volunteers_applied`` are left as the backend last reported them.
    """

    def __init__(self, db: Session, session: SessionContext, favorites: Optional[FavoriteStore] = None):
        self.db = db
        self.session = session
        self.favorites = favorites
        self.statuses: Dict[str, str] = {}

    def load_statuses(self):
        if not self.session.is_authenticated:
            return
        try:
            applications = crud_application.get_my_applications(self.db, self.session.user_id)
        except SQLAlchemyError as error:
            self.db.rollback()
            logger.warning("%s", PartialDataUnavailable("user applications", error))
            return
        self.statuses = {application.opportunity_id: application.status for application in applications}

    def status_of(self, opportunity_id: str) -> str:
        return self.statuses.get(opportunity_id, UNAPPLIED)

    def card(self, opportunity: schemas.Opportunity) -> schemas.OpportunityCard:
        status = self.status_of(opportunity.id)
        seats_remaining = None
        if opportunity.max_volunteers:
            seats_remaining = max(opportunity.max_volunteers - opportunity.volunteers_applied, 0)
        return schemas.OpportunityCard(
            opportunity=opportunity,
            application_status=status,
            control_label=CONTROL_LABELS[status],
            control_enabled=status != "rejected",
            is_favorite=self.favorites is not None and opportunity.id in self.favorites,
            seats_remaining=seats_remaining,
        )

    def search(
        self,
        category: Optional[str] = None,
        radius_km: int = 25,
        query: Optional[str] = None,
    ) -> schemas.Discovery:
        """
        Nearby opportunities when the viewer's profile has coordinates, the full
        approved listing otherwise; the text query is applied afterwards.
        """
        self.load_statuses()
        profile = self.session.profile
        nearby = bool(profile is not None and profile.latitude and profile.longitude)

        if nearby:
            opportunities = crud_opportunity.get_nearby_opportunities(
                self.db,
                profile.latitude,
                profile.longitude,
                radius_km=radius_km,
                category=category,
                limit=settings.nearby_limit,
            )
        else:
            opportunities = [
                opportunity.model_copy(update={"distance_km": 0})
                for opportunity in crud_opportunity.get_opportunities(self.db, category=category)
            ]

        cards = [self.card(opportunity) for opportunity in filter_by_text(opportunities, query)]
        return schemas.Discovery(
            cards=cards,
            total=len(cards),
            radius_km=radius_km if nearby else None,
            category=category,
            nearby=nearby,
            needs_location=profile_needs_location(self.session),
        )

    def _result(
        self,
        opportunity_id: str,
        message: str,
        already_applied: bool = False,
        application_id: Optional[str] = None,
    ) -> schemas.ApplyResult:
        status = self.status_of(opportunity_id)
        return schemas.ApplyResult(
            opportunity_id=opportunity_id,
            application_status=status,
            control_label=CONTROL_LABELS[status],
            already_applied=already_applied,
            message=message,
            application_id=application_id,
        )

    def apply(self, application: schemas.ApplicationCreate) -> schemas.ApplyResult:
        opportunity_id = application.opportunity_id
        action = resolve_control(self.status_of(opportunity_id), self.session)

        if action is ControlAction.SHOW_DETAILS:
            return self._result(
                opportunity_id,
                f"You have already applied to this opportunity. Status: {self.status_of(opportunity_id)}",
                already_applied=True,
            )
        if action is ControlAction.SIGN_IN_REQUIRED:
            raise NotAuthenticated("Please sign in to apply for opportunities")
        if action is ControlAction.NOT_A_VOLUNTEER:
            if self.session.user_type == "ngo":
                raise NotAllowed("NGOs cannot apply to volunteer opportunities. Only volunteers can apply.")
            raise NotAllowed("Only volunteers can apply to opportunities.")
        if action is ControlAction.REAPPLY_NOT_PERMITTED:
            raise InvalidTransition(
                "Your previous application was rejected. You cannot reapply to this opportunity."
            )

        if crud_opportunity.get_opportunity_row(self.db, opportunity_id) is None:
            raise NotFound("Opportunity not found")

        self.statuses[opportunity_id] = "pending"
        try:
            db_application = crud_application.apply_to_opportunity(self.db, self.session.user_id, application)
        except AlreadyApplied as conflict:
            return self._result(opportunity_id, conflict.message, already_applied=True)
        except Exception:
            self.statuses.pop(opportunity_id, None)
            raise
        return self._result(opportunity_id, "Application submitted successfully!", application_id=db_application.id)
