# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from mauka.crud import crud_application
from mauka.dependencies import SessionContext
from mauka.errors import InvalidTransition, NotAllowed, NotFound
from mauka.schemas import schemas

STATUS_FILTERS = ("all", "pending", "approved", "rejected")


class ApplicationReviewBoard:
    """
    Applications received by one NGO across all of its opportunities.

    Decisions patch the already-loaded list instead of fetching it again, so the
    opportunities' ``volunteers_applied`` counters are not refreshed here.
    """

    def __init__(self, db: Session, session: SessionContext):
        if session.user_type != "ngo":
            raise NotAllowed("Only NGOs can review applications")
        self.db = db
        self.session = session
        self.applications: List[schemas.Application] = []

    def load(self) -> "ApplicationReviewBoard":
        self.applications = crud_application.get_applications_for_my_opportunities(self.db, self.session.user_id)
        return self

    def counts(self) -> Dict[str, int]:
        counts = {"total": len(self.applications), "pending": 0, "approved": 0, "rejected": 0}
        for application in self.applications:
            counts[application.status] += 1
        return counts

    def filtered(self, status_filter: str = "all") -> List[schemas.Application]:
        if status_filter not in STATUS_FILTERS:
            raise ValueError(f"Unknown filter '{status_filter}'")
        if status_filter == "all":
            return list(self.applications)
        return [application for application in self.applications if application.status == status_filter]

    def snapshot(self, status_filter: str = "all") -> schemas.ApplicationReview:
        return schemas.ApplicationReview(
            counts=self.counts(), status_filter=status_filter, applications=self.filtered(status_filter)
        )

    def decide(self, application_id: str, status: str, ngo_notes: Optional[str] = None) -> schemas.Application:
        index = next(
            (i for i, application in enumerate(self.applications) if application.id == application_id), None
        )
        if index is None:
            raise NotFound("Application not found")
        if self.applications[index].status != "pending":
            raise InvalidTransition(f"This application has already been {self.applications[index].status}")

        crud_application.update_application_status(self.db, application_id, status, ngo_notes)

        patched = self.applications[index].model_copy(
            update={"status": status, "ngo_notes": ngo_notes, "reviewed_at": datetime.now(timezone.utc)}
        )
        self.applications[index] = patched
        return patched
