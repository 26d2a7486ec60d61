"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Fri Oct 10 2025
# SPDX-License-Identifier: MIT
"""

from typing import Callable, Optional

from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.crud import crud_application, crud_ngo, crud_opportunity, crud_stats
from mauka.dependencies import SessionContext
from mauka.schemas import schemas
from mauka.services.discovery_service import profile_needs_location
from mauka.utils.parallel import load_independently, with_session

RECENT_LIMIT = 5


def _recent_applications(db: Session, user_id: str):
    return crud_application.get_my_applications(db, user_id)[:RECENT_LIMIT]


def _recent_opportunities(db: Session, ngo_id: str):
    return [
        schemas.Opportunity.model_validate(opportunity)
        for opportunity in crud_opportunity.get_opportunities_for_ngo(db, ngo_id, limit=RECENT_LIMIT)
    ]


class DashboardService:
    def __init__(self, session_factory: Callable[[], Session], timeout: Optional[float] = None):
        self.session_factory = session_factory
        self.timeout = settings.widget_timeout_seconds if timeout is None else timeout

    async def load(self, session: SessionContext) -> schemas.Dashboard:
        """
        Stats and recent activity for the signed-in user. Each widget loads on its
        own; one that fails or exceeds the timeout is left empty and reported.
        """
        user_id = session.user_id
        run = self.session_factory
        fetchers = {
            "stats": with_session(run, crud_stats.get_user_stats, user_id),
            "recent_applications": with_session(run, _recent_applications, user_id),
        }
        defaults = {"stats": schemas.UserStats(), "recent_applications": []}
        if session.user_type == "ngo":
            fetchers["ngo_status"] = with_session(run, crud_ngo.get_verification_status, user_id)
            fetchers["my_opportunities"] = with_session(run, _recent_opportunities, user_id)
            defaults.update({"ngo_status": None, "my_opportunities": []})

        results, unavailable = await load_independently(fetchers, defaults, timeout=self.timeout)

        ngo_status = results.get("ngo_status")
        return schemas.Dashboard(
            profile=schemas.UserProfile.model_validate(session.profile) if session.profile is not None else None,
            needs_location=profile_needs_location(session),
            stats=results["stats"],
            recent_applications=results["recent_applications"],
            ngo_status=ngo_status,
            # Unverified NGOs are shown their verification status only
            my_opportunities=results.get("my_opportunities", []) if ngo_status == "approved" else [],
            unavailable=unavailable,
        )
