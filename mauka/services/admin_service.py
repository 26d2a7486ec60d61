"""
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Fri Oct 10 2025
# SPDX-License-Identifier: MIT
"""

from typing import Callable, Optional

from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.crud import crud_application, crud_contact, crud_ngo, crud_opportunity, crud_profile
from mauka.schemas import schemas
from mauka.utils.parallel import load_independently, with_session

STAT_FIELDS = (
    "total_users",
    "total_volunteers",
    "total_ngos",
    "total_opportunities",
    "total_applications",
    "pending_ngos",
    "unread_messages",
)


def _users(db: Session):
    return [schemas.UserProfile.model_validate(profile) for profile in crud_profile.get_profiles(db)]


def _messages(db: Session):
    return [schemas.ContactMessage.model_validate(message) for message in crud_contact.get_messages(db)]


class AdminConsoleService:
    """
    Everything the admin console shows, loaded as independent parallel fetches.
    """

    def __init__(self, session_factory: Callable[[], Session], timeout: Optional[float] = None):
        self.session_factory = session_factory
        self.timeout = settings.widget_timeout_seconds if timeout is None else timeout

    def _fetchers(self):
        run = self.session_factory
        return {
            "total_users": with_session(run, crud_profile.count_profiles),
            "total_volunteers": with_session(run, crud_profile.count_profiles, user_type="volunteer"),
            "total_ngos": with_session(run, crud_ngo.count_applications),
            "total_opportunities": with_session(run, crud_opportunity.count_opportunities),
            "total_applications": with_session(run, crud_application.count_applications),
            "pending_ngos": with_session(run, crud_ngo.count_applications, verification_status="pending"),
            "unread_messages": with_session(run, crud_contact.count_messages, status="unread"),
            "pending_ngo_list": with_session(run, crud_ngo.get_pending_ngos),
            "ngos": with_session(run, crud_ngo.get_all_ngos),
            "users": with_session(run, _users),
            "opportunities": with_session(run, crud_opportunity.get_all_opportunities),
            "messages": with_session(run, _messages),
        }

    async def load(self) -> schemas.AdminConsole:
        defaults = {name: 0 for name in STAT_FIELDS}
        defaults.update({"pending_ngo_list": [], "ngos": [], "users": [], "opportunities": [], "messages": []})

        results, unavailable = await load_independently(self._fetchers(), defaults, timeout=self.timeout)

        return schemas.AdminConsole(
            stats=schemas.AdminStats(**{name: results[name] for name in STAT_FIELDS}),
            pending_ngos=results["pending_ngo_list"],
            ngos=results["ngos"],
            users=results["users"],
            opportunities=results["opportunities"],
            messages=results["messages"],
            unavailable=unavailable,
        )

    def approve_ngo(self, db: Session, ngo_id: str, admin_id: str, admin_notes: Optional[str] = None) -> dict:
        return crud_ngo.approve_ngo(db, ngo_id, admin_id, admin_notes)

    def reject_ngo(self, db: Session, ngo_id: str, admin_id: str, admin_notes: Optional[str] = None) -> dict:
        return crud_ngo.reject_ngo(db, ngo_id, admin_id, admin_notes)

    def mark_message_read(self, db: Session, message_id: str):
        return crud_contact.mark_as_read(db, message_id)
