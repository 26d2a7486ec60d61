'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Sat Oct 11 2025
# SPDX-License-Identifier: MIT
'''

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mauka.crud import crud_ngo
from mauka.db import models
from mauka.dependencies import SessionContext
from mauka.errors import InvalidTransition, NotAllowed, NotAuthenticated, NotFound
from mauka.schemas import schemas
from mauka.services.discovery_service import (
    ControlAction,
    OpportunityDiscovery,
    filter_by_text,
    profile_needs_location,
    resolve_control,
)
from mauka.services.favorites import FavoriteStore
from tests.test_helpers import create_application, create_ngo, create_opportunity, create_profile


def session_for(profile) -> SessionContext:
    return SessionContext(user_id=profile.id, email="someone@mauka.org", profile=profile)


def nearby_row(opportunity_id: str, distance_km: float, category: str = "education", ngo_id: str = "ngo-1") -> dict:
    return {
        "id": opportunity_id,
        "ngo_id": ngo_id,
        "title": f"Opportunity {opportunity_id}",
        "description": "Help out nearby.",
        "category": category,
        "latitude": 19.05,
        "longitude": 72.85,
        "volunteers_applied": 0,
        "max_volunteers": 4,
        "status": "active",
        "organization_name": "Helping Hands Foundation",
        "distance_km": distance_km,
    }


# --- Apply control ---

def test_resolve_control_for_each_viewer():
    anonymous = SessionContext()
    volunteer = SessionContext(user_id="v", profile=models.UserProfile(id="v", full_name="V", user_type="volunteer"))
    ngo = SessionContext(user_id="n", profile=models.UserProfile(id="n", full_name="N", user_type="ngo"))
    admin = SessionContext(user_id="a", profile=models.UserProfile(id="a", full_name="A", user_type="admin"))

    assert resolve_control("unapplied", volunteer) is ControlAction.APPLY
    assert resolve_control("unapplied", anonymous) is ControlAction.SIGN_IN_REQUIRED
    assert resolve_control("unapplied", ngo) is ControlAction.NOT_A_VOLUNTEER
    assert resolve_control("unapplied", admin) is ControlAction.NOT_A_VOLUNTEER
    assert resolve_control("pending", volunteer) is ControlAction.SHOW_DETAILS
    assert resolve_control("approved", anonymous) is ControlAction.SHOW_DETAILS
    assert resolve_control("rejected", volunteer) is ControlAction.REAPPLY_NOT_PERMITTED


def test_filter_by_text_matches_title_organization_and_description():
    opportunities = [
        schemas.Opportunity(id="1", ngo_id="n", title="Beach Cleanup", description="Juhu", category="environment"),
        schemas.Opportunity(
            id="2", ngo_id="n", title="Tutoring", description="Maths", category="education",
            organization_name="Green Earth Trust",
        ),
        schemas.Opportunity(id="3", ngo_id="n", title="Clinic", description="Help at the CLEAN clinic", category="healthcare"),
    ]

    assert [o.id for o in filter_by_text(opportunities, "clean")] == ["1", "3"]
    assert [o.id for o in filter_by_text(opportunities, "green")] == ["2"]
    assert [o.id for o in filter_by_text(opportunities, "  ")] == ["1", "2", "3"]


def test_profile_needs_location(db_session: Session):
    located = create_profile(db_session, latitude=19.0, longitude=72.8)
    unlocated = create_profile(db_session, city=None, state=None)

    assert profile_needs_location(session_for(located)) is False
    assert profile_needs_location(session_for(unlocated)) is True
    assert profile_needs_location(SessionContext()) is False


# --- Listing ---

def test_discovery_only_lists_opportunities_of_approved_ngos(db_session: Session):
    approved_profile, _ = create_ngo(db_session, "approved")
    pending_profile, _ = create_ngo(db_session, "pending", email="pending@helpinghands.org")
    visible = create_opportunity(db_session, approved_profile.id, title="Visible")
    create_opportunity(db_session, pending_profile.id, title="Hidden")
    create_opportunity(db_session, approved_profile.id, title="Closed", status="closed")

    viewer = create_profile(db_session, city=None, state=None)
    result = OpportunityDiscovery(db_session, session_for(viewer)).search()

    assert [card.opportunity.id for card in result.cards] == [visible.id]
    assert result.nearby is False
    assert result.cards[0].opportunity.distance_km == 0
    assert result.cards[0].opportunity.organization_name == "Helping Hands"
    assert result.needs_location is True


def test_discovery_returns_nothing_without_approved_ngos(db_session: Session, mocker):
    pending_profile, _ = create_ngo(db_session, "pending")
    create_opportunity(db_session, pending_profile.id)
    spy = mocker.spy(crud_ngo, "get_approved_ngo_ids")

    result = OpportunityDiscovery(db_session, SessionContext()).search()

    assert result.cards == []
    spy.assert_called_once()


def test_pending_ngo_opportunity_appears_after_approval(db_session: Session):
    ngo_profile, ngo_application = create_ngo(db_session, "pending")
    opportunity = create_opportunity(db_session, ngo_profile.id)
    anonymous = SessionContext()

    before = OpportunityDiscovery(db_session, anonymous).search()
    assert opportunity.id not in [card.opportunity.id for card in before.cards]

    ngo_application.verification_status = "approved"
    db_session.commit()

    after = OpportunityDiscovery(db_session, anonymous).search()
    assert opportunity.id in [card.opportunity.id for card in after.cards]


def test_nearby_search_uses_profile_coordinates_and_radius(db_session: Session, volunteer, mocker):
    rows = [nearby_row("a", 2.4), nearby_row("b", 9.9)]
    call_rows = mocker.patch("mauka.db.procedures.call_rows", return_value=rows)

    result = OpportunityDiscovery(db_session, session_for(volunteer)).search(category="education", radius_km=10)

    call_rows.assert_called_once_with(
        db_session,
        "find_nearby_opportunities",
        user_lat=19.0760,
        user_lng=72.8777,
        radius_km=10,
        category_filter="education",
        limit_count=20,
    )
    assert result.nearby is True
    assert result.radius_km == 10
    assert all(card.opportunity.distance_km <= 10 for card in result.cards)
    assert all(card.opportunity.category == "education" for card in result.cards)


def test_search_text_is_applied_after_remote_filter(db_session: Session, volunteer, mocker):
    rows = [nearby_row("a", 1.0), nearby_row("b", 3.0)]
    rows[1]["title"] = "Food Bank Drive"
    mocker.patch("mauka.db.procedures.call_rows", return_value=rows)

    result = OpportunityDiscovery(db_session, session_for(volunteer)).search(query="food")

    assert [card.opportunity.id for card in result.cards] == ["b"]
    assert result.total == 1


def test_cards_carry_status_favorites_and_seats(db_session: Session, approved_ngo):
    ngo_profile, _ = approved_ngo
    applied = create_opportunity(db_session, ngo_profile.id, title="Applied", max_volunteers=3, volunteers_applied=1)
    rejected = create_opportunity(db_session, ngo_profile.id, title="Rejected")
    fresh = create_opportunity(db_session, ngo_profile.id, title="Fresh")
    viewer = create_profile(db_session, city=None, state=None)
    create_application(db_session, applied.id, viewer.id, "pending")
    create_application(db_session, rejected.id, viewer.id, "rejected")
    favorites = FavoriteStore({"favoriteOpportunities": f'["{fresh.id}"]'})

    result = OpportunityDiscovery(db_session, session_for(viewer), favorites=favorites).search()
    cards = {card.opportunity.id: card for card in result.cards}

    assert cards[applied.id].control_label == "Pending"
    assert cards[applied.id].seats_remaining == 2
    assert cards[rejected.id].control_label == "Rejected"
    assert cards[rejected.id].control_enabled is False
    assert cards[fresh.id].control_label == "Apply Now"
    assert cards[fresh.id].is_favorite is True


def test_failed_status_fetch_degrades_to_unapplied(db_session: Session, approved_ngo, mocker, caplog):
    ngo_profile, _ = approved_ngo
    create_opportunity(db_session, ngo_profile.id)
    viewer = create_profile(db_session, city=None, state=None)
    mocker.patch(
        "mauka.crud.crud_application.get_my_applications",
        side_effect=OperationalError("SELECT", {}, Exception("connection reset")),
    )

    result = OpportunityDiscovery(db_session, session_for(viewer)).search()

    assert [card.control_label for card in result.cards] == ["Apply Now"]
    assert "Could not load user applications" in caplog.text


# --- Applying ---

def test_apply_moves_control_to_pending(db_session: Session, approved_ngo):
    ngo_profile, _ = approved_ngo
    opportunity = create_opportunity(db_session, ngo_profile.id, max_volunteers=1, volunteers_applied=0)
    viewer = create_profile(db_session, city=None, state=None)
    discovery = OpportunityDiscovery(db_session, session_for(viewer))
    discovery.load_statuses()
    assert discovery.card(schemas.Opportunity.model_validate(opportunity)).control_label == "Apply Now"

    result = discovery.apply(schemas.ApplicationCreate(opportunity_id=opportunity.id, cover_letter="Count me in"))

    assert result.application_status == "pending"
    assert result.control_label == "Pending"
    assert result.message == "Application submitted successfully!"
    assert result.application_id is not None
    assert discovery.card(schemas.Opportunity.model_validate(opportunity)).control_label == "Pending"


def test_applying_twice_keeps_one_row_and_reports_already_applied(db_session: Session, approved_ngo):
    ngo_profile, _ = approved_ngo
    opportunity = create_opportunity(db_session, ngo_profile.id)
    viewer = create_profile(db_session, city=None, state=None)
    application = schemas.ApplicationCreate(opportunity_id=opportunity.id)

    OpportunityDiscovery(db_session, session_for(viewer)).apply(application)
    # A second view that has not seen the first application yet
    second = OpportunityDiscovery(db_session, session_for(viewer)).apply(application)

    assert second.already_applied is True
    assert second.application_status == "pending"
    assert second.message == "You have already applied to this opportunity"
    rows = db_session.query(models.VolunteerApplication).filter_by(opportunity_id=opportunity.id).all()
    assert len(rows) == 1


def test_apply_when_status_known_does_not_call_backend(db_session: Session, approved_ngo, mocker):
    ngo_profile, _ = approved_ngo
    opportunity = create_opportunity(db_session, ngo_profile.id)
    viewer = create_profile(db_session, city=None, state=None)
    create_application(db_session, opportunity.id, viewer.id, "approved")
    insert = mocker.patch("mauka.crud.crud_application.apply_to_opportunity")

    discovery = OpportunityDiscovery(db_session, session_for(viewer))
    discovery.load_statuses()
    result = discovery.apply(schemas.ApplicationCreate(opportunity_id=opportunity.id))

    assert result.already_applied is True
    assert result.application_status == "approved"
    insert.assert_not_called()


def test_rejected_application_cannot_be_reapplied(db_session: Session, approved_ngo):
    ngo_profile, _ = approved_ngo
    opportunity = create_opportunity(db_session, ngo_profile.id)
    viewer = create_profile(db_session, city=None, state=None)
    create_application(db_session, opportunity.id, viewer.id, "rejected")
    discovery = OpportunityDiscovery(db_session, session_for(viewer))
    discovery.load_statuses()

    with pytest.raises(InvalidTransition):
        discovery.apply(schemas.ApplicationCreate(opportunity_id=opportunity.id))

    assert discovery.status_of(opportunity.id) == "rejected"
    row = db_session.query(models.VolunteerApplication).filter_by(opportunity_id=opportunity.id).one()
    assert row.status == "rejected"


def test_non_volunteers_cannot_apply(db_session: Session, approved_ngo):
    ngo_profile, _ = approved_ngo
    opportunity = create_opportunity(db_session, ngo_profile.id)
    application = schemas.ApplicationCreate(opportunity_id=opportunity.id)

    with pytest.raises(NotAuthenticated):
        OpportunityDiscovery(db_session, SessionContext()).apply(application)
    with pytest.raises(NotAllowed) as ngo_error:
        OpportunityDiscovery(db_session, session_for(ngo_profile)).apply(application)
    assert "NGOs cannot apply" in ngo_error.value.message
    assert db_session.query(models.VolunteerApplication).count() == 0


def test_apply_to_unknown_opportunity(db_session: Session):
    viewer = create_profile(db_session)
    with pytest.raises(NotFound):
        OpportunityDiscovery(db_session, session_for(viewer)).apply(
            schemas.ApplicationCreate(opportunity_id="missing")
        )


def test_generic_failure_reverts_to_unapplied(db_session: Session, approved_ngo, mocker):
    ngo_profile, _ = approved_ngo
    opportunity = create_opportunity(db_session, ngo_profile.id)
    viewer = create_profile(db_session)
    mocker.patch(
        "mauka.crud.crud_application.apply_to_opportunity",
        side_effect=OperationalError("INSERT", {}, Exception("timeout")),
    )
    discovery = OpportunityDiscovery(db_session, session_for(viewer))

    with pytest.raises(OperationalError):
        discovery.apply(schemas.ApplicationCreate(opportunity_id=opportunity.id))

    assert discovery.status_of(opportunity.id) == "unapplied"
