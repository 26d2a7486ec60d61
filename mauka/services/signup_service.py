# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import logging

from sqlalchemy.orm import Session

from mauka.crud import crud_ngo, crud_profile
from mauka.crud.guards import require_user
from mauka.errors import RemoteProcedureFailure, ValidationFailed
from mauka.schemas import schemas

logger = logging.getLogger(__name__)


def validate_signup(signup: schemas.SignupProfile):
    missing = [field for field in ("address", "city", "state") if not getattr(signup, field).strip()]
    if missing:
        raise ValidationFailed(f"Please provide your {', '.join(missing)}")
    if signup.user_type == "ngo" and signup.organization is None:
        raise ValidationFailed("NGO sign-ups must include the organization details")


def complete_signup(db: Session, user_id: str, signup: schemas.SignupProfile):
    """
    Creates the profile of a freshly signed-up user and, for NGOs, their
    verification application.

    The signup procedures are tried first. When one reports a failure, the
    same record is written directly instead.
    """
    user_id = require_user(user_id)
    validate_signup(signup)

    try:
        crud_profile.create_profile_on_signup(db, user_id, signup)
        profile = crud_profile.get_profile(db, user_id)
    except RemoteProcedureFailure as failure:
        logger.warning("Profile procedure failed for user %s (%s); writing the profile directly", user_id, failure)
        profile = crud_profile.upsert_profile(db, user_id, signup.user_type, signup)

    if signup.user_type != "ngo":
        return profile, None

    try:
        crud_ngo.create_application_on_signup(db, user_id, signup.organization)
        application = crud_ngo.get_application_for_user(db, user_id)
    except RemoteProcedureFailure as failure:
        logger.warning("NGO application procedure failed for user %s (%s); inserting directly", user_id, failure)
        application = crud_ngo.create_application(db, user_id, signup.organization)
    return profile, application
