# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import List

from sqlalchemy.orm import Session

from mauka.crud import crud_ngo, crud_opportunity
from mauka.errors import ValidationFailed
from mauka.schemas import schemas


def validate_new_opportunity(opportunity: schemas.OpportunityCreate):
    if not (opportunity.title.strip() and opportunity.description.strip() and opportunity.category.strip()):
        raise ValidationFailed("Please fill in all required fields")
    if not opportunity.is_virtual and (
        not (opportunity.location_address or "").strip() or opportunity.latitude == 0 or opportunity.longitude == 0
    ):
        raise ValidationFailed("Please select a location using the map search")


def get_own_opportunities(db: Session, ngo_id: str) -> List[schemas.OwnOpportunity]:
    """
    An NGO's opportunities, each flagged with whether volunteers can currently find it.

    NGOs may post before their verification is approved; those posts stay hidden
    from volunteers until it is.
    """
    approved = crud_ngo.get_verification_status(db, ngo_id) == "approved"
    return [
        schemas.OwnOpportunity.model_validate(opportunity).model_copy(
            update={"visible_to_volunteers": approved and opportunity.status == "active"}
        )
        for opportunity in crud_opportunity.get_opportunities_for_ngo(db, ngo_id)
    ]
