# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import time
import uuid

from jose import jwt
from sqlalchemy.orm import Session

from mauka.config import settings
from mauka.db import models


def make_token(user_id: str, email: str = "user@mauka.org", secret: str = None, audience: str = None) -> str:
    claims = {
        "sub": user_id,
        "email": email,
        "aud": audience or settings.jwt_audience,
        "role": "authenticated",
        "exp": int(time.time()) + 3600,
    }
    return jwt.encode(claims, secret or settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def create_profile(db: Session, user_type: str = "volunteer", **overrides) -> models.UserProfile:
    data = {
        "id": str(uuid.uuid4()),
        "full_name": f"Test {user_type.title()}",
        "user_type": user_type,
        "city": "Mumbai",
        "state": "Maharashtra",
    }
    data.update(overrides)
    profile = models.UserProfile(**data)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def create_ngo(db: Session, verification_status: str = "approved", **overrides):
    """
    Creates an NGO profile together with its verification application.
    """
    profile = create_profile(db, "ngo", full_name=overrides.pop("full_name", "Helping Hands"))
    application = models.NGOApplication(
        user_id=profile.id,
        organization_name=overrides.pop("organization_name", "Helping Hands Foundation"),
        registration_number="MH/2020/0042",
        email=overrides.pop("email", "contact@helpinghands.org"),
        phone="+91 22 5555 0101",
        address="12 Marine Drive",
        city="Mumbai",
        state="Maharashtra",
        pincode="400020",
        description="Community education programmes.",
        focus_areas=["education"],
        verification_status=verification_status,
        **overrides,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return profile, application


def create_opportunity(db: Session, ngo_id: str, **overrides) -> models.VolunteerOpportunity:
    data = {
        "ngo_id": ngo_id,
        "title": "Weekend Reading Club",
        "description": "Read stories with children at the community library.",
        "category": "education",
        "location_address": "Colaba, Mumbai",
        "city": "Mumbai",
        "state": "Maharashtra",
        "latitude": 18.9067,
        "longitude": 72.8147,
        "max_volunteers": 5,
        "status": "active",
    }
    data.update(overrides)
    opportunity = models.VolunteerOpportunity(**data)
    db.add(opportunity)
    db.commit()
    db.refresh(opportunity)
    return opportunity


def create_application(db: Session, opportunity_id: str, volunteer_id: str, status: str = "pending"):
    application = models.VolunteerApplication(
        opportunity_id=opportunity_id,
        volunteer_id=volunteer_id,
        cover_letter="I would love to help.",
        status=status,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application
