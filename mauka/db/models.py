# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#
# Table and column names mirror the hosted database exactly. The schema itself
# (foreign keys, row-level security, triggers, procedures) is owned remotely.

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship

from mauka.db.database import Base

# text[] on the hosted Postgres, JSON everywhere else
TextArray = JSON().with_variant(ARRAY(Text), "postgresql")


def _uuid() -> str:
    return str(uuid.uuid4())


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    full_name = Column(String(255), nullable=False)
    user_type = Column(String(20), nullable=False, default="volunteer")
    phone = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(TextArray, nullable=True)
    interests = Column(TextArray, nullable=True)
    location_address = Column(Text, nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    pincode = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    avatar_url = Column(Text, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    ngo_application = relationship("NGOApplication", back_populates="user", uselist=False)


class NGOApplication(Base):
    __tablename__ = "ngo_applications"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("user_profiles.id"), unique=True, nullable=False)
    organization_name = Column(String(255), nullable=False)
    registration_number = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    website = Column(String(255), nullable=True)
    address = Column(Text, nullable=False)
    city = Column(String(255), nullable=False)
    state = Column(String(255), nullable=False)
    pincode = Column(String(20), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    description = Column(Text, nullable=False)
    focus_areas = Column(TextArray, nullable=True)
    established_year = Column(Integer, nullable=True)
    team_size = Column(String(50), nullable=True)
    verification_status = Column(String(20), nullable=False, default="pending")
    admin_notes = Column(Text, nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    verified_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("UserProfile", back_populates="ngo_application")


class VolunteerOpportunity(Base):
    __tablename__ = "volunteer_opportunities"

    id = Column(String(36), primary_key=True, default=_uuid)
    ngo_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    category = Column(String(50), nullable=False)
    skills_required = Column(TextArray, nullable=True)
    location_address = Column(Text, nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    pincode = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=False, default=0)
    longitude = Column(Float, nullable=False, default=0)
    duration = Column(String(255), nullable=True)
    time_commitment = Column(String(255), nullable=True)
    volunteers_needed = Column(Integer, nullable=False, default=1)
    max_volunteers = Column(Integer, nullable=True)
    volunteers_applied = Column(Integer, nullable=False, default=0)
    start_date = Column(String(32), nullable=True)
    end_date = Column(String(32), nullable=True)
    application_deadline = Column(String(32), nullable=True)
    is_virtual = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="active")
    contact_person = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    contact_email = Column(String(255), nullable=True)
    tags = Column(TextArray, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    ngo = relationship("UserProfile")
    applications = relationship("VolunteerApplication", back_populates="opportunity")


class VolunteerApplication(Base):
    __tablename__ = "volunteer_applications"
    __table_args__ = (
        UniqueConstraint(
            "opportunity_id", "volunteer_id", name="volunteer_applications_opportunity_id_volunteer_id_key"
        ),
    )

    id = Column(String(36), primary_key=True, default=_uuid)
    opportunity_id = Column(String(36), ForeignKey("volunteer_opportunities.id"), nullable=False, index=True)
    volunteer_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=True)
    availability = Column(Text, nullable=True)
    experience = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    ngo_notes = Column(Text, nullable=True)
    applied_at = Column(DateTime(timezone=True), server_default=func.now())
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    opportunity = relationship("VolunteerOpportunity", back_populates="applications")
    volunteer = relationship("UserProfile")


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="unread")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LocationCache(Base):
    __tablename__ = "location_cache"

    id = Column(String(36), primary_key=True, default=_uuid)
    address = Column(Text, unique=True, nullable=False)
    city = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    pincode = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
