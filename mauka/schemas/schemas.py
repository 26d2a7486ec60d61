# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

UserType = Literal["volunteer", "ngo", "admin"]
ApplicationStatus = Literal["pending", "approved", "rejected"]
VerificationStatus = Literal["pending", "approved", "rejected"]
OpportunityStatus = Literal["active", "closed", "draft"]
MessageStatus = Literal["unread", "read"]


# --- Profiles ---

class UserProfileBase(BaseModel):
    full_name: str
    phone: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    location_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    avatar_url: Optional[str] = None


class UserProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    location_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    avatar_url: Optional[str] = None


class UserProfile(UserProfileBase):
    id: str
    user_type: UserType
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicantSummary(BaseModel):
    id: str
    full_name: str
    phone: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    city: Optional[str] = None
    state: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# --- NGO applications ---

class NGOApplicationBase(BaseModel):
    organization_name: str
    registration_number: str
    email: EmailStr
    phone: str
    website: Optional[str] = None
    address: str
    city: str
    state: str
    pincode: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: str
    focus_areas: Optional[List[str]] = None
    established_year: Optional[int] = None
    team_size: Optional[str] = None


class NGOApplicationCreate(NGOApplicationBase):
    pass


class NGOApplicationUpdate(BaseModel):
    organization_name: Optional[str] = None
    registration_number: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    description: Optional[str] = None
    focus_areas: Optional[List[str]] = None
    established_year: Optional[int] = None
    team_size: Optional[str] = None


class NGOApplication(NGOApplicationBase):
    id: str
    user_id: str
    verification_status: VerificationStatus
    admin_notes: Optional[str] = None
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    created_at: Optional[datetime] = None
    # Joined from the owning profile
    full_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class NGODecision(BaseModel):
    admin_notes: Optional[str] = None


# --- Opportunities ---

class OpportunityBase(BaseModel):
    title: str
    description: str
    requirements: Optional[str] = None
    category: str
    skills_required: Optional[List[str]] = None
    location_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: float = 0
    longitude: float = 0
    duration: Optional[str] = None
    time_commitment: Optional[str] = None
    max_volunteers: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    application_deadline: Optional[str] = None
    is_virtual: bool = False
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    tags: Optional[List[str]] = None


class OpportunityCreate(OpportunityBase):
    pass


class OpportunityUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    category: Optional[str] = None
    skills_required: Optional[List[str]] = None
    location_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    duration: Optional[str] = None
    time_commitment: Optional[str] = None
    max_volunteers: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    application_deadline: Optional[str] = None
    is_virtual: Optional[bool] = None
    status: Optional[OpportunityStatus] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    tags: Optional[List[str]] = None


class Opportunity(OpportunityBase):
    id: str
    ngo_id: str
    volunteers_needed: int = 1
    volunteers_applied: int = 0
    status: OpportunityStatus = "active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Joined fields
    organization_name: Optional[str] = None
    distance_km: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class NearbyOpportunity(Opportunity):
    distance_km: float
    organization_name: str = ""
    ngo_verification_status: Optional[str] = None


class OwnOpportunity(Opportunity):
    visible_to_volunteers: bool = False


# --- Volunteer applications ---

class ApplicationCreate(BaseModel):
    opportunity_id: str
    cover_letter: str = ""
    availability: str = ""
    experience: str = ""


class ApplicationDecision(BaseModel):
    ngo_notes: Optional[str] = None


class OpportunitySummary(BaseModel):
    id: str
    title: str
    ngo_id: Optional[str] = None
    category: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    organization_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Application(BaseModel):
    id: str
    opportunity_id: str
    volunteer_id: str
    cover_letter: Optional[str] = None
    availability: Optional[str] = None
    experience: Optional[str] = None
    status: ApplicationStatus
    ngo_notes: Optional[str] = None
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    # Joined fields
    opportunity: Optional[OpportunitySummary] = None
    volunteer: Optional[ApplicantSummary] = None

    model_config = ConfigDict(from_attributes=True)


# --- Contact messages ---

class ContactMessageCreate(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    subject: str
    message: str


class ContactMessage(ContactMessageCreate):
    id: str
    status: MessageStatus
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Location ---

class Coordinates(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class DetectedLocation(BaseModel):
    city: str
    state: str
    country: str
    latitude: float
    longitude: float
    source: str = "default"


class LocationCacheEntry(BaseModel):
    id: Optional[str] = None
    address: str
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: float
    longitude: float
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Distance(BaseModel):
    distance_km: float


# --- Stats and dashboards ---

class UserStats(BaseModel):
    applications_count: Optional[int] = None
    approved_applications: Optional[int] = None
    pending_applications: Optional[int] = None
    rejected_applications: Optional[int] = None
    opportunities_posted: Optional[int] = None
    active_opportunities: Optional[int] = None
    total_applications_received: Optional[int] = None
    verification_status: Optional[VerificationStatus] = None


class Dashboard(BaseModel):
    profile: Optional[UserProfile] = None
    needs_location: bool = False
    stats: UserStats = Field(default_factory=UserStats)
    recent_applications: List[Application] = Field(default_factory=list)
    ngo_status: Optional[VerificationStatus] = None
    my_opportunities: List[Opportunity] = Field(default_factory=list)
    unavailable: List[str] = Field(default_factory=list)


class AdminStats(BaseModel):
    total_users: int = 0
    total_volunteers: int = 0
    total_ngos: int = 0
    total_opportunities: int = 0
    total_applications: int = 0
    pending_ngos: int = 0
    unread_messages: int = 0


class AdminConsole(BaseModel):
    stats: AdminStats
    pending_ngos: List[NGOApplication] = Field(default_factory=list)
    ngos: List[NGOApplication] = Field(default_factory=list)
    users: List[UserProfile] = Field(default_factory=list)
    opportunities: List[Opportunity] = Field(default_factory=list)
    messages: List[ContactMessage] = Field(default_factory=list)
    unavailable: List[str] = Field(default_factory=list)


# --- Discovery ---

class OpportunityCard(BaseModel):
    opportunity: Opportunity
    application_status: Literal["unapplied", "pending", "approved", "rejected"]
    control_label: str
    control_enabled: bool
    is_favorite: bool = False
    seats_remaining: Optional[int] = None


class Discovery(BaseModel):
    cards: List[OpportunityCard]
    total: int
    radius_km: Optional[int] = None
    category: Optional[str] = None
    nearby: bool = False
    needs_location: bool = False


class ApplyResult(BaseModel):
    opportunity_id: str
    application_status: Literal["unapplied", "pending", "approved", "rejected"]
    control_label: str
    already_applied: bool = False
    message: str
    application_id: Optional[str] = None


class ApplicationReview(BaseModel):
    counts: Dict[str, int]
    status_filter: Literal["all", "pending", "approved", "rejected"]
    applications: List[Application]


class Favorites(BaseModel):
    opportunity_ids: List[str]


# --- Signup completion ---

class SignupProfile(BaseModel):
    full_name: str
    user_type: Literal["volunteer", "ngo"]
    phone: str = ""
    bio: str = ""
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    address: str
    city: str
    state: str
    pincode: str = ""
    latitude: float = 0
    longitude: float = 0
    avatar_url: Optional[str] = None
    organization: Optional[NGOApplicationCreate] = None
