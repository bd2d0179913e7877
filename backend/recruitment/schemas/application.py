"""Pydantic schemas for competences, availability and applications."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from recruitment.schemas.user import FullUserData

ApplicationStatus = Literal["unhandled", "accepted", "rejected"]


# --- Competences ---

class SetCompetenceRequest(BaseModel):
    competence_id: int
    years_of_experience: float = Field(..., gt=0, lt=100)


class DeleteCompetenceRequest(BaseModel):
    competence_profile_id: int


class CompetenceListRequest(BaseModel):
    locale: str = Field(..., min_length=2, max_length=2)


class CatalogCompetence(BaseModel):
    id: int
    name: str


class UserCompetence(CatalogCompetence):
    competence_profile_id: int
    years_of_experience: float


# --- Availability ---

class AvailabilityRange(BaseModel):
    """from_date > to_date is left to the datastore check constraint."""

    from_date: date
    to_date: date


class AvailabilityUpdate(AvailabilityRange):
    availability_id: int


class DeleteAvailabilityRequest(BaseModel):
    availability_id: int


class UserAvailability(BaseModel):
    availability_id: int
    from_date: date
    to_date: date


# --- Applications ---

class StatusTransitionRequest(BaseModel):
    status: ApplicationStatus
    current_status: ApplicationStatus


class ApplicationPageRequest(BaseModel):
    status: ApplicationStatus
    limit: int = Field(default=5, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ApplicantName(BaseModel):
    first_name: str
    last_name: str


class ApplicationAnswer(BaseModel):
    question: str
    answer: str


class ApplicationFullInformation(BaseModel):
    """Recruiter board card with denormalized competence and availability summaries."""

    id: int
    name: ApplicantName
    username: str
    email: str | None = None
    application_date: str
    status: ApplicationStatus
    answers: list[ApplicationAnswer]


class ApplicationPage(BaseModel):
    applications: list[ApplicationFullInformation]
    total: int
    has_more: bool


class ApplicationRecord(BaseModel):
    application_id: int
    person_id: int
    status: ApplicationStatus
    application_date: str


class ApplicantOverview(BaseModel):
    """Everything the applicant-facing profile page shows."""

    user: FullUserData
    competences: list[UserCompetence]
    availability: list[UserAvailability]
    application: ApplicationRecord | None = None
