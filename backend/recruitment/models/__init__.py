"""SQLAlchemy models package."""

from recruitment.models.base import Base, Database
from recruitment.models.user import Person, Role, ROLE_APPLICANT, ROLE_NAMES, ROLE_RECRUITER
from recruitment.models.session import UserSession
from recruitment.models.competence import Competence, CompetenceProfile, CompetenceTranslation
from recruitment.models.availability import Availability
from recruitment.models.application import (
    APPLICATION_STATUSES,
    STATUS_ACCEPTED,
    STATUS_REJECTED,
    STATUS_UNHANDLED,
    Application,
)
from recruitment.models.activity_log import ActivityLog
from recruitment.models.password_reset_token import PasswordResetToken

__all__ = [
    "Base",
    "Database",
    # People
    "Person",
    "Role",
    "ROLE_APPLICANT",
    "ROLE_NAMES",
    "ROLE_RECRUITER",
    "UserSession",
    "PasswordResetToken",
    # Profile
    "Competence",
    "CompetenceProfile",
    "CompetenceTranslation",
    "Availability",
    # Applications
    "Application",
    "APPLICATION_STATUSES",
    "STATUS_ACCEPTED",
    "STATUS_REJECTED",
    "STATUS_UNHANDLED",
    # Audit
    "ActivityLog",
]
