"""Pydantic schemas package and the validation gate used by every service entrypoint."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from recruitment.errors import InvalidFormDataError
from recruitment.schemas.user import (
    Credentials,
    FullUserData,
    NewUser,
    ProfileUpdate,
    SessionData,
    UserData,
)
from recruitment.schemas.application import (
    ApplicantName,
    ApplicantOverview,
    ApplicationAnswer,
    ApplicationFullInformation,
    ApplicationPage,
    ApplicationPageRequest,
    ApplicationRecord,
    ApplicationStatus,
    AvailabilityRange,
    AvailabilityUpdate,
    CatalogCompetence,
    CompetenceListRequest,
    DeleteAvailabilityRequest,
    DeleteCompetenceRequest,
    SetCompetenceRequest,
    StatusTransitionRequest,
    UserAvailability,
    UserCompetence,
)
from recruitment.schemas.reset_credentials import (
    ResetCredentialsUpdate,
    ResetRequest,
    ResetTokenRequest,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_form(model: type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model`` or raise InvalidFormDataError."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidFormDataError() from exc


__all__ = [
    "validate_form",
    # User
    "Credentials",
    "FullUserData",
    "NewUser",
    "ProfileUpdate",
    "SessionData",
    "UserData",
    # Application
    "ApplicantName",
    "ApplicantOverview",
    "ApplicationAnswer",
    "ApplicationFullInformation",
    "ApplicationPage",
    "ApplicationPageRequest",
    "ApplicationRecord",
    "ApplicationStatus",
    "AvailabilityRange",
    "AvailabilityUpdate",
    "CatalogCompetence",
    "CompetenceListRequest",
    "DeleteAvailabilityRequest",
    "DeleteCompetenceRequest",
    "SetCompetenceRequest",
    "StatusTransitionRequest",
    "UserAvailability",
    "UserCompetence",
    # Reset credentials
    "ResetCredentialsUpdate",
    "ResetRequest",
    "ResetTokenRequest",
]
