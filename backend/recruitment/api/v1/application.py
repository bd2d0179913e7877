"""Applicant endpoints: competences, availability and application submission."""

from fastapi import APIRouter, Depends, Query

from recruitment.dependencies.auth import get_client_info, get_db, require_user
from recruitment.models.base import Database
from recruitment.schemas import (
    ApplicantOverview,
    ApplicationRecord,
    AvailabilityRange,
    AvailabilityUpdate,
    CatalogCompetence,
    CompetenceListRequest,
    DeleteAvailabilityRequest,
    DeleteCompetenceRequest,
    SetCompetenceRequest,
    UserAvailability,
    UserCompetence,
    UserData,
)
from recruitment.services import application_service, profile_service
from recruitment.services.activity_log import ClientInfo

router = APIRouter(prefix="/application", tags=["application"])


# --- Competences ---

@router.post("/competences/catalog", response_model=list[CatalogCompetence])
async def competence_catalog(
    body: CompetenceListRequest,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
):
    return await profile_service.list_catalog(db, body.locale)


@router.get("/competences", response_model=list[UserCompetence])
async def list_competences(
    locale: str | None = Query(None, min_length=2, max_length=2),
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
):
    return await profile_service.list_competences(db, user.id, locale)


@router.post("/competences")
async def set_competence(
    body: SetCompetenceRequest,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    await profile_service.set_competence(
        db, user.id, body.competence_id, body.years_of_experience, client=client
    )
    return {}


@router.post("/competences/delete")
async def delete_competence(
    body: DeleteCompetenceRequest,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    await profile_service.delete_competence(db, user.id, body.competence_profile_id, client=client)
    return {}


# --- Availability ---

@router.get("/availability", response_model=list[UserAvailability])
async def list_availability(
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
):
    return await profile_service.list_availability(db, user.id)


@router.post("/availability")
async def add_availability(
    body: AvailabilityRange,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    availability_id = await profile_service.add_availability(
        db, user.id, body.from_date, body.to_date, client=client
    )
    return {"availabilityID": availability_id}


@router.put("/availability")
async def update_availability(
    body: AvailabilityUpdate,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    await profile_service.update_availability(
        db, user.id, body.availability_id, body.from_date, body.to_date, client=client
    )
    return {}


@router.post("/availability/delete")
async def delete_availability(
    body: DeleteAvailabilityRequest,
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    await profile_service.delete_availability(db, user.id, body.availability_id, client=client)
    return {}


# --- Application ---

@router.get("/details", response_model=ApplicantOverview)
async def applicant_details(
    locale: str | None = Query(None, min_length=2, max_length=2),
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
):
    """Profile, competences, availability and latest application of the caller."""
    return await application_service.get_applicant_overview(db, user.id, locale)


@router.post("/submit")
async def submit_application(
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    application_id = await application_service.register_application(db, user.id, client=client)
    return {"applicationID": application_id}


@router.get("/submitted", response_model=ApplicationRecord | None)
async def submitted_application(
    user: UserData = Depends(require_user),
    db: Database = Depends(get_db),
):
    return await application_service.get_submitted_application(db, user.id)
