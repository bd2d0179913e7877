"""Recruiter endpoints: the application board and status transitions."""

from fastapi import APIRouter, Depends, Query

from recruitment.config import get_settings
from recruitment.dependencies.auth import get_client_info, get_db, require_recruiter
from recruitment.models.base import Database
from recruitment.schemas import ApplicationPage, ApplicationRecord, ApplicationStatus, StatusTransitionRequest, UserData
from recruitment.services import application_service
from recruitment.services.activity_log import ClientInfo

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/applications", response_model=ApplicationPage)
async def list_applications(
    status: ApplicationStatus = Query(..., description="Board column"),
    offset: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=100),
    no_competences_text: str = Query(application_service.DEFAULT_NO_COMPETENCES_TEXT),
    no_availability_text: str = Query(application_service.DEFAULT_NO_AVAILABILITY_TEXT),
    recruiter: UserData = Depends(require_recruiter),
    db: Database = Depends(get_db),
):
    """One page of applications with the given status, newest first."""
    return await application_service.get_applications_by_status(
        db,
        status,
        limit or get_settings().applications_page_size,
        offset,
        no_competences_text=no_competences_text,
        no_availability_text=no_availability_text,
    )


@router.patch("/applications/{application_id}")
async def change_application_status(
    application_id: int,
    body: StatusTransitionRequest,
    recruiter: UserData = Depends(require_recruiter),
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
) -> dict[str, ApplicationRecord]:
    """Move an application to ``status`` if it still has ``current_status``; 409 otherwise."""
    record = await application_service.transition_status(
        db, application_id, body.status, body.current_status, actor_id=recruiter.id, client=client
    )
    return {"application": record}
