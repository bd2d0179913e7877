"""Credential reset endpoints."""

from fastapi import APIRouter, Depends

from recruitment.dependencies.auth import get_client_info, get_db
from recruitment.models.base import Database
from recruitment.schemas import ResetCredentialsUpdate, ResetRequest, ResetTokenRequest
from recruitment.services import reset_credentials_service
from recruitment.services.activity_log import ClientInfo

router = APIRouter(prefix="/reset-credentials", tags=["reset-credentials"])


@router.post("")
async def request_reset(
    body: ResetRequest,
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    # Email delivery is mocked, the token goes straight back to the caller
    token = await reset_credentials_service.request_credential_reset(db, body.email, client=client)
    return {"token": token}


@router.post("/validate")
async def validate_token(body: ResetTokenRequest, db: Database = Depends(get_db)):
    await reset_credentials_service.validate_reset_token(db, body.token)
    return {"valid": True}


@router.post("/update")
async def update_credentials(
    body: ResetCredentialsUpdate,
    db: Database = Depends(get_db),
    client: ClientInfo = Depends(get_client_info),
):
    await reset_credentials_service.reset_credentials(db, body, client=client)
    return {"message": "Credentials updated successfully"}
