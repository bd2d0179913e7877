"""Pydantic schemas for the credential reset flow."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from recruitment.schemas.user import check_password_strength


class ResetRequest(BaseModel):
    email: EmailStr


class ResetTokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class ResetCredentialsUpdate(ResetTokenRequest):
    username: str | None = Field(default=None, min_length=3)
    password: str | None = Field(default=None, min_length=8)

    @field_validator("username", "password", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return v if v is None else check_password_strength(v)
