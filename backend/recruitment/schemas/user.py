"""Pydantic schemas for people, credentials and sessions."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

PNR_PATTERN = r"^(19|20)[0-9]{6}-[0-9]{4}$"


def check_password_strength(value: str) -> str:
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain at least one number")
    return value


class NewUser(BaseModel):
    """Registration form."""

    name: str = Field(..., min_length=2)
    surname: str = Field(..., min_length=2)
    pnr: str = Field(..., pattern=PNR_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=8)
    username: str = Field(..., min_length=3)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class Credentials(BaseModel):
    username: str
    password: str


class ProfileUpdate(BaseModel):
    """Partial profile update. Blank strings count as "not changed"."""

    username: str | None = Field(default=None, min_length=3)
    email: EmailStr | None = None
    pnr: str | None = Field(default=None, pattern=PNR_PATTERN)
    password: str | None = Field(default=None, min_length=8)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return v if v is None else check_password_strength(v)


class UserData(BaseModel):
    """Identity resolved from a session."""

    id: int
    username: str
    role_id: int
    role: str


class FullUserData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role_id: int
    email: str | None = None
    first_name: str
    last_name: str
    pnr: str | None = None


class SessionData(BaseModel):
    """Session details handed to the HTTP layer to set the cookie."""

    id: int
    person_id: int
    token: str
    expires_at: datetime
