"""Pydantic models for identity tables: profiles and the resolved auth session."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import Field, field_validator

from src.models.base import BloomBase, TimestampMixin, blank_to_none

NAME_MIN_LENGTH = 2
NAME_TOO_SHORT = f"Name must be at least {NAME_MIN_LENGTH} characters"


# ---------- Enums ----------

class BloodGroup(str, Enum):
    a_positive = "A+"
    a_negative = "A-"
    b_positive = "B+"
    b_negative = "B-"
    ab_positive = "AB+"
    ab_negative = "AB-"
    o_positive = "O+"
    o_negative = "O-"


# ---------- Profiles ----------

class ProfileDraft(BloomBase):
    """Editable profile fields as shown on the profile form."""

    name: str = ""
    date_of_birth: date | None = None
    blood_group: BloodGroup | None = None


class ProfileUpdate(BloomBase):
    name: str = Field(default="", validate_default=True)
    date_of_birth: date | None = None
    blood_group: BloodGroup | None = None

    @field_validator("date_of_birth", "blood_group", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("name", mode="before")
    @classmethod
    def _name_long_enough(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and len(value.strip()) < NAME_MIN_LENGTH):
            raise ValueError(NAME_TOO_SHORT)
        return value


class ProfileRead(BloomBase, TimestampMixin):
    id: uuid.UUID  # equals the auth user id
    name: str
    date_of_birth: date | None = None
    blood_group: BloodGroup | None = None


# ---------- Session ----------

class SessionRead(BloomBase):
    user_id: uuid.UUID
    email: str | None = None
    display_name: str | None = None
    session_id: str | None = None
    expires_at: datetime | None = None


class SignOutResponse(BloomBase):
    message: str
    redirect_to: str = Field(description="Route the client should navigate to")
