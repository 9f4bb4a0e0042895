"""Pydantic models for manual tracking: menstrual cycles, physical data samples
and notification settings."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import Field, ValidationInfo, field_validator, model_validator

from src.models.base import BloomBase, TimestampMixin, blank_to_none, reject_bool

DEFAULT_DAYS_BEFORE_PERIOD = 3
DEFAULT_EMAIL_NOTIFICATIONS = True

START_DATE_REQUIRED = "Start date is required"
END_BEFORE_START = "End date must be on or after start date"

# Longest start..end range a single cycle record may cover, inclusive
MAX_CYCLE_SPAN_DAYS = 366
SPAN_TOO_LONG = f"A cycle cannot span more than {MAX_CYCLE_SPAN_DAYS} days"


# ---------- Enums ----------

class PainLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


# ---------- Menstrual Cycles ----------

class CycleCreate(BloomBase):
    start_date: date = Field(default=None, validate_default=True)  # type: ignore[assignment]
    end_date: date | None = None
    cycle_length: int | None = Field(default=None, gt=0)
    notes: str | None = None

    @field_validator("end_date", "cycle_length", "notes", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("cycle_length", mode="before")
    @classmethod
    def _length_not_a_boolean(cls, value: object, info: ValidationInfo) -> object:
        return reject_bool(value, info)

    @field_validator("start_date", mode="before")
    @classmethod
    def _start_date_present(cls, value: object) -> object:
        if blank_to_none(value) is None:
            raise ValueError(START_DATE_REQUIRED)
        return value

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "CycleCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(END_BEFORE_START)
        if self.end_date is not None and (self.end_date - self.start_date).days >= MAX_CYCLE_SPAN_DAYS:
            raise ValueError(SPAN_TOO_LONG)
        return self


class CycleDraft(BloomBase):
    start_date: date | None = None
    end_date: date | None = None


class CycleRead(BloomBase, TimestampMixin):
    id: uuid.UUID
    user_id: uuid.UUID
    start_date: date
    end_date: date | None = None
    cycle_length: int | None = None
    notes: str | None = None


class CycleEntry(BloomBase):
    """One line of the recent-cycles listing."""

    id: uuid.UUID
    label: str
    duration: str | None = None


# ---------- Physical Data ----------

MEASUREMENT_FIELDS = (
    "height_cm",
    "weight_kg",
    "hemoglobin_level",
    "blood_pressure_systolic",
    "blood_pressure_diastolic",
)


class PhysicalDataCreate(BloomBase):
    height_cm: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    weight_kg: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    hemoglobin_level: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    blood_pressure_systolic: int | None = Field(default=None, gt=0)
    blood_pressure_diastolic: int | None = Field(default=None, gt=0)
    pain_level: PainLevel | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator(*MEASUREMENT_FIELDS, mode="before")
    @classmethod
    def _not_a_boolean(cls, value: object, info: ValidationInfo) -> object:
        return reject_bool(value, info)


class PhysicalDataDraft(BloomBase):
    """Form state seeded from the latest sample."""

    height_cm: float | None = None
    weight_kg: float | None = None
    hemoglobin_level: float | None = None
    blood_pressure_systolic: int | None = None
    blood_pressure_diastolic: int | None = None
    pain_level: PainLevel | None = None


class PhysicalDataRead(BloomBase):
    id: uuid.UUID
    user_id: uuid.UUID
    recorded_at: datetime
    height_cm: float | None = None
    weight_kg: float | None = None
    hemoglobin_level: float | None = None
    blood_pressure_systolic: int | None = None
    blood_pressure_diastolic: int | None = None
    pain_level: PainLevel | None = None
    created_at: datetime | None = None


# ---------- Notification Settings ----------

class NotificationSettingsUpdate(BloomBase):
    days_before_period: int = Field(default=DEFAULT_DAYS_BEFORE_PERIOD, ge=1, le=14)
    email_notifications: bool = DEFAULT_EMAIL_NOTIFICATIONS


class NotificationSettingsRead(BloomBase, TimestampMixin):
    id: uuid.UUID
    user_id: uuid.UUID
    days_before_period: int | None = None
    email_notifications: bool | None = None
    last_notification_sent: datetime | None = None
