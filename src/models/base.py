"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def blank_to_none(value: Any) -> Any:
    """Form inputs submit ``""`` for untouched optional fields."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def reject_bool(value: Any, info: ValidationInfo) -> Any:
    """Lax mode would read ``true`` as ``1``; a checkbox is not a measurement."""
    if isinstance(value, bool):
        raise ValueError(f"{info.field_name}: Input should be a valid number")
    return value


class BloomBase(BaseModel):
    """Base model with shared config for all Bloom schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class TimestampMixin(BaseModel):
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ErrorDetail(BaseModel):
    detail: str


def first_error_message(exc: ValidationError) -> str:
    """Reduce a ValidationError to the message of its first violated rule.

    Messages raised from our own validators are returned verbatim; built-in
    constraint messages are prefixed with the offending field name.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    err = errors[0]
    msg: str = err.get("msg", "Invalid input")
    if err.get("type") == "value_error":
        return msg.removeprefix("Value error, ")
    loc = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
    return f"{loc}: {msg}" if loc else msg
