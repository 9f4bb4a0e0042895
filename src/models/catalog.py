"""Pydantic models for the curated, read-only content catalog."""

from __future__ import annotations

import uuid
from datetime import datetime

from src.models.base import BloomBase


class CatalogVideo(BloomBase):
    id: uuid.UUID
    title: str
    description: str | None = None
    youtube_url: str
    display_order: int | None = None
    is_active: bool | None = True
    created_at: datetime | None = None


class ExerciseVideo(CatalogVideo):
    pass


class FoodVideo(CatalogVideo):
    pass


class SuggestedFood(BloomBase):
    id: uuid.UUID
    name: str
    category: str | None = None
    description: str | None = None
    benefits: str | None = None
    display_order: int | None = None
    is_active: bool | None = True
    created_at: datetime | None = None
