"""Exercise and nutrition pages: curated catalog content, active rows only,
in ``display_order``."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import Field

from src.models.base import BloomBase
from src.models.catalog import FoodVideo, SuggestedFood
from src.pages.forms import Toast
from src.pages.lists import EntityList
from src.services.supabase import StoreError
from src.services.tables import EXERCISE_VIDEOS, FOOD_VIDEOS, SUGGESTED_FOODS

logger = logging.getLogger("bloom.pages.catalog")


class CatalogList(EntityList[Any]):
    order_by = "display_order"
    ascending = True

    def filters(self) -> dict[str, Any]:
        return {"is_active": True}


class ExerciseVideoList(CatalogList):
    table = EXERCISE_VIDEOS
    empty_message = "No exercise videos available at the moment."
    failure_message = "Failed to load exercise videos"


class FoodVideoList(CatalogList):
    table = FOOD_VIDEOS
    empty_message = "No food videos available at the moment."
    failure_message = "Failed to load food videos"


class SuggestedFoodList(CatalogList):
    table = SUGGESTED_FOODS
    empty_message = "No suggested foods available at the moment."
    failure_message = "Failed to load suggested foods"


class NutritionState(BloomBase):
    suggested_foods: list[SuggestedFood] = Field(default_factory=list)
    food_videos: list[FoodVideo] = Field(default_factory=list)
    suggested_foods_empty_message: str | None = None
    food_videos_empty_message: str | None = None
    toast: Toast | None = None


async def load_nutrition(foods: SuggestedFoodList, videos: FoodVideoList) -> NutritionState:
    """Fetch both nutrition tabs concurrently; either failing fails the page."""
    try:
        suggested, food_videos = await asyncio.gather(foods.fetch(), videos.fetch())
    except StoreError as exc:
        logger.error("Loading nutrition data failed: %s (code=%s)", exc.message, exc.code)
        return NutritionState(
            suggested_foods_empty_message=foods.empty_message,
            food_videos_empty_message=videos.empty_message,
            toast=Toast.error("Failed to load nutrition data"),
        )
    return NutritionState(
        suggested_foods=suggested,
        food_videos=food_videos,
        suggested_foods_empty_message=None if suggested else foods.empty_message,
        food_videos_empty_message=None if food_videos else videos.empty_message,
    )
