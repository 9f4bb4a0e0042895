"""Read-only catalog endpoints: exercise videos and nutrition content."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from src.dependencies import Store
from src.models.catalog import ExerciseVideo, FoodVideo, SuggestedFood
from src.pages.catalog import (
    ExerciseVideoList,
    FoodVideoList,
    NutritionState,
    SuggestedFoodList,
    load_nutrition,
)
from src.pages.lists import ListPage

router = APIRouter(tags=["catalog"])


@router.get("/exercise-videos", response_model=ListPage[ExerciseVideo])
async def list_exercise_videos(store: Store) -> Any:
    return await ExerciseVideoList(store).load()


@router.get("/food-videos", response_model=ListPage[FoodVideo])
async def list_food_videos(store: Store) -> Any:
    return await FoodVideoList(store).load()


@router.get("/suggested-foods", response_model=ListPage[SuggestedFood])
async def list_suggested_foods(store: Store) -> Any:
    return await SuggestedFoodList(store).load()


@router.get("/nutrition", response_model=NutritionState)
async def get_nutrition(store: Store) -> Any:
    """Both nutrition tabs in one call."""
    return await load_nutrition(SuggestedFoodList(store), FoodVideoList(store))
