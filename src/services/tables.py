"""Store tables used by the pages, each bound to its row model."""

from __future__ import annotations

from src.models.catalog import ExerciseVideo, FoodVideo, SuggestedFood
from src.models.tracking import CycleRead, NotificationSettingsRead, PhysicalDataRead
from src.models.users import ProfileRead
from src.services.supabase import Table

PROFILES = Table("profiles", ProfileRead)
MENSTRUAL_CYCLES = Table("menstrual_cycles", CycleRead)
PHYSICAL_DATA = Table("physical_data", PhysicalDataRead)
NOTIFICATION_SETTINGS = Table("notification_settings", NotificationSettingsRead)

EXERCISE_VIDEOS = Table("exercise_videos", ExerciseVideo)
FOOD_VIDEOS = Table("food_videos", FoodVideo)
SUGGESTED_FOODS = Table("suggested_foods", SuggestedFood)
