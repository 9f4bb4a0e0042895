"""Profile page: one profile row per user, keyed by the auth user id."""

from __future__ import annotations

import logging

from src.models.base import BloomBase
from src.models.users import ProfileDraft, ProfileRead, ProfileUpdate
from src.pages.forms import EntityForm, Toast
from src.services.supabase import RowNotFoundError, StoreError
from src.services.tables import PROFILES

logger = logging.getLogger("bloom.pages.profile")


class ProfileState(BloomBase):
    draft: ProfileDraft
    saved: bool = False  # False until the first save creates the row
    toast: Toast | None = None


class ProfileForm(EntityForm[ProfileUpdate, ProfileState]):
    form_name = "profile"
    schema = ProfileUpdate
    success_message = "Profile updated successfully!"
    failure_message = "Failed to update profile"

    async def load(self) -> ProfileState:
        try:
            row = await self._store.single(PROFILES, eq={"id": self._user.user_id})
        except RowNotFoundError:
            # First visit: suggest the name given at sign-up
            return ProfileState(draft=ProfileDraft(name=self._user.display_name or ""))
        except StoreError as exc:
            logger.error("Loading profile for user=%s failed: %s", self._user.user_id, exc.message)
            return ProfileState(draft=ProfileDraft(), toast=Toast.error("Failed to load profile"))
        return _state_from_row(row)

    async def write(self, values: ProfileUpdate) -> ProfileRead:
        return await self._store.upsert(
            PROFILES,
            {"id": self._user.user_id, **values.model_dump()},
            on_conflict="id",
        )

    async def after_save(self, row: ProfileRead) -> ProfileState:  # type: ignore[override]
        return _state_from_row(row)


def _state_from_row(row: ProfileRead) -> ProfileState:
    return ProfileState(
        draft=ProfileDraft(
            name=row.name,
            date_of_birth=row.date_of_birth,
            blood_group=row.blood_group,
        ),
        saved=True,
    )
