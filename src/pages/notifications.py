"""Notification settings page: exactly one settings row per user."""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import Field

from src.models.base import BloomBase
from src.models.tracking import (
    DEFAULT_DAYS_BEFORE_PERIOD,
    DEFAULT_EMAIL_NOTIFICATIONS,
    NotificationSettingsRead,
    NotificationSettingsUpdate,
)
from src.pages.forms import EntityForm, Toast
from src.services.supabase import StoreError
from src.services.tables import NOTIFICATION_SETTINGS

logger = logging.getLogger("bloom.pages.notifications")


class NotificationSettingsState(BloomBase):
    settings: NotificationSettingsUpdate = Field(default_factory=NotificationSettingsUpdate)
    last_notification_sent: datetime | None = None
    toast: Toast | None = None


class NotificationSettingsForm(EntityForm[NotificationSettingsUpdate, NotificationSettingsState]):
    form_name = "notification_settings"
    schema = NotificationSettingsUpdate
    success_message = "Notification settings updated!"
    failure_message = "Failed to update settings"

    async def load(self) -> NotificationSettingsState:
        try:
            row = await self._store.maybe_single(
                NOTIFICATION_SETTINGS, eq={"user_id": self._user.user_id}
            )
        except StoreError as exc:
            logger.error(
                "Loading notification settings for user=%s failed: %s",
                self._user.user_id, exc.message,
            )
            return NotificationSettingsState(
                toast=Toast.error("Failed to load notification settings")
            )
        if row is None:
            return NotificationSettingsState()
        return _state_from_row(row)

    async def write(self, values: NotificationSettingsUpdate) -> NotificationSettingsRead:
        return await self._store.upsert(
            NOTIFICATION_SETTINGS,
            {"user_id": self._user.user_id, **values.model_dump()},
            on_conflict="user_id",
        )

    async def after_save(self, row: NotificationSettingsRead) -> NotificationSettingsState:  # type: ignore[override]
        return _state_from_row(row)


def _state_from_row(row: NotificationSettingsRead) -> NotificationSettingsState:
    days = row.days_before_period
    email = row.email_notifications
    return NotificationSettingsState(
        settings=NotificationSettingsUpdate(
            days_before_period=days if days is not None else DEFAULT_DAYS_BEFORE_PERIOD,
            email_notifications=email if email is not None else DEFAULT_EMAIL_NOTIFICATIONS,
        ),
        last_notification_sent=row.last_notification_sent,
    )
