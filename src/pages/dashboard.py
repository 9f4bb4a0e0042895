"""Dashboard: greeting and the menu of tracker pages."""

from __future__ import annotations

from src.models.base import BloomBase
from src.services.session import AuthContext

DEFAULT_WELCOME_NAME = "there"


class MenuItem(BloomBase):
    title: str
    description: str
    path: str


class DashboardState(BloomBase):
    welcome_name: str
    menu: list[MenuItem]


MENU: tuple[MenuItem, ...] = (
    MenuItem(title="Cycle Calendar", description="Track your menstrual cycle", path="/calendar"),
    MenuItem(title="Physical Data", description="Monitor your health metrics", path="/physical-data"),
    MenuItem(title="Exercise", description="Recommended workouts", path="/exercise"),
    MenuItem(title="Nutrition", description="Food guides and tips", path="/nutrition"),
    MenuItem(title="Profile", description="Manage your account", path="/profile"),
    MenuItem(title="Notifications", description="Set reminders", path="/notifications"),
)


def build_dashboard(user: AuthContext) -> DashboardState:
    return DashboardState(
        welcome_name=user.display_name or DEFAULT_WELCOME_NAME,
        menu=list(MENU),
    )
