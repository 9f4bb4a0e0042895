"""Bloom page controllers.

Each page of the tracker is a controller that loads its state from the store
and, for form pages, validates and writes a submitted draft. Routers in
``src.routers`` expose them over HTTP.

Core modules:
    forms         - EntityForm base, SingleFlight submit guard, Toast
    lists         - EntityList base for filtered, ordered read-only lists
    profile       - Profile form (upsert keyed by user id)
    calendar      - Cycle history, highlighted days, add-cycle form
    physical_data - Physical data form (append-only samples)
    notifications - Notification settings form (upsert keyed by user id)
    catalog       - Exercise videos, food videos, suggested foods
    dashboard     - Greeting and menu
"""

from src.pages.forms import EntityForm, SingleFlight, SubmitResult, SubmitStatus, Toast
from src.pages.lists import EntityList, ListPage

__all__ = [
    "EntityForm",
    "EntityList",
    "ListPage",
    "SingleFlight",
    "SubmitResult",
    "SubmitStatus",
    "Toast",
]
