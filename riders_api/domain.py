"""Plain records handed across the access layer.

Repositories convert their storage rows into these, so the service and the
HTTP layer never hold a live ORM object.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Event:
    """A route/ride event. ``id`` is None until the store assigns one."""

    name: str
    date: datetime
    km: float | None = None
    route: str | None = None
    description: str | None = None
    creator: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class EventSummary:
    """Reduced projection used by the ordered listing."""

    name: str
    km: float | None
    route: str | None
    description: str | None

    @classmethod
    def of(cls, event: Event) -> "EventSummary":
        return cls(name=event.name, km=event.km, route=event.route, description=event.description)


@dataclass(frozen=True)
class SortOrder:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Page:
    items: list[Event]
    total: int
    page: int
    size: int
