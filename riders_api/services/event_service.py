"""Access layer for events.

Sole gateway to persisted event state. It enforces the identity rules
(create without id, update of an existing id) and exposes the listing and
filtering queries. Each call is one read or one write against the
repository; nothing is retried and store failures are re-raised as
``StorageFailure`` with the original error chained.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, time, timezone
from typing import Callable, TypeVar
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError

from riders_api.core.config import settings
from riders_api.domain import Event, EventSummary, Page, SortOrder
from riders_api.repositories.base import SORTABLE_FIELDS, EventRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class EventError(Exception):
    """Domain errors for event operations."""

    error_key = "event"

    def __init__(self, message: str, error_key: str | None = None) -> None:
        super().__init__(message)
        if error_key is not None:
            self.error_key = error_key


class InvalidArgument(EventError):
    error_key = "invalid"


class NotFound(EventError):
    error_key = "notfound"


class StorageFailure(EventError):
    error_key = "storage"


def parse_sort(values: Iterable[str] | None) -> list[SortOrder]:
    """Parse ``"field"`` / ``"field,asc"`` / ``"field,desc"`` items."""
    order: list[SortOrder] = []
    for raw in values or []:
        parts = [part.strip() for part in raw.split(",")]
        field = parts[0]
        direction = parts[1].lower() if len(parts) > 1 else "asc"
        if len(parts) > 2 or field not in SORTABLE_FIELDS:
            raise InvalidArgument(
                f"sort must be one of {list(SORTABLE_FIELDS)} optionally followed by ',asc' or ',desc'",
                "sortinvalid",
            )
        if direction not in {"asc", "desc"}:
            raise InvalidArgument("sort direction must be 'asc' or 'desc'", "sortinvalid")
        order.append(SortOrder(field=field, descending=direction == "desc"))
    return order


def start_of_day(date_string: str, zone_name: str | None = None) -> datetime:
    """Turn a ``yyyy-MM-dd`` string into midnight of that day in the local zone."""
    if not isinstance(date_string, str) or not _DATE_RE.fullmatch(date_string):
        raise InvalidArgument(f"Date '{date_string}' must use the format yyyy-MM-dd", "dateformat")
    try:
        day = datetime.strptime(date_string, DATE_FORMAT).date()
    except ValueError:
        raise InvalidArgument(f"Date '{date_string}' is not a valid calendar date", "dateformat")

    midnight = datetime.combine(day, time.min)
    if not zone_name:
        # host zone, with the offset that applies on that day
        return midnight.astimezone()
    return midnight.replace(tzinfo=ZoneInfo(zone_name))


def _as_utc(event: Event) -> Event:
    if event.date.tzinfo is None:
        return replace(event, date=event.date.replace(tzinfo=timezone.utc))
    return replace(event, date=event.date.astimezone(timezone.utc))


class EventService:
    def __init__(
        self,
        repo: EventRepository,
        *,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
        summary_sort: list[str] | None = None,
        local_timezone: str | None = None,
    ) -> None:
        self.repo = repo
        self.default_page_size = default_page_size or settings.default_page_size
        self.max_page_size = max_page_size or settings.max_page_size
        self.summary_sort = summary_sort if summary_sort is not None else settings.summary_sort
        self.local_timezone = local_timezone if local_timezone is not None else settings.local_timezone

    def _call(self, operation: Callable[..., T], *args, **kwargs) -> T:
        try:
            return operation(*args, **kwargs)
        except SQLAlchemyError as exc:
            logger.exception("Event store failed during %s", operation.__name__)
            raise StorageFailure("Event store is unavailable") from exc

    def create(self, event: Event) -> Event:
        if event.id is not None:
            raise InvalidArgument("A new event cannot already have an ID", "idexists")
        stored = self._call(self.repo.add, _as_utc(event))
        logger.info("Created event %s", stored.id)
        return stored

    def update(self, event: Event) -> Event:
        if event.id is None:
            raise InvalidArgument("Invalid id", "idnull")
        stored = self._call(self.repo.replace, _as_utc(event))
        if stored is None:
            raise NotFound(f"Event {event.id} not found", "idnotfound")
        logger.info("Updated event %s", stored.id)
        return stored

    def get_by_id(self, event_id: int) -> Event:
        event = self._call(self.repo.get, event_id)
        if event is None:
            raise NotFound(f"Event {event_id} not found", "idnotfound")
        return event

    def delete_by_id(self, event_id: int) -> None:
        self._call(self.repo.delete, event_id)
        logger.info("Deleted event %s", event_id)

    def list_all(self, page: int | None = 0, size: int | None = None, sort: Iterable[str] | None = None) -> Page:
        page = page or 0
        if page < 0:
            raise InvalidArgument("Page index must not be negative", "pagenegative")
        if size is not None and size < 0:
            raise InvalidArgument("Page size must not be negative", "sizenegative")
        size = min(size or self.default_page_size, self.max_page_size)
        order = parse_sort(sort)

        items = self._call(self.repo.list_page, offset=page * size, limit=size, order=order)
        total = self._call(self.repo.count)
        return Page(items=items, total=total, page=page, size=size)

    def list_ordered(self, sort: Iterable[str] | None = None) -> list[EventSummary]:
        order = parse_sort(sort or self.summary_sort)
        return [EventSummary.of(event) for event in self._call(self.repo.list_sorted, order)]

    def list_by_date_before(self, date_string: str) -> list[Event]:
        threshold = start_of_day(date_string, self.local_timezone)
        return self._call(self.repo.find_date_before, threshold)

    def list_by_date_after(self, date_string: str) -> list[Event]:
        threshold = start_of_day(date_string, self.local_timezone)
        return self._call(self.repo.find_date_after, threshold)

    def list_by_name(self, name: str) -> list[Event]:
        return self._call(self.repo.find_by_name, name)

    def list_owned_by(self, login: str) -> list[Event]:
        """Events created by ``login``; the caller resolves who is logged in."""
        return self._call(self.repo.find_by_creator, login)
