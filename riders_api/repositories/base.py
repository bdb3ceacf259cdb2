"""Store interface for events (repository pattern).

Implementations must be swappable and return ``riders_api.domain`` records.
Every method is a single unit of work against the backing store.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from riders_api.domain import Event, SortOrder

SORTABLE_FIELDS = ("id", "name", "date", "km", "route", "description", "creator")


class EventRepository(ABC):
    """Interface for event persistence operations.

    Ordering: the given ``SortOrder`` items in sequence, then ``id``
    ascending. ``None`` sorts before any value when ascending and after any
    value when descending.
    """

    @abstractmethod
    def add(self, event: Event) -> Event:
        """Persist a new event and return it with its assigned id."""
        ...

    @abstractmethod
    def get(self, event_id: int) -> Event | None:
        ...

    @abstractmethod
    def replace(self, event: Event) -> Event | None:
        """Overwrite every field of the stored event; None if it does not exist."""
        ...

    @abstractmethod
    def delete(self, event_id: int) -> None:
        """Remove the event if present."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def list_page(self, *, offset: int, limit: int, order: Sequence[SortOrder]) -> list[Event]:
        ...

    @abstractmethod
    def list_sorted(self, order: Sequence[SortOrder]) -> list[Event]:
        ...

    @abstractmethod
    def find_date_before(self, threshold: datetime) -> list[Event]:
        """Events with date strictly before ``threshold``, by date then id."""
        ...

    @abstractmethod
    def find_date_after(self, threshold: datetime) -> list[Event]:
        """Events with date strictly after ``threshold``, by date then id."""
        ...

    @abstractmethod
    def find_by_name(self, name: str) -> list[Event]:
        ...

    @abstractmethod
    def find_by_creator(self, login: str) -> list[Event]:
        ...
