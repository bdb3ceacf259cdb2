from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional

from riders_api.domain import Event, SortOrder
from riders_api.repositories.base import EventRepository


def _null_first(value):
    return (value is not None, value)


def _sorted(events: List[Event], order: Sequence[SortOrder]) -> List[Event]:
    result = sorted(events, key=lambda e: e.id)
    # stable sorts, least significant key first
    for item in reversed(order):
        result.sort(key=lambda e, f=item.field: _null_first(getattr(e, f)), reverse=item.descending)
    return result


class MemoryEventRepo(EventRepository):
    """
    Event store kept in a dict, same semantics as SqlAlchemyEventRepo.
    Ids come from a counter that never goes back, so deleted ids stay unused.
    """

    def __init__(self):
        self._next_id = 1
        self.events: Dict[int, Event] = {}

    def add(self, event: Event) -> Event:
        stored = replace(event, id=self._next_id)
        self._next_id += 1
        self.events[stored.id] = stored
        return stored

    def get(self, event_id: int) -> Optional[Event]:
        return self.events.get(event_id)

    def replace(self, event: Event) -> Optional[Event]:
        if event.id not in self.events:
            return None
        self.events[event.id] = event
        return event

    def delete(self, event_id: int) -> None:
        self.events.pop(event_id, None)

    def count(self) -> int:
        return len(self.events)

    def list_page(self, *, offset: int, limit: int, order: Sequence[SortOrder]) -> List[Event]:
        return self.list_sorted(order)[offset:offset + limit]

    def list_sorted(self, order: Sequence[SortOrder]) -> List[Event]:
        return _sorted(list(self.events.values()), order)

    def _where(self, predicate: Callable[[Event], bool]) -> List[Event]:
        matches = [e for e in self.events.values() if predicate(e)]
        return sorted(matches, key=lambda e: (e.date, e.id))

    def find_date_before(self, threshold: datetime) -> List[Event]:
        return self._where(lambda e: e.date < threshold)

    def find_date_after(self, threshold: datetime) -> List[Event]:
        return self._where(lambda e: e.date > threshold)

    def find_by_name(self, name: str) -> List[Event]:
        return self._where(lambda e: e.name == name)

    def find_by_creator(self, login: str) -> List[Event]:
        return self._where(lambda e: e.creator == login)
