from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from riders_api import domain
from riders_api.models.event import Event
from riders_api.repositories.base import EventRepository

PAYLOAD_FIELDS = ("name", "date", "km", "route", "description", "creator")
# bounds of a 64-bit INTEGER column; ids outside them cannot be stored
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _to_domain(row: Event) -> domain.Event:
    return domain.Event(
        id=row.id,
        name=row.name,
        date=row.date,
        km=row.km,
        route=row.route,
        description=row.description,
        creator=row.creator,
    )


def _order_by(order: Sequence[domain.SortOrder]) -> list:
    clauses = []
    for item in order:
        column = getattr(Event, item.field)
        clauses.append(column.desc().nulls_last() if item.descending else column.asc().nulls_first())
    if not any(item.field == "id" for item in order):
        clauses.append(Event.id.asc())
    return clauses


class SqlAlchemyEventRepo(EventRepository):
    """Relational event store on top of a request-scoped Session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def add(self, event: domain.Event) -> domain.Event:
        row = Event(**{field: getattr(event, field) for field in PAYLOAD_FIELDS})
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _to_domain(row)

    def _row(self, event_id: int) -> Event | None:
        if not INT64_MIN <= event_id <= INT64_MAX:
            return None
        return self.db.get(Event, event_id)

    def get(self, event_id: int) -> domain.Event | None:
        row = self._row(event_id)
        return _to_domain(row) if row else None

    def replace(self, event: domain.Event) -> domain.Event | None:
        row = self._row(event.id)
        if row is None:
            return None
        for field in PAYLOAD_FIELDS:
            setattr(row, field, getattr(event, field))
        self._commit()
        self.db.refresh(row)
        return _to_domain(row)

    def delete(self, event_id: int) -> None:
        row = self._row(event_id)
        if row is None:
            return
        self.db.delete(row)
        self._commit()

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(Event)) or 0

    def list_page(self, *, offset: int, limit: int, order: Sequence[domain.SortOrder]) -> list[domain.Event]:
        if offset > INT64_MAX:
            return []
        stmt = select(Event).order_by(*_order_by(order)).offset(offset).limit(limit)
        return [_to_domain(row) for row in self.db.scalars(stmt)]

    def list_sorted(self, order: Sequence[domain.SortOrder]) -> list[domain.Event]:
        stmt = select(Event).order_by(*_order_by(order))
        return [_to_domain(row) for row in self.db.scalars(stmt)]

    def _where(self, *filters) -> list[domain.Event]:
        stmt = select(Event).where(*filters).order_by(Event.date.asc(), Event.id.asc())
        return [_to_domain(row) for row in self.db.scalars(stmt)]

    def find_date_before(self, threshold: datetime) -> list[domain.Event]:
        return self._where(Event.date < threshold)

    def find_date_after(self, threshold: datetime) -> list[domain.Event]:
        return self._where(Event.date > threshold)

    def find_by_name(self, name: str) -> list[domain.Event]:
        return self._where(Event.name == name)

    def find_by_creator(self, login: str) -> list[domain.Event]:
        return self._where(Event.creator == login)
