import sqlalchemy as sa
from sqlalchemy import Integer, String, Float, Text
from sqlalchemy.orm import Mapped, mapped_column
from riders_api.db.base import Base
from riders_api.models.types import UTCDateTime
from datetime import datetime

class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    km: Mapped[float | None] = mapped_column(Float, nullable=True)
    route: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # login of the owning user
    creator: Mapped[str | None] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        sa.Index("ix_events_name", "name"),
        sa.Index("ix_events_date", "date"),
        sa.Index("ix_events_creator", "creator"),
        # never hand out a deleted id again
        {"sqlite_autoincrement": True},
    )
