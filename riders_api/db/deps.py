from collections.abc import Iterator

from sqlalchemy.orm import Session

from riders_api.db import session as db_session


def get_db() -> Iterator[Session]:
    # looked up at call time so tests can swap the session factory
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()
