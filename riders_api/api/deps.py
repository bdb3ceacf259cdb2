from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from riders_api.core.security import decode_subject
from riders_api.db.deps import get_db
from riders_api.repositories.event_repo import SqlAlchemyEventRepo
from riders_api.services.event_service import EventService

bearer_scheme = HTTPBearer()


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    return EventService(SqlAlchemyEventRepo(db))


def get_current_login(creds: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    if not creds.scheme or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid auth scheme")
    try:
        login = decode_subject(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    if not login:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return login
