from datetime import datetime, timedelta, timezone

from jose import jwt

from riders_api.core.config import settings


def create_access_token(subject: str, expires_minutes: int = 30) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    claims = {"sub": subject, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_subject(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token. Raises JWTError otherwise."""
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    return payload.get("sub")
