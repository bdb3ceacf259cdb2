from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    app_name: str = "lsridersApp"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:9000", "http://127.0.0.1:9000"]

    default_page_size: int = 20
    max_page_size: int = 2000
    # IANA zone used to turn a calendar date into start-of-day; host zone when unset
    local_timezone: str | None = None
    summary_sort: list[str] = ["km,asc", "name,asc", "description,asc"]

    @field_validator("local_timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown time zone '{value}'")
        return value


settings = Settings()
