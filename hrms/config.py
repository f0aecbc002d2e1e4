"""Application configuration via environment variables."""

import json
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./hrms.db"

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:5173"]'

    # Attendance
    TIMEZONE: str = "Asia/Colombo"
    GROUP_WORKING_HOURS_FILE: str = "data/group-working-hours.json"
    WEEKLY_OFF_DAYS: str = "[6]"
    MAX_REPORT_RANGE_DAYS: int = 93

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    REPORT_RATE_LIMIT: str = "120/minute"

    @field_validator("TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{value}'") from exc
        return value

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:5173"]

    @property
    def weekly_off_days(self) -> set[int]:
        """Weekday numbers (0=Mon … 6=Sun) treated as non-working days."""
        try:
            days = json.loads(self.WEEKLY_OFF_DAYS)
            return {int(d) for d in days if 0 <= int(d) <= 6}
        except (json.JSONDecodeError, TypeError, ValueError):
            return {6}

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
