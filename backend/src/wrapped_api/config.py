from __future__ import annotations

import datetime as dt
import logging
from functools import lru_cache
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")
    github_timeout: float = Field(default=30, alias="GITHUB_TIMEOUT")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")
    vercel: bool = Field(default=False, alias="VERCEL")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")
    report_year: int = Field(default=2025, alias="REPORT_YEAR")
    report_timezone: Optional[str] = Field(default=None, alias="REPORT_TIMEZONE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("report_timezone")
    @classmethod
    def _known_zone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {v!r}") from e
        return v

    @property
    def origin_list(self) -> List[str]:
        parts = [p.strip() for p in self.cors_origins.split(",") if p.strip()]
        return list(dict.fromkeys(parts)) or ["*"]

    @property
    def tzinfo(self) -> Optional[dt.tzinfo]:
        """Zone used for day/hour bucketing; None means the runtime's local zone."""
        if not self.report_timezone:
            return None
        return ZoneInfo(self.report_timezone)


@lru_cache()
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
