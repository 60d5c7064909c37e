from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "NVR Exports"
    page_title: str = "Export - Frigate"
    debug: bool = False
    log_level: str = "INFO"

    # Backend
    base_url: str = "http://localhost:5000/"
    api_path: str = "api/"
    media_base_url: str = ""
    media_root_prefix: str = "/media/frigate/"
    request_timeout_seconds: float = 30.0

    # Retry policy for list/config reads
    fetch_retry_attempts: int = 3
    fetch_retry_min_wait: float = 1.0
    fetch_retry_max_wait: float = 10.0

    # Create export dialog
    timezone: str = "UTC"
    default_export_window_minutes: int = 60

    @field_validator("base_url", "media_base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        if v and not v.endswith("/"):
            return v + "/"
        return v

    @field_validator("api_path")
    @classmethod
    def normalize_api_path(cls, v: str) -> str:
        v = v.strip("/")
        return f"{v}/" if v else ""

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("default_export_window_minutes")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("default_export_window_minutes must be positive")
        return v

    @property
    def api_url(self) -> str:
        return f"{self.base_url}{self.api_path}"

    @property
    def media_url(self) -> str:
        return self.media_base_url or self.base_url

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()
