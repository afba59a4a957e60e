"""Configuration management for FitLog."""

from datetime import time, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase
    supabase_url: str
    supabase_key: str
    storage_bucket: str = "activity-images"

    # SMTP
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    mail_sender_name: str = "FitLog"
    mail_from: str = ""  # defaults to smtp_user

    # Public URL used in e-mail links
    app_url: str = "http://localhost:3000"

    # Calendar days are computed in this timezone
    timezone: str = "America/New_York"

    # Notification schedule
    enable_scheduler: bool = True
    missed_log_cutoff_time: str = "20:00"
    cycle_reset_time: str = "00:05"

    # Streak rules
    cycle_length_days: int = 30
    consistency_window_days: int = 30
    consistency_reset_threshold: int = 50

    # Uploads
    upload_max_bytes: int = 10 * 1024 * 1024
    upload_retries: int = 3
    upload_retry_delay: float = 1.0  # seconds

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def tz(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @property
    def missed_log_cutoff(self) -> time:
        return parse_clock(self.missed_log_cutoff_time)


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` string."""
    hour, minute = map(int, value.split(":"))
    return time(hour, minute)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
