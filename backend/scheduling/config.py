# backend/scheduling/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    app_name: str = "Scheduling API"
    log_level: str = "INFO"

    # Used when a working-hours payload does not carry its own zone
    default_timezone: str = "UTC"

    # Accepted booking durations (minutes, inclusive)
    min_duration_minutes: int = 15
    max_duration_minutes: int = 240

    # Default booking policy, see services/slots/config.py
    slot_step_minutes: int = 30
    min_notice_minutes: int = 0
    buffer_minutes: int = 0
    lookahead_days: int = 60

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_prefix="SCHEDULING_",
        extra="ignore",
    )


settings = Settings()
