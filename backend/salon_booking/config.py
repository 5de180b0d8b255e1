# backend/salon_booking/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/sqlite/salon.db"
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "INFO"

    # Business calendar
    booking_open_time: str = "10:00"
    booking_close_time: str = "20:00"
    booking_closed_weekday: int = 0  # 0 = Monday
    booking_slot_step_minutes: int = 10
    booking_horizon_days: int = 60

    # How long a writer waits for the per-date lock (SQLite busy timeout)
    booking_lock_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite paths are anchored at the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
