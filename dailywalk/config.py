"""Configuration management from environment variables."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from dailywalk.utils.constants import DEFAULT_TIMEZONE

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

    # Storage
    DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "./data/dailywalk.db"))

    # Region
    TIMEZONE: str = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
    # Whole-hour offsets probed when resolving a local wall time to UTC.
    # Revisit when the deployment region changes.
    TZ_PROBE_MIN_HOURS: int = int(os.getenv("TZ_PROBE_MIN_HOURS", "-14"))
    TZ_PROBE_MAX_HOURS: int = int(os.getenv("TZ_PROBE_MAX_HOURS", "14"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def probe_hours(cls) -> range:
        """Offsets (hours) to try in TimezoneDateMath.date_at."""
        return range(cls.TZ_PROBE_MIN_HOURS, cls.TZ_PROBE_MAX_HOURS + 1)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.TELEGRAM_BOT_TOKEN:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        try:
            ZoneInfo(cls.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown TIMEZONE: {cls.TIMEZONE}")

        if cls.TZ_PROBE_MIN_HOURS > cls.TZ_PROBE_MAX_HOURS:
            raise ValueError("TZ_PROBE_MIN_HOURS must not exceed TZ_PROBE_MAX_HOURS")

        # Ensure database directory exists
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
