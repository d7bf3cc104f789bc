"""
Settings for the AMATC audit.

Everything comes from the environment (a local .env file is loaded by the
entry point through python-dotenv). The CDO token is the only secret and is
read once, here.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from amatc_audit.errors import ConfigError

logger = logging.getLogger(__name__)

# Nome, AK airport (WSO). AMATC in the forecast dataset is measured here.
DEFAULT_STATION_ID = "GHCND:USW00026617"
DEFAULT_MONTH = 4
DEFAULT_HINDCAST_START = 1980
DEFAULT_REFERENCE_URL = (
    "https://raw.githubusercontent.com/amoeba/yukon-forecasting/master/data/yukon.csv"
)

# Columns of the curated dataset
YEAR_COLUMN = "year"
REFERENCE_COLUMN = "amatc"
FETCHED_COLUMN = "gsom_amatc"
TARGET_COLUMN = "mdj"
COVARIATES = ("amatc", "msstc", "pice")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Run configuration, immutable for the life of the process."""
    token: Optional[str] = None
    station_id: str = DEFAULT_STATION_ID
    month: int = DEFAULT_MONTH
    reference_url: str = DEFAULT_REFERENCE_URL
    request_delay_seconds: float = 1.0
    request_timeout_seconds: float = 30.0
    hindcast_start: int = DEFAULT_HINDCAST_START
    hindcast_end: Optional[int] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        month = _env_int("AMATC_MONTH", DEFAULT_MONTH)
        if not 1 <= month <= 12:
            raise ConfigError(f"AMATC_MONTH must be 1-12, got {month}")

        delay = _env_float("AMATC_REQUEST_DELAY", 1.0)
        if delay < 0:
            raise ConfigError(f"AMATC_REQUEST_DELAY cannot be negative, got {delay}")

        hindcast_start = _env_int("AMATC_HINDCAST_START", DEFAULT_HINDCAST_START)
        hindcast_end = _env_int("AMATC_HINDCAST_END", None)
        if hindcast_end is not None and hindcast_end < hindcast_start:
            raise ConfigError(f"AMATC_HINDCAST_END ({hindcast_end}) is before "
                              f"AMATC_HINDCAST_START ({hindcast_start})")

        settings = cls(
            token=os.getenv("NOAA_TOKEN") or None,
            station_id=os.getenv("AMATC_STATION_ID", DEFAULT_STATION_ID),
            month=month,
            reference_url=os.getenv("AMATC_REFERENCE_URL", DEFAULT_REFERENCE_URL),
            request_delay_seconds=delay,
            request_timeout_seconds=_env_float("AMATC_REQUEST_TIMEOUT", 30.0),
            hindcast_start=hindcast_start,
            hindcast_end=hindcast_end,
        )
        logger.info(f"[Settings] station={settings.station_id} month={settings.month} "
                    f"delay={settings.request_delay_seconds}s token={'set' if settings.token else 'MISSING'} "
                    f"hindcasts={settings.hindcast_start}-{settings.hindcast_end or 'last'}")
        return settings

    def require_token(self) -> str:
        if not self.token:
            raise ConfigError("NOAA_TOKEN not set. Add NOAA_TOKEN=your_token to .env")
        return self.token
