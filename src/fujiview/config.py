"""Fixed observation geometry and environment-driven settings."""

import logging
import os
from dataclasses import dataclass

from fujiview.models import ObservationPoint, Region, TimeWindow

# Ordered observer -> midpoint -> approach. Fetch order follows this order.
REGION_POINTS: dict[Region, tuple[ObservationPoint, ...]] = {
    Region.NORTH: (
        ObservationPoint(lat=35.5, lng=138.75, distance_km=0),
        ObservationPoint(lat=35.45, lng=138.75, distance_km=5.55),
        ObservationPoint(lat=35.4, lng=138.75, distance_km=11.09),
    ),
    Region.SOUTH: (
        ObservationPoint(lat=35.2, lng=138.6875, distance_km=0),
        ObservationPoint(lat=35.25, lng=138.6875, distance_km=5.55),
        ObservationPoint(lat=35.3, lng=138.75, distance_km=12.47),
    ),
}

# Inclusive local hour range per window
TIME_WINDOW_HOURS: dict[TimeWindow, tuple[int, int]] = {
    TimeWindow.MORNING: (6, 11),
    TimeWindow.AFTERNOON: (12, 17),
}

LOCAL_TIMEZONE = "Asia/Tokyo"

# Atmospheric clarity differs between the two vantage regions
REGION_DAMPENING: dict[Region, float] = {
    Region.NORTH: 1.0,
    Region.SOUTH: 0.75,
}

DISTANCE_DECAY = 0.1

# Provider snaps coordinates to its model grid
COORD_MATCH_TOLERANCE_DEG = 0.1

# Score the paired client treats as "not loaded"
UNKNOWN_SCORE = -1

DEFAULT_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_REQUEST_TIMEOUT = 10.0

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Populated from the environment (optionally via .env)."""

    forecast_url: str = DEFAULT_FORECAST_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "INFO"
    lang: str = "en"


def _read_float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings() -> Settings:
    """Build Settings from FUJIVIEW_* environment variables.

    Call ``load_dotenv()`` beforehand to pick up a local .env file.
    """
    return Settings(
        forecast_url=os.environ.get("FUJIVIEW_FORECAST_URL", "").strip()
        or DEFAULT_FORECAST_URL,
        request_timeout=_read_float_env(
            "FUJIVIEW_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT
        ),
        log_level=os.environ.get("FUJIVIEW_LOG_LEVEL", "").strip().upper() or "INFO",
        lang=os.environ.get("FUJIVIEW_LANG", "").strip().lower() or "en",
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for an entry point."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=_LOG_FORMAT)
