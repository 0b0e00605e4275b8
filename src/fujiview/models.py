"""Data model definitions: explicit boundaries between fetch, scoring, and report layers."""

from dataclasses import dataclass
from enum import Enum


class Region(str, Enum):
    """Vantage region from which the summit is viewed."""

    NORTH = "north"
    SOUTH = "south"


class TimeWindow(str, Enum):
    """Part of the day a score is computed for."""

    MORNING = "morning"
    AFTERNOON = "afternoon"


@dataclass(frozen=True)
class ObservationPoint:
    """One fixed coordinate queried for weather along the line of sight."""

    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees)
    distance_km: float  # Distance from the observer, used for decay weighting


@dataclass(frozen=True)
class HourlyObservation:
    """Forecast conditions for a single hour at a single point."""

    cloud_cover_low: float  # Low cloud cover (0-100 %)
    relative_humidity: float  # Relative humidity at 2 m (0-100 %)
    weather_code: int  # WMO weather code
    precipitation_mm: float  # Precipitation (mm, >= 0)


@dataclass(frozen=True)
class ForecastRequest:
    """Logical parameters of one forecast query. URL building is the client's job."""

    lat: float
    lng: float
    time_window: TimeWindow


@dataclass(frozen=True)
class PointForecast:
    """Parsed provider response for one point. Coordinates are as echoed by the provider."""

    lat: float
    lng: float
    hours: tuple[HourlyObservation, ...]


@dataclass(frozen=True)
class PointContribution:
    """One point's distance-weighted share of a region/time cell."""

    average_score: float  # Running average of hourly scores
    weight: float  # exp(-0.1 * distance_km)

    @property
    def weighted_score(self) -> float:
        return self.average_score * self.weight


@dataclass(frozen=True)
class RegionTimeCell:
    """Running totals for one (region, time window) pair.

    Replaced, never mutated: each merge yields a new cell.
    """

    region: Region
    time_window: TimeWindow
    score_sum: float = 0.0
    weight_sum: float = 0.0
    completed: bool = False  # Set once the job walking this cell's points is Done
