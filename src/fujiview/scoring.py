"""Visibility scoring: hourly score, per-point running average, and distance weighting."""

import math
from collections.abc import Iterable

from fujiview.config import DISTANCE_DECAY, REGION_DAMPENING
from fujiview.errors import EmptySeriesError
from fujiview.models import (
    HourlyObservation,
    ObservationPoint,
    PointContribution,
    Region,
)

_FOG_CODES = range(45, 49)
_HEAVY_PRECIPITATION_CODES = frozenset({65, 67, 75, 77, 95, 96, 99})
_PRECIPITATION_CODES = range(51, 68)
_OVERCAST_CODE = 3
_HEAVY_RAIN_MM = 5.0

MIN_SCORE = 1
MAX_SCORE = 10


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity (8.5 -> 9)."""
    return math.floor(value + 0.5)


def _dampening(region: Region | str | None) -> float:
    """Region multiplier. Unknown or missing regions use the north value."""
    try:
        return REGION_DAMPENING[Region(region)]
    except ValueError:
        return REGION_DAMPENING[Region.NORTH]


def is_disqualified(weather_code: int, precipitation_mm: float) -> bool:
    """Fog, heavy precipitation classes, or more than 5 mm of rain."""
    return (
        weather_code in _FOG_CODES
        or weather_code in _HEAVY_PRECIPITATION_CODES
        or precipitation_mm > _HEAVY_RAIN_MM
    )


def score_conditions(
    cloud_cover_low: float,
    relative_humidity: float,
    weather_code: int,
    precipitation_mm: float,
    region: Region | str | None = Region.NORTH,
) -> int:
    """Score one hour of weather for summit visibility.

    Args:
        cloud_cover_low: Low cloud cover in percent (0-100).
        relative_humidity: Relative humidity in percent (0-100).
        weather_code: WMO weather code.
        precipitation_mm: Precipitation in mm.
        region: Vantage region; selects the dampening multiplier.

    Returns:
        0 when a disqualifier applies, otherwise an integer in [1, 10] (10 = perfect).
    """
    if is_disqualified(weather_code, precipitation_mm):
        return 0

    score = 10 * (1 - cloud_cover_low / 100)

    # Haze
    if relative_humidity > 80:
        score *= 0.3
    elif relative_humidity > 60:
        score *= 0.7

    if weather_code == _OVERCAST_CODE:
        score *= 0.4
    elif weather_code in _PRECIPITATION_CODES:
        score *= 0.6

    score *= _dampening(region)

    return round_half_up(max(MIN_SCORE, min(MAX_SCORE, score)))


def score_hour(
    observation: HourlyObservation, region: Region | str | None = Region.NORTH
) -> int:
    """score_conditions() applied to a HourlyObservation."""
    return score_conditions(
        cloud_cover_low=observation.cloud_cover_low,
        relative_humidity=observation.relative_humidity,
        weather_code=observation.weather_code,
        precipitation_mm=observation.precipitation_mm,
        region=region,
    )


def running_average(scores: Iterable[float]) -> float:
    """Fold scores as avg = (avg + next) / 2, seeded with the first score.

    Later hours weigh more than earlier ones: [a, b, c] -> ((a + b) / 2 + c) / 2.

    Raises:
        EmptySeriesError: If there are no scores.
    """
    average: float | None = None
    for score in scores:
        average = score if average is None else (average + score) / 2
    if average is None:
        raise EmptySeriesError("No hourly scores to average")
    return float(average)


def distance_weight(distance_km: float) -> float:
    """Decay weight exp(-0.1 * distance_km); nearer points count more."""
    return math.exp(-DISTANCE_DECAY * distance_km)


def point_contribution(
    hours: Iterable[HourlyObservation],
    point: ObservationPoint,
    region: Region | str | None,
) -> PointContribution:
    """Reduce one point's hourly series to its weighted contribution.

    Raises:
        EmptySeriesError: If the series has no hours.
    """
    average = running_average(score_hour(hour, region) for hour in hours)
    return PointContribution(
        average_score=average, weight=distance_weight(point.distance_km)
    )
