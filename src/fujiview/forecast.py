"""Forecast provider collaborator: Open-Meteo query building, HTTP fetch, and payload parsing."""

import logging
import math
from datetime import date, datetime

import httpx
from pytz import timezone

from fujiview.config import (
    COORD_MATCH_TOLERANCE_DEG,
    LOCAL_TIMEZONE,
    TIME_WINDOW_HOURS,
    Settings,
)
from fujiview.errors import EmptySeriesError, ForecastError, MalformedPayloadError
from fujiview.models import (
    ForecastRequest,
    HourlyObservation,
    ObservationPoint,
    PointForecast,
    TimeWindow,
)

logger = logging.getLogger(__name__)

_USER_AGENT = "FujiView/1.0"

# Payload key -> HourlyObservation field
_HOURLY_FIELDS: dict[str, str] = {
    "cloud_cover_low": "cloud_cover_low",
    "relative_humidity_2m": "relative_humidity",
    "weather_code": "weather_code",
    "precipitation": "precipitation_mm",
}


def local_today() -> date:
    """Today's date in the fixed local time zone."""
    return datetime.now(timezone(LOCAL_TIMEZONE)).date()


def hour_range(time_window: TimeWindow, today: date) -> tuple[str, str]:
    """Return (start_hour, end_hour) ISO strings for the window on the given day."""
    start, end = TIME_WINDOW_HOURS[time_window]
    day = today.isoformat()
    return f"{day}T{start:02d}:00", f"{day}T{end:02d}:00"


def build_query(request: ForecastRequest, today: date) -> dict[str, str | float]:
    """Open-Meteo query parameters for one point and time window."""
    start_hour, end_hour = hour_range(request.time_window, today)
    return {
        "latitude": request.lat,
        "longitude": request.lng,
        "hourly": ",".join(
            ("cloud_cover_low", "precipitation", "weather_code", "relative_humidity_2m")
        ),
        "timezone": LOCAL_TIMEZONE,
        "start_hour": start_hour,
        "end_hour": end_hour,
    }


def _number(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedPayloadError(f"Expected a number for {name}, got {value!r}")
    return float(value)


def parse_forecast(payload: object) -> PointForecast:
    """Validate a provider payload and convert it to a PointForecast.

    Args:
        payload: Decoded JSON body.

    Returns:
        PointForecast with one HourlyObservation per time step.

    Raises:
        MalformedPayloadError: On missing fields, nulls, or misaligned arrays.
        EmptySeriesError: When the hourly series is empty.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError("Payload is not a JSON object")
    try:
        lat = _number(payload["latitude"], "latitude")
        lng = _number(payload["longitude"], "longitude")
        hourly = payload["hourly"]
        times = hourly["time"]
        columns = {key: hourly[key] for key in _HOURLY_FIELDS}
    except (KeyError, TypeError) as e:
        raise MalformedPayloadError(f"Missing field in payload: {e}") from e

    if not isinstance(times, list):
        raise MalformedPayloadError("hourly.time is not a list")
    for key, values in columns.items():
        if not isinstance(values, list) or len(values) != len(times):
            raise MalformedPayloadError(f"hourly.{key} is not aligned with hourly.time")
    if not times:
        raise EmptySeriesError(f"No hourly entries for ({lat}, {lng})")

    hours: list[HourlyObservation] = []
    for i in range(len(times)):
        fields = {
            attr: _number(columns[key][i], f"hourly.{key}[{i}]")
            for key, attr in _HOURLY_FIELDS.items()
        }
        fields["weather_code"] = int(fields["weather_code"])
        hours.append(HourlyObservation(**fields))
    return PointForecast(lat=lat, lng=lng, hours=tuple(hours))


def match_point(point: ObservationPoint, lat: float, lng: float) -> ObservationPoint:
    """Tie a response back to the point that was requested for it.

    The provider echoes grid-snapped coordinates, which may sit closer to a
    neighbouring point than to the requested one; the requested point (and its
    distance) is kept as long as the echo is within COORD_MATCH_TOLERANCE_DEG.

    Raises:
        MalformedPayloadError: If the response is too far from the requested point.
    """
    if math.hypot(point.lat - lat, point.lng - lng) > COORD_MATCH_TOLERANCE_DEG:
        raise MalformedPayloadError(
            f"Response coordinates ({lat}, {lng}) do not match requested point "
            f"({point.lat}, {point.lng})"
        )
    return point


class ForecastClient:
    """Async Open-Meteo client. One request per call; no retries."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._client = httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            headers={"User-Agent": _USER_AGENT},
            transport=transport,
        )

    async def __aenter__(self) -> "ForecastClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, request: ForecastRequest) -> PointForecast:
        """Fetch and parse the forecast for one point.

        Raises:
            ForecastError: On transport failure, non-2xx status, or a bad payload.
        """
        params = build_query(request, local_today())
        logger.debug("GET %s %s", self._settings.forecast_url, params)
        try:
            resp = await self._client.get(self._settings.forecast_url, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ForecastError(
                f"Forecast request failed for ({request.lat}, {request.lng}): {e}"
            ) from e
        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Response is not JSON: {e}") from e
        return parse_forecast(payload)
