import pytest

from fujiview.models import HourlyObservation

# Scores 10 (north) / 8 (south)
CLEAR = HourlyObservation(
    cloud_cover_low=0, relative_humidity=50, weather_code=0, precipitation_mm=0
)
# Scores 4 (north)
CLOUDY = HourlyObservation(
    cloud_cover_low=60, relative_humidity=50, weather_code=0, precipitation_mm=0
)
FOG = HourlyObservation(
    cloud_cover_low=0, relative_humidity=100, weather_code=45, precipitation_mm=0
)


def make_payload(lat: float, lng: float, hours: list[HourlyObservation]) -> dict:
    """Open-Meteo shaped response body."""
    return {
        "latitude": lat,
        "longitude": lng,
        "hourly": {
            "time": [f"2026-10-19T{6 + i:02d}:00" for i in range(len(hours))],
            "relative_humidity_2m": [h.relative_humidity for h in hours],
            "precipitation": [h.precipitation_mm for h in hours],
            "cloud_cover_low": [h.cloud_cover_low for h in hours],
            "weather_code": [h.weather_code for h in hours],
        },
    }


@pytest.fixture
def clear_payload() -> dict:
    return make_payload(35.5, 138.75, [CLEAR, CLEAR, CLEAR])
