"""Exception hierarchy. None of these are fatal to a refresh cycle."""


class FujiViewError(Exception):
    """Base class for all fujiview errors."""


class ForecastError(FujiViewError):
    """Forecast fetch failure (transport error or non-success status)."""


class MalformedPayloadError(ForecastError):
    """Forecast payload is missing fields or cannot be matched to a point."""


class EmptySeriesError(ForecastError):
    """Forecast payload carries no hourly entries."""


class ZeroWeightError(FujiViewError):
    """Final score requested for a cell with no merged point responses."""


class ProtocolError(FujiViewError):
    """Inbound message has an unknown type or invalid fields."""
