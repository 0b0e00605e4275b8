"""Message protocol shared with the paired client: inbound triggers and outbound reports."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from fujiview.errors import ProtocolError
from fujiview.models import Region, TimeWindow

Message = dict[str, Any]
MessageSink = Callable[[Message], None]

READY = "ready"
UPDATE_ALL = "update_all"
UPDATE_SINGLE = "update_single"
NEW_SCORE = "new_score"
NEW_SCORES = "new_scores"

SCORE_KEYS: dict[tuple[Region, TimeWindow], str] = {
    (Region.NORTH, TimeWindow.MORNING): "northMorning",
    (Region.NORTH, TimeWindow.AFTERNOON): "northAfternoon",
    (Region.SOUTH, TimeWindow.MORNING): "southMorning",
    (Region.SOUTH, TimeWindow.AFTERNOON): "southAfternoon",
}


@dataclass(frozen=True)
class Trigger:
    """A validated inbound message."""

    kind: str  # READY, UPDATE_ALL or UPDATE_SINGLE
    region: Region | None = None  # UPDATE_SINGLE only
    time_window: TimeWindow | None = None  # UPDATE_SINGLE only


def parse_trigger(payload: object) -> Trigger:
    """Validate an inbound message from the paired client.

    Raises:
        ProtocolError: On a non-object payload, unknown type, or bad region/time.
    """
    if not isinstance(payload, Mapping):
        raise ProtocolError(f"Message is not an object: {payload!r}")
    kind = payload.get("type")
    if kind in (READY, UPDATE_ALL):
        return Trigger(kind=kind)
    if kind != UPDATE_SINGLE:
        raise ProtocolError(f"Unknown message type: {kind!r}")
    try:
        region = Region(payload.get("region"))
        time_window = TimeWindow(payload.get("time"))
    except ValueError as e:
        raise ProtocolError(f"Invalid update_single message: {e}") from e
    return Trigger(kind=kind, region=region, time_window=time_window)


def build_ready() -> Message:
    return {"type": READY}


def build_update_all() -> Message:
    return {"type": UPDATE_ALL}


def build_update_single(region: Region, time_window: TimeWindow) -> Message:
    return {"type": UPDATE_SINGLE, "region": region.value, "time": time_window.value}


def build_new_score(region: Region, time_window: TimeWindow, score: int) -> Message:
    return {
        "type": NEW_SCORE,
        "region": region.value,
        "time": time_window.value,
        "score": score,
    }


def build_new_scores(scores: Mapping[tuple[Region, TimeWindow], int]) -> Message:
    """Combined report. Scores must cover all four region/time cells."""
    message: Message = {"type": NEW_SCORES}
    for key, name in SCORE_KEYS.items():
        message[name] = scores[key]
    return message
