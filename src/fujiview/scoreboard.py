"""Paired-client side score store: what the display reads from."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fujiview.accumulator import ALL_CELLS, CellKey
from fujiview.config import UNKNOWN_SCORE
from fujiview.messages import (
    NEW_SCORE,
    NEW_SCORES,
    READY,
    SCORE_KEYS,
    Message,
    build_update_all,
)
from fujiview.models import Region, TimeWindow

logger = logging.getLogger(__name__)

# (lower bound, label key, bubble colour), best band first
_SCORE_BANDS: tuple[tuple[int, str, str], ...] = (
    (8, "score_visible", "#00aa00"),
    (6, "score_partly_visible", "#00aaff"),
    (3, "score_barely_visible", "#ffaa55"),
)
_NOT_VISIBLE = ("score_not_visible", "#ff0000")


def score_label(score: int) -> str:
    """i18n key describing a score (see fujiview.i18n)."""
    for lower, key, _ in _SCORE_BANDS:
        if score >= lower:
            return key
    return _NOT_VISIBLE[0]


def score_color(score: int) -> str:
    """Bubble colour (hex) for a score."""
    for lower, _, color in _SCORE_BANDS:
        if score >= lower:
            return color
    return _NOT_VISIBLE[1]


class ScoreBoard:
    """Latest score per region/time as seen by the paired client.

    Cells start at UNKNOWN_SCORE until a report fills them.
    """

    def __init__(self) -> None:
        self.scores: dict[CellKey, int] = {key: UNKNOWN_SCORE for key in ALL_CELLS}
        self.current_region = Region.NORTH

    def score(self, time_window: TimeWindow, region: Region | None = None) -> int:
        return self.scores[(region or self.current_region, time_window)]

    def set_score(self, region: Region, time_window: TimeWindow, score: int) -> None:
        self.scores[(region, time_window)] = score

    def loaded_progress(self) -> int:
        """Number of cells (0-4) holding a reported score."""
        return sum(1 for score in self.scores.values() if score != UNKNOWN_SCORE)

    def is_loaded(self) -> bool:
        return self.loaded_progress() == len(ALL_CELLS)

    def toggle_region(self) -> Region:
        self.current_region = (
            Region.SOUTH if self.current_region == Region.NORTH else Region.NORTH
        )
        return self.current_region

    def apply(self, message: Mapping[str, Any]) -> Message | None:
        """Update from one outbound report.

        Returns:
            A reply for the server (update_all after its ready handshake), or None.
        """
        kind = message.get("type")
        if kind == READY:
            return build_update_all()
        if kind == NEW_SCORE:
            try:
                region = Region(message["region"])
                time_window = TimeWindow(message["time"])
                score = int(message["score"])
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Ignoring malformed new_score message: %s", e)
                return None
            self.set_score(region, time_window, score)
            return None
        if kind == NEW_SCORES:
            try:
                scores = {key: int(message[name]) for key, name in SCORE_KEYS.items()}
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Ignoring malformed new_scores message: %s", e)
                return None
            self.scores.update(scores)
            return None
        logger.debug("Ignoring message type %r", kind)
        return None

    def apply_all(self, messages: Iterable[Mapping[str, Any]]) -> list[Message]:
        """apply() each message in order; returns the replies it produced."""
        replies = []
        for message in messages:
            reply = self.apply(message)
            if reply is not None:
                replies.append(reply)
        return replies
