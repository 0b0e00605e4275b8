"""Fetch orchestration: walks observation points one at a time and reports region/time scores."""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence

from fujiview.accumulator import (
    ALL_CELLS,
    RefreshJob,
    ReportGate,
    final_score_or_unknown,
)
from fujiview.config import REGION_POINTS
from fujiview.errors import ForecastError, ProtocolError
from fujiview.forecast import match_point
from fujiview.messages import (
    READY,
    UPDATE_ALL,
    UPDATE_SINGLE,
    Message,
    MessageSink,
    build_new_score,
    build_new_scores,
    build_ready,
    parse_trigger,
)
from fujiview.models import (
    ForecastRequest,
    ObservationPoint,
    PointForecast,
    Region,
    RegionTimeCell,
    TimeWindow,
)
from fujiview.scoring import point_contribution

logger = logging.getLogger(__name__)

Fetcher = Callable[[ForecastRequest], Awaitable[PointForecast]]


class FetchOrchestrator:
    """Drives region/time jobs against a forecast fetcher and posts reports.

    Every fetch is awaited before the next one is issued, so the provider sees
    at most one request at a time and cells need no locking.

    Args:
        fetch: Coroutine function returning a PointForecast (e.g. ForecastClient.fetch).
        send: Callable delivering outbound messages to the paired client.
        points: Ordered observation points per region.
    """

    def __init__(
        self,
        fetch: Fetcher,
        send: MessageSink,
        points: Mapping[Region, Sequence[ObservationPoint]] = REGION_POINTS,
    ) -> None:
        self._fetch = fetch
        self._send = send
        self._points = points
        self._gate = ReportGate()

    def _post(self, message: Message) -> None:
        logger.info("Posting to client: %s", message)
        self._send(message)

    def announce_ready(self) -> None:
        """Startup handshake."""
        self._post(build_ready())

    async def run_job(
        self, job: RefreshJob, region: Region, time_window: TimeWindow
    ) -> RegionTimeCell:
        """Visit every point of the region in order and accumulate into the job's cell.

        A failed point is logged and skipped; it is never retried within the job.

        Returns:
            The completed cell.
        """
        job.reset(region, time_window)
        points = self._points[region]
        for i, point in enumerate(points):
            request = ForecastRequest(lat=point.lat, lng=point.lng, time_window=time_window)
            try:
                forecast = await self._fetch(request)
                matched = match_point(point, forecast.lat, forecast.lng)
                contribution = point_contribution(forecast.hours, matched, region)
            except ForecastError as e:
                logger.warning(
                    "Skipping %s/%s point %d: %s",
                    region.value,
                    time_window.value,
                    i,
                    e,
                )
                continue
            cell = job.merge(region, time_window, contribution)
            logger.debug(
                "Merged %s/%s point %d: avg=%.3f weight=%.3f -> sum=%.3f weight_sum=%.3f",
                region.value,
                time_window.value,
                i,
                contribution.average_score,
                contribution.weight,
                cell.score_sum,
                cell.weight_sum,
            )
        job.complete(region, time_window)
        return job.cell(region, time_window)

    async def update_single(self, region: Region, time_window: TimeWindow) -> Message:
        """Run one region/time job and post its score alone."""
        job = RefreshJob()
        cell = await self.run_job(job, region, time_window)
        message = build_new_score(region, time_window, final_score_or_unknown(cell))
        self._post(message)
        return message

    async def update_all(self) -> Message | None:
        """Run all four jobs in sequence and post one combined report.

        The gate is consulted after each job; every job marks its cell completed
        (even when all its points failed), so the report goes out after the fourth.

        Returns:
            The combined report. None would mean the gate stayed shut, which the
            completed flags rule out; callers need not treat it as a failure.
        """
        job = RefreshJob()
        report: Message | None = None
        for region, time_window in ALL_CELLS:
            await self.run_job(job, region, time_window)
            scores = self._gate.check(job)
            if scores is not None:
                report = build_new_scores(scores)
                self._post(report)
        return report

    async def handle(self, payload: object) -> Message | None:
        """Dispatch one inbound message from the paired client.

        Raises:
            ProtocolError: If the message is not a valid trigger.
        """
        trigger = parse_trigger(payload)
        logger.info("Received %s request", trigger.kind)
        if trigger.kind == READY:
            return None
        if trigger.kind == UPDATE_ALL:
            return await self.update_all()
        if (
            trigger.kind == UPDATE_SINGLE
            and trigger.region is not None
            and trigger.time_window is not None
        ):
            return await self.update_single(trigger.region, trigger.time_window)
        raise ProtocolError(f"Cannot dispatch {trigger.kind} without region and time")
