"""Region/time accumulation: weighted sums per cell, per-job context, and the report gate."""

import logging
from dataclasses import dataclass, field, replace

from fujiview.config import UNKNOWN_SCORE
from fujiview.errors import ZeroWeightError
from fujiview.models import PointContribution, Region, RegionTimeCell, TimeWindow
from fujiview.scoring import round_half_up

logger = logging.getLogger(__name__)

CellKey = tuple[Region, TimeWindow]

# Report order: north morning, north afternoon, south morning, south afternoon
ALL_CELLS: tuple[CellKey, ...] = tuple(
    (region, time_window) for region in Region for time_window in TimeWindow
)


def merge(cell: RegionTimeCell, contribution: PointContribution) -> RegionTimeCell:
    """Add one point's weighted score and weight to the cell."""
    return replace(
        cell,
        score_sum=cell.score_sum + contribution.weighted_score,
        weight_sum=cell.weight_sum + contribution.weight,
    )


def final_score(cell: RegionTimeCell) -> int:
    """Weighted average of the merged points, rounded half up.

    Raises:
        ZeroWeightError: If no point response was merged into the cell.
    """
    if cell.weight_sum <= 0:
        raise ZeroWeightError(
            f"No weighted points for {cell.region.value}/{cell.time_window.value}"
        )
    return round_half_up(cell.score_sum / cell.weight_sum)


def final_score_or_unknown(cell: RegionTimeCell) -> int:
    """final_score(), with UNKNOWN_SCORE substituted for an empty cell."""
    try:
        return final_score(cell)
    except ZeroWeightError as e:
        logger.warning("%s; reporting unknown score", e)
        return UNKNOWN_SCORE


def _empty_cells() -> dict[CellKey, RegionTimeCell]:
    return {
        (region, time_window): RegionTimeCell(region=region, time_window=time_window)
        for region, time_window in ALL_CELLS
    }


@dataclass
class RefreshJob:
    """Accumulator state owned by one refresh invocation.

    Each update trigger gets its own job, so concurrent triggers never share cells.
    """

    cells: dict[CellKey, RegionTimeCell] = field(default_factory=_empty_cells)
    reported: bool = False

    def cell(self, region: Region, time_window: TimeWindow) -> RegionTimeCell:
        return self.cells[(region, time_window)]

    def reset(self, region: Region, time_window: TimeWindow) -> None:
        self.cells[(region, time_window)] = RegionTimeCell(
            region=region, time_window=time_window
        )

    def merge(
        self,
        region: Region,
        time_window: TimeWindow,
        contribution: PointContribution,
    ) -> RegionTimeCell:
        updated = merge(self.cell(region, time_window), contribution)
        self.cells[(region, time_window)] = updated
        return updated

    def complete(self, region: Region, time_window: TimeWindow) -> None:
        self.cells[(region, time_window)] = replace(
            self.cell(region, time_window), completed=True
        )

    def all_completed(self) -> bool:
        return all(cell.completed for cell in self.cells.values())


class ReportGate:
    """Releases the combined refresh-all scores exactly once per job.

    Readiness is every cell's ``completed`` flag, so a region that is fully
    disqualified (score sum 0) still counts as fetched.
    """

    def check(self, job: RefreshJob) -> dict[CellKey, int] | None:
        """Return the four final scores if the job is ready and not yet reported."""
        if job.reported:
            logger.debug("Combined report already sent; suppressing duplicate")
            return None
        if not job.all_completed():
            return None
        job.reported = True
        return {key: final_score_or_unknown(job.cells[key]) for key in ALL_CELLS}
