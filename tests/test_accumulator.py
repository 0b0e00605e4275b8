import pytest

from fujiview.accumulator import (
    ALL_CELLS,
    RefreshJob,
    ReportGate,
    final_score,
    final_score_or_unknown,
    merge,
)
from fujiview.config import UNKNOWN_SCORE
from fujiview.errors import ZeroWeightError
from fujiview.models import PointContribution, Region, RegionTimeCell, TimeWindow
from fujiview.scoring import distance_weight

NEAR = PointContribution(average_score=10, weight=1.0)
FAR = PointContribution(average_score=4, weight=0.33)


def _cell() -> RegionTimeCell:
    return RegionTimeCell(region=Region.NORTH, time_window=TimeWindow.MORNING)


def test_merge_accumulates_sums():
    cell = merge(merge(_cell(), NEAR), FAR)
    assert cell.score_sum == pytest.approx(10 + 4 * 0.33)
    assert cell.weight_sum == pytest.approx(1.33)


def test_merge_leaves_original_cell_untouched():
    cell = _cell()
    merge(cell, NEAR)
    assert cell.score_sum == 0.0 and cell.weight_sum == 0.0


def test_final_score_weighted_example():
    assert final_score(merge(merge(_cell(), NEAR), FAR)) == 9


def test_final_score_with_exact_decay_weight():
    far = PointContribution(average_score=4, weight=distance_weight(11.09))
    assert final_score(merge(merge(_cell(), NEAR), far)) == 9


def test_final_score_is_order_independent():
    forward = final_score(merge(merge(_cell(), NEAR), FAR))
    backward = final_score(merge(merge(_cell(), FAR), NEAR))
    assert forward == backward


def test_final_score_zero_weight_raises():
    with pytest.raises(ZeroWeightError):
        final_score(_cell())


def test_final_score_or_unknown_substitutes_sentinel():
    assert final_score_or_unknown(_cell()) == UNKNOWN_SCORE


def test_fully_disqualified_cell_scores_zero():
    cell = merge(_cell(), PointContribution(average_score=0, weight=1.0))
    assert final_score(cell) == 0


def test_all_cells_order():
    assert ALL_CELLS == (
        (Region.NORTH, TimeWindow.MORNING),
        (Region.NORTH, TimeWindow.AFTERNOON),
        (Region.SOUTH, TimeWindow.MORNING),
        (Region.SOUTH, TimeWindow.AFTERNOON),
    )


def test_refresh_job_reset_and_complete():
    job = RefreshJob()
    job.merge(Region.SOUTH, TimeWindow.AFTERNOON, NEAR)
    job.complete(Region.SOUTH, TimeWindow.AFTERNOON)
    cell = job.cell(Region.SOUTH, TimeWindow.AFTERNOON)
    assert cell.completed and cell.weight_sum == 1.0

    job.reset(Region.SOUTH, TimeWindow.AFTERNOON)
    cell = job.cell(Region.SOUTH, TimeWindow.AFTERNOON)
    assert not cell.completed and cell.score_sum == 0.0 and cell.weight_sum == 0.0


def test_jobs_do_not_share_cells():
    first, second = RefreshJob(), RefreshJob()
    first.merge(Region.NORTH, TimeWindow.MORNING, NEAR)
    assert second.cell(Region.NORTH, TimeWindow.MORNING).weight_sum == 0.0


def _complete_all(job: RefreshJob, contribution: PointContribution | None = NEAR):
    for region, time_window in ALL_CELLS:
        if contribution is not None:
            job.merge(region, time_window, contribution)
        job.complete(region, time_window)


def test_gate_waits_for_all_cells():
    job = RefreshJob()
    gate = ReportGate()
    for region, time_window in ALL_CELLS[:3]:
        job.merge(region, time_window, NEAR)
        job.complete(region, time_window)
        assert gate.check(job) is None


def test_gate_releases_once():
    job = RefreshJob()
    gate = ReportGate()
    _complete_all(job)
    scores = gate.check(job)
    assert scores == {key: 10 for key in ALL_CELLS}
    assert gate.check(job) is None
    assert gate.check(job) is None


def test_gate_opens_for_fully_disqualified_cells():
    job = RefreshJob()
    _complete_all(job, PointContribution(average_score=0, weight=1.0))
    assert ReportGate().check(job) == {key: 0 for key in ALL_CELLS}


def test_gate_reports_unknown_for_empty_cells():
    job = RefreshJob()
    _complete_all(job, None)
    assert ReportGate().check(job) == {key: UNKNOWN_SCORE for key in ALL_CELLS}
