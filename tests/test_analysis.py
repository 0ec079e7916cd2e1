"""Tests for policy comparison, frame-count sweeps and the timeline grid."""

import pytest

import analysis
from analysis import (
    STALE,
    SweepPoint,
    TimelineCell,
    compare_all,
    find_anomalies,
    project_timeline,
    sweep_faults,
    sweep_max_frames,
)
from engine import (
    FAULT,
    HIT,
    POLICY_ORDER,
    ConfigurationError,
    InvalidInputError,
    ReplacementPolicy,
    simulate,
)

BELADY = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]
TEXTBOOK = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2]


# -- Comparison ----------------------------------------------------------------


class TestCompareAll:
    """Verify the all-policy comparison."""

    def test_runs_every_policy_in_order(self) -> None:
        """Results are keyed by policy in evaluation order."""
        comparison = compare_all(TEXTBOOK, 3)
        assert tuple(comparison.results) == POLICY_ORDER

    def test_fault_counts(self) -> None:
        """Each entry matches a standalone run."""
        comparison = compare_all(TEXTBOOK, 3)
        assert comparison.results[ReplacementPolicy.FIFO].faults == 10
        assert comparison.results[ReplacementPolicy.LRU].faults == 9
        assert comparison.results[ReplacementPolicy.OPTIMAL].faults == 7
        for name in POLICY_ORDER:
            assert comparison.results[name] == simulate(name, TEXTBOOK, 3)

    def test_best_is_fewest_faults(self) -> None:
        """Optimal wins the textbook string."""
        assert compare_all(TEXTBOOK, 3).best == ReplacementPolicy.OPTIMAL

    def test_tie_goes_to_first_policy(self) -> None:
        """All policies tie on compulsory faults, so FIFO is reported."""
        assert compare_all([1, 2, 3], 3).best == ReplacementPolicy.FIFO

    def test_tie_between_later_policies(self) -> None:
        """LRU and Optimal tie ahead of FIFO; LRU comes first."""
        comparison = compare_all([1, 2, 1, 3, 1, 2], 2)
        assert comparison.results[ReplacementPolicy.FIFO].faults == 5
        assert comparison.results[ReplacementPolicy.LRU].faults == 4
        assert comparison.results[ReplacementPolicy.OPTIMAL].faults == 4
        assert comparison.best == ReplacementPolicy.LRU

    def test_hit_ratio_is_unrounded(self) -> None:
        """Hit ratio is hits over reference count."""
        comparison = compare_all(TEXTBOOK, 3)
        assert comparison.hit_ratio(ReplacementPolicy.FIFO) == pytest.approx(3 / 13)
        assert comparison.hit_ratio(ReplacementPolicy.OPTIMAL) == pytest.approx(6 / 13)

    def test_rows_flag_best(self) -> None:
        """Exactly one table row is marked best."""
        rows = compare_all(TEXTBOOK, 3).rows()
        assert [r["policy"] for r in rows] == list(POLICY_ORDER)
        assert [r["best"] for r in rows] == [False, False, True]

    def test_rejects_invalid_input(self) -> None:
        """Validation runs before any policy."""
        with pytest.raises(InvalidInputError):
            compare_all([], 3)
        with pytest.raises(InvalidInputError):
            compare_all([1], 0)

    def test_unregistered_policy_in_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A name in the evaluation order with no strategy is a configuration error."""
        monkeypatch.setattr(analysis, "POLICY_ORDER", (ReplacementPolicy.FIFO, "Clock"))
        with pytest.raises(ConfigurationError):
            compare_all([1, 2], 2)

    def test_unregistered_policy_runs_nothing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The evaluation order is checked before any policy is simulated."""
        calls = []
        monkeypatch.setattr(analysis, "POLICY_ORDER", (ReplacementPolicy.FIFO, ReplacementPolicy.LRU, "Clock"))
        monkeypatch.setattr(analysis, "simulate", lambda *args: calls.append(args))
        with pytest.raises(ConfigurationError):
            compare_all([1, 2], 2)
        assert calls == []


# -- Sweep ---------------------------------------------------------------------


class TestSweep:
    """Verify the frame-count sweep and anomaly detection."""

    def test_belady_series(self) -> None:
        """FIFO rises from 9 to 10 faults between 3 and 4 frames."""
        series = sweep_faults(ReplacementPolicy.FIFO, BELADY)
        assert series[2] == SweepPoint(3, 9)
        assert series[3] == SweepPoint(4, 10)
        assert series[3].faults > series[2].faults

    def test_length_for_small_inputs(self) -> None:
        """Few distinct pages still give ten points."""
        assert len(sweep_faults(ReplacementPolicy.FIFO, BELADY)) == 10

    def test_length_for_many_distinct_pages(self) -> None:
        """The sweep reaches two past the distinct page count."""
        pages = list(range(12))
        assert sweep_max_frames(pages) == 14
        assert len(sweep_faults(ReplacementPolicy.FIFO, pages)) == 14

    @pytest.mark.parametrize("policy", POLICY_ORDER)
    def test_series_shape(self, policy: str) -> None:
        """Capacities run 1..max; faults stay within bounds and end at compulsory misses."""
        series = sweep_faults(policy, TEXTBOOK)
        assert [p.capacity for p in series] == list(range(1, len(series) + 1))
        assert all(0 <= p.faults <= len(TEXTBOOK) for p in series)
        assert series[-1].faults == len(set(TEXTBOOK))

    def test_find_anomalies(self) -> None:
        """Only the 3 -> 4 step rises for the Belady string."""
        series = sweep_faults(ReplacementPolicy.FIFO, BELADY)
        assert find_anomalies(series) == [(3, 4)]

    def test_no_anomaly_for_lru(self) -> None:
        """LRU is a stack algorithm and never rises."""
        assert find_anomalies(sweep_faults(ReplacementPolicy.LRU, BELADY)) == []

    def test_find_anomalies_on_plain_pairs(self) -> None:
        """Any (capacity, faults) pairs can be checked."""
        assert find_anomalies([(1, 5), (2, 6), (3, 4), (4, 7)]) == [(1, 2), (3, 4)]
        assert find_anomalies([]) == []

    def test_rejects_invalid_input(self) -> None:
        """Unknown policy or empty input is rejected."""
        with pytest.raises(InvalidInputError):
            sweep_faults("Clock", BELADY)
        with pytest.raises(InvalidInputError):
            sweep_faults(ReplacementPolicy.FIFO, [])

    def test_rejects_unhashable_pages(self) -> None:
        """Distinct pages are counted with a set, so pages must be hashable."""
        with pytest.raises(InvalidInputError):
            sweep_faults(ReplacementPolicy.FIFO, [[1], [2], [1]])


# -- Timeline ------------------------------------------------------------------


class TestTimeline:
    """Verify hit / fault / stale classification."""

    def _grid(self, policy=ReplacementPolicy.FIFO, pages=BELADY, capacity=3):
        result = simulate(policy, pages, capacity)
        return result, project_timeline(pages, result.steps, capacity)

    def test_shape(self) -> None:
        """One row per frame, one column per reference."""
        _, grid = self._grid()
        assert grid.capacity == 3
        assert all(len(row) == len(BELADY) for row in grid.rows)
        assert grid.pages == tuple(BELADY)

    def test_empty_slots_before_frames_fill(self) -> None:
        """Unfilled slots are empty cells."""
        _, grid = self._grid()
        assert grid.column(0) == (TimelineCell(1, FAULT), None, None)

    def test_fault_cell(self) -> None:
        """The loaded page is a fault, the rest are stale."""
        _, grid = self._grid()
        assert grid.column(3) == (
            TimelineCell(4, FAULT),
            TimelineCell(2, STALE),
            TimelineCell(3, STALE),
        )

    def test_hit_cell(self) -> None:
        """The referenced resident page is a hit."""
        _, grid = self._grid()
        assert grid.column(7) == (
            TimelineCell(5, STALE),
            TimelineCell(1, HIT),
            TimelineCell(2, STALE),
        )

    @pytest.mark.parametrize("policy", POLICY_ORDER)
    def test_each_column_matches_its_step(self, policy: str) -> None:
        """Exactly one active cell per column, matching the step's page and event."""
        result, grid = self._grid(policy, TEXTBOOK, 3)
        for i, step in enumerate(result.steps):
            active = [c for c in grid.column(i) if c is not None and c.state != STALE]
            assert len(active) == 1
            assert active[0] == TimelineCell(step.page, step.event)

    def test_step_count_must_match(self) -> None:
        """A trace from a different reference string is rejected."""
        result = simulate(ReplacementPolicy.FIFO, BELADY, 3)
        with pytest.raises(InvalidInputError):
            project_timeline(BELADY[:-1], result.steps, 3)

    def test_capacity_below_trace_frames_is_rejected(self) -> None:
        """A trace run with more frames cannot be squeezed into fewer rows."""
        pages = [1, 2, 3, 4, 5]
        result = simulate(ReplacementPolicy.FIFO, pages, 4)
        with pytest.raises(InvalidInputError):
            project_timeline(pages, result.steps, 3)

    def test_larger_capacity_leaves_extra_rows_empty(self) -> None:
        """Rows beyond the trace's frame count stay empty."""
        pages = [1, 2, 3]
        result = simulate(ReplacementPolicy.FIFO, pages, 2)
        grid = project_timeline(pages, result.steps, 3)
        assert grid.column(2) == (TimelineCell(3, FAULT), TimelineCell(2, STALE), None)

    def test_trace_pages_must_match_references(self) -> None:
        """A trace from another reference string of the same length is rejected."""
        result = simulate(ReplacementPolicy.FIFO, [1, 2, 3], 2)
        with pytest.raises(InvalidInputError):
            project_timeline([7, 8, 9], result.steps, 2)
