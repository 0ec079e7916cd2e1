# analysis.py
"""
Comparative studies built on the engine: policy comparison, frame-count
sweeps (Belady's anomaly), and the frame-by-time timeline grid.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, List, NamedTuple, Optional, Sequence, Tuple

from engine import (
    FAULT,
    HIT,
    POLICY_ORDER,
    STRATEGIES,
    ConfigurationError,
    InvalidInputError,
    SimulationResult,
    StepRecord,
    simulate,
    validate_capacity,
    validate_policy,
    validate_references,
)

STALE = "stale"

# Sweeps always cover at least this many frame counts.
MIN_SWEEP_FRAMES = 10


# =============================================================================
# COMPARISON
# =============================================================================

@dataclass(frozen=True)
class ComparisonResult:
    """
    Every policy run over the same input.

    Attributes:
        results (Dict[str, SimulationResult]): Keyed by policy, evaluation order
        best (str): Policy with the fewest faults, earliest wins ties
    """
    results: Dict[str, SimulationResult]
    best: str

    def hit_ratio(self, policy: str) -> float:
        return self.results[policy].hit_ratio

    def rows(self) -> List[dict]:
        """One dict per policy, ready for a table."""
        return [
            {
                "policy": name,
                "faults": res.faults,
                "hits": res.hits,
                "hit_ratio": res.hit_ratio,
                "best": name == self.best,
            }
            for name, res in self.results.items()
        ]


def compare_all(references: Sequence[Hashable], capacity: int) -> ComparisonResult:
    """
    Run every policy in ``POLICY_ORDER`` over the same input.

    Args:
        references (Sequence): Page identifiers, non-empty
        capacity (int): Number of frames, positive

    Returns:
        ComparisonResult: One SimulationResult per policy plus the best policy

    Raises:
        InvalidInputError: If the input is malformed
        ConfigurationError: If ``POLICY_ORDER`` names an unregistered policy
    """
    pages = validate_references(references)
    capacity = validate_capacity(capacity)
    missing = [name for name in POLICY_ORDER if name not in STRATEGIES]
    if missing:
        raise ConfigurationError(f"No strategy registered for policy {missing[0]!r}")

    results: Dict[str, SimulationResult] = {}
    best = None
    for name in POLICY_ORDER:
        res = simulate(name, pages, capacity)
        results[name] = res
        # strict < keeps the first policy on ties
        if best is None or res.faults < results[best].faults:
            best = name

    return ComparisonResult(results, best)


# =============================================================================
# FRAME-COUNT SWEEP
# =============================================================================

class SweepPoint(NamedTuple):
    capacity: int
    faults: int


def sweep_max_frames(references: Sequence[Hashable]) -> int:
    return max(MIN_SWEEP_FRAMES, len(set(references)) + 2)


def sweep_faults(policy: str, references: Sequence[Hashable]) -> List[SweepPoint]:
    """
    Fault count for every frame count from 1 up to ``sweep_max_frames``.

    The upper bound exceeds the number of distinct pages, so the last
    points only take compulsory faults. The series is returned raw; use
    ``find_anomalies`` to look for rising segments.

    Args:
        policy (str): Policy to sweep, usually FIFO
        references (Sequence): Page identifiers, non-empty

    Returns:
        List[SweepPoint]: (capacity, faults) with capacity strictly increasing
    """
    policy = validate_policy(policy)
    pages = validate_references(references)

    return [
        SweepPoint(capacity, simulate(policy, pages, capacity).faults)
        for capacity in range(1, sweep_max_frames(pages) + 1)
    ]


def find_anomalies(series: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Adjacent (smaller, larger) capacities where more frames gave more faults."""
    anomalies = []
    for (cap_a, faults_a), (cap_b, faults_b) in zip(series, series[1:]):
        if faults_b > faults_a:
            anomalies.append((cap_a, cap_b))
    return anomalies


# =============================================================================
# TIMELINE
# =============================================================================

class TimelineCell(NamedTuple):
    page: Hashable
    state: str  # HIT, FAULT or STALE


@dataclass(frozen=True)
class TimelineGrid:
    """
    Frame-by-time occupancy.

    Attributes:
        pages (Tuple): Referenced page per column
        rows (Tuple): One row per frame slot; a cell is None when the slot is empty
    """
    pages: Tuple[Hashable, ...]
    rows: Tuple[Tuple[Optional[TimelineCell], ...], ...]

    @property
    def capacity(self) -> int:
        return len(self.rows)

    def column(self, step: int) -> Tuple[Optional[TimelineCell], ...]:
        return tuple(row[step] for row in self.rows)


def _classify(occupant, step: StepRecord) -> TimelineCell:
    if occupant == step.page:
        return TimelineCell(occupant, HIT if step.event == HIT else FAULT)
    return TimelineCell(occupant, STALE)


def project_timeline(references: Sequence[Hashable],
                     steps: Sequence[StepRecord],
                     capacity: int) -> TimelineGrid:
    """
    Lay a finished trace out as a frame-by-time grid.

    Each occupied cell is classified as the hit or fault of its step when it
    holds the referenced page, otherwise as stale.

    Args:
        references (Sequence): The reference string the trace was run on
        steps (Sequence[StepRecord]): The trace, one record per reference
        capacity (int): Frame count of the run

    Returns:
        TimelineGrid: ``capacity`` rows by ``len(references)`` columns

    Raises:
        InvalidInputError: If the trace does not belong to these references
            and this capacity
    """
    pages = validate_references(references)
    capacity = validate_capacity(capacity)
    if len(steps) != len(pages):
        raise InvalidInputError(
            f"Timeline needs one step per reference: got {len(steps)} steps for {len(pages)} pages"
        )
    for i, (page, step) in enumerate(zip(pages, steps)):
        if step.page != page:
            raise InvalidInputError(f"Step {i + 1} references page {step.page!r}, expected {page!r}")
        if len(step.frames) > capacity:
            raise InvalidInputError(
                f"Step {i + 1} holds {len(step.frames)} frames, more than capacity {capacity}"
            )

    rows = []
    for slot in range(capacity):
        row = []
        for step in steps:
            if slot < len(step.frames):
                row.append(_classify(step.frames[slot], step))
            else:
                row.append(None)
        rows.append(tuple(row))

    return TimelineGrid(pages, tuple(rows))
