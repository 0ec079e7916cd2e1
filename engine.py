# engine.py
"""
Page Replacement Engine — FIFO, LRU and Optimal

Runs a page reference string through a fixed number of frames and records
what happened at every step. Everything here is pure: a call receives plain
data and returns plain data, no state survives between calls.
"""

import operator
from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional, Sequence, Tuple


# =============================================================================
# ERRORS
# =============================================================================

class InvalidInputError(ValueError):
    """Raised when a reference string, capacity or policy is malformed."""


class ConfigurationError(LookupError):
    """Raised when the fixed policy evaluation order names an unknown policy."""


# =============================================================================
# DATA MODEL
# =============================================================================

HIT = "hit"
FAULT = "fault"


class ReplacementPolicy:
    """
    Names of the available page replacement algorithms.

    FIFO:    First-In-First-Out - replaces the page loaded earliest
    LRU:     Least Recently Used - replaces the page unused for longest
    OPTIMAL: Belady's optimal - replaces the page needed farthest ahead
    """
    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"


# Evaluation order; comparison ties go to the earlier entry.
POLICY_ORDER = (ReplacementPolicy.FIFO, ReplacementPolicy.LRU, ReplacementPolicy.OPTIMAL)


@dataclass(frozen=True)
class StepRecord:
    """
    What happened when one page reference was processed.

    Attributes:
        page (Hashable): The referenced page identifier
        event (str): HIT or FAULT
        frames (Tuple): Frame contents after this step, slot order
        slot (int): Frame index holding ``page`` after this step
        evicted (Optional[Hashable]): Page replaced on a full-frame fault
    """
    page: Hashable
    event: str
    frames: Tuple[Hashable, ...]
    slot: int
    evicted: Optional[Hashable] = None

    @property
    def is_hit(self) -> bool:
        return self.event == HIT


@dataclass(frozen=True)
class SimulationResult:
    """
    Outcome of one simulation run.

    Attributes:
        policy (str): Policy name the run used
        capacity (int): Number of frames
        hits (int): Count of references already resident
        faults (int): Count of references that had to be loaded
        steps (Tuple[StepRecord, ...]): One record per reference, in order
    """
    policy: str
    capacity: int
    hits: int
    faults: int
    steps: Tuple[StepRecord, ...]

    @property
    def total(self) -> int:
        return self.hits + self.faults

    @property
    def hit_ratio(self) -> float:
        return self.hits / self.total if self.total else 0.0

    @property
    def fault_rate(self) -> float:
        return self.faults / self.total if self.total else 0.0


# =============================================================================
# POLICIES
# =============================================================================

class PolicyStrategy:
    """
    Victim selection for one policy during one run.

    A fresh instance is built for every ``simulate`` call, so any state a
    policy keeps (the FIFO pointer, for instance) lives exactly one run.
    Subclasses override ``on_hit`` and ``replace``.
    """
    name = None

    def __init__(self, references: Sequence[Hashable], capacity: int):
        self.references = references
        self.capacity = capacity

    def on_hit(self, frames: List[Hashable], page: Hashable, position: int) -> None:
        pass

    def replace(self, frames: List[Hashable], page: Hashable, position: int) -> Tuple[int, Hashable]:
        """
        Evict one resident page to make room for ``page``.

        Args:
            frames (List): Live frame set, always full when called
            page (Hashable): Page being loaded
            position (int): Index of ``page`` in the reference string

        Returns:
            Tuple[int, Hashable]: (slot now holding ``page``, evicted page)
        """
        raise NotImplementedError


class FIFOStrategy(PolicyStrategy):
    # A rotating pointer stands in for the queue: slots fill in load order,
    # so the pointer always sits on the oldest resident page.
    name = ReplacementPolicy.FIFO

    def __init__(self, references, capacity):
        super().__init__(references, capacity)
        self.pointer = 0

    def replace(self, frames, page, position):
        slot = self.pointer
        evicted = frames[slot]
        frames[slot] = page
        self.pointer = (self.pointer + 1) % self.capacity
        return slot, evicted


class LRUStrategy(PolicyStrategy):
    # Frame order is recency order: front is least recent, back is most recent.
    name = ReplacementPolicy.LRU

    def on_hit(self, frames, page, position):
        frames.remove(page)
        frames.append(page)

    def replace(self, frames, page, position):
        evicted = frames.pop(0)
        frames.append(page)
        return len(frames) - 1, evicted


class OptimalStrategy(PolicyStrategy):
    name = ReplacementPolicy.OPTIMAL

    def _next_use(self, page, position):
        """Distance to the next reference of ``page`` after ``position``, or None."""
        for offset, future in enumerate(self.references[position + 1:]):
            if future == page:
                return offset
        return None

    def replace(self, frames, page, position):
        victim = None
        farthest = -1

        for i, resident in enumerate(frames):
            distance = self._next_use(resident, position)
            if distance is None:
                # Never used again: nothing can beat it
                victim = i
                break
            if distance > farthest:
                farthest = distance
                victim = i

        # Only reachable with an empty frame set
        if victim is None:
            victim = 0

        evicted = frames[victim]
        frames[victim] = page
        return victim, evicted


# New policies only need a strategy class and an entry here.
STRATEGIES: Dict[str, type] = {
    FIFOStrategy.name: FIFOStrategy,
    LRUStrategy.name: LRUStrategy,
    OptimalStrategy.name: OptimalStrategy,
}


# -----------------------------
# Validation
# -----------------------------
def validate_policy(policy) -> str:
    if policy not in STRATEGIES:
        raise InvalidInputError(
            f"Unknown replacement policy {policy!r}; expected one of {', '.join(STRATEGIES)}"
        )
    return policy


def validate_references(references) -> Tuple[Hashable, ...]:
    if isinstance(references, (str, bytes)) or references is None:
        raise InvalidInputError("Reference string must be a sequence of page identifiers")
    pages = tuple(references)
    if not pages:
        raise InvalidInputError("Reference string must contain at least one page")
    if any(p is None for p in pages):
        raise InvalidInputError("Reference string contains an empty page identifier")
    for p in pages:
        try:
            hash(p)
        except TypeError:
            raise InvalidInputError(f"Page identifier {p!r} is not hashable") from None
    return pages


def validate_capacity(capacity) -> int:
    if isinstance(capacity, bool):
        raise InvalidInputError(f"Frame count must be an integer, got {capacity!r}")
    try:
        capacity = operator.index(capacity)
    except TypeError:
        raise InvalidInputError(f"Frame count must be an integer, got {capacity!r}") from None
    if capacity <= 0:
        raise InvalidInputError(f"Frame count must be positive, got {capacity}")
    return capacity


# =============================================================================
# SIMULATION
# =============================================================================

def simulate(policy: str, references: Sequence[Hashable], capacity: int) -> SimulationResult:
    """
    Run a reference string through ``capacity`` frames under ``policy``.

    Each reference is either a hit (already resident) or a fault. A fault
    fills a free frame while one exists, otherwise the policy picks a
    victim. Every step stores its own copy of the frame contents.

    Args:
        policy (str): One of ``POLICY_ORDER``
        references (Sequence): Page identifiers, non-empty
        capacity (int): Number of frames, positive

    Returns:
        SimulationResult: Counters plus one StepRecord per reference

    Raises:
        InvalidInputError: If any argument is malformed
    """
    policy = validate_policy(policy)
    pages = validate_references(references)
    capacity = validate_capacity(capacity)

    strategy = STRATEGIES[policy](pages, capacity)
    frames: List[Hashable] = []
    hits = 0
    faults = 0
    steps = []

    for position, page in enumerate(pages):
        evicted = None

        if page in frames:
            # ----- PAGE HIT -----
            hits += 1
            event = HIT
            strategy.on_hit(frames, page, position)
            slot = frames.index(page)
        else:
            # ----- PAGE FAULT -----
            faults += 1
            event = FAULT
            if len(frames) < capacity:
                frames.append(page)
                slot = len(frames) - 1
            else:
                slot, evicted = strategy.replace(frames, page, position)

        steps.append(StepRecord(page, event, tuple(frames), slot, evicted))

    return SimulationResult(policy, capacity, hits, faults, tuple(steps))
