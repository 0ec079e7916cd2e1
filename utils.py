# utils.py

import random
import time
from typing import Callable, Iterator, List, NamedTuple, Optional, Sequence

from analysis import STALE
from engine import FAULT, HIT, InvalidInputError, SimulationResult, StepRecord

# Random workload shape
RANDOM_LENGTH = 20
RANDOM_PAGE_RANGE = 10
RANDOM_MIN_FRAMES = 3
RANDOM_MAX_FRAMES = 5

CELL_COLORS = {
    HIT: "#22c55e",
    FAULT: "#ef4444",
    STALE: "#cbd5e1",
}
EMPTY_COLOR = "#f8fafc"


def get_color(state: Optional[str]) -> str:
    """Return a fill color for a hit / fault / stale cell, or the empty color."""
    return CELL_COLORS.get(state, EMPTY_COLOR)


# -----------------------------
# Input parsing
# -----------------------------
def parse_reference_string(text: str) -> List[int]:
    """
    Parse "7, 0, 1, 2" into [7, 0, 1, 2].

    Blank tokens are skipped; anything else that is not an integer is an error.
    """
    if text is None or not text.strip():
        raise InvalidInputError("Please enter a page reference string")

    pages = []
    for token in text.split(","):
        token = token.strip()
        if token == "":
            continue
        try:
            pages.append(int(token))
        except ValueError:
            raise InvalidInputError(f"Invalid page number {token!r} in reference string") from None

    if not pages:
        raise InvalidInputError("The page reference string is invalid")
    return pages


def parse_frame_count(value) -> int:
    try:
        frames = int(str(value).strip())
    except ValueError:
        raise InvalidInputError(f"Frame count must be a whole number, got {value!r}") from None
    if frames <= 0:
        raise InvalidInputError("A positive number of frames is required")
    return frames


def random_workload(rng: Optional[random.Random] = None):
    """Return (reference string, frame count) for a quick demo run."""
    rng = rng or random.Random()
    pages = [rng.randrange(RANDOM_PAGE_RANGE) for _ in range(RANDOM_LENGTH)]
    frames = rng.randint(RANDOM_MIN_FRAMES, RANDOM_MAX_FRAMES)
    return pages, frames


# -----------------------------
# Event log
# -----------------------------
def describe_step(index: int, step: StepRecord) -> str:
    kind = "Hit" if step.event == HIT else "Fault"
    detail = f"Frame {step.slot}"
    if step.evicted is not None:
        detail += f", evicted {step.evicted}"
    return f"Step {index + 1}: Page {step.page} -> {kind} ({detail})"


def narrate(result: SimulationResult) -> List[str]:
    """Render a finished run as event log lines."""
    lines = [f"--- Starting {result.policy} Simulation ---"]
    lines.extend(describe_step(i, step) for i, step in enumerate(result.steps))
    lines.append("--- Simulation Complete ---")
    lines.append(f"Total Hits: {result.hits}, Total Faults: {result.faults}")
    return lines


def format_ratio(ratio: float) -> str:
    return f"{ratio * 100:.2f}%"


# -----------------------------
# Playback
# -----------------------------
class PlaybackFrame(NamedTuple):
    index: int
    step: StepRecord
    hits: int
    faults: int


def play_trace(steps: Sequence[StepRecord],
               speed: float = 1.0,
               sleep: Callable[[float], None] = time.sleep) -> Iterator[PlaybackFrame]:
    """
    Yield an already computed trace one step at a time, pausing between steps.

    ``speed`` is in steps per second. Running hit and fault counts are
    included so a caller can update its counters without re-counting.
    """
    if speed <= 0:
        raise InvalidInputError("Playback speed must be positive")

    hits = 0
    faults = 0
    for i, step in enumerate(steps):
        if step.event == HIT:
            hits += 1
        elif step.event == FAULT:
            faults += 1
        yield PlaybackFrame(i, step, hits, faults)
        if i < len(steps) - 1:
            sleep(1.0 / speed)
