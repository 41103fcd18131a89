"""Selection of a runner's latest personal-best.

A run without a verification timestamp ranks above every verified run,
so a freshly submitted (still unverified) run always wins. Verified runs
rank by verification time. Remaining ties fall back to the run id so the
result does not depend on the order the API lists runs in.
"""

from collections.abc import Iterable
from datetime import datetime
from functools import reduce

from .models import RunObservation


def _rank(run: RunObservation) -> tuple[bool, datetime | None, str]:
    return (run.verified_at is None, run.verified_at, run.run_id)


def supersedes(candidate: RunObservation, held: RunObservation) -> bool:
    """Return True if `candidate` should replace the currently held run."""
    held_rank = _rank(held)
    candidate_rank = _rank(candidate)
    if candidate_rank[0] != held_rank[0]:
        return candidate_rank[0]
    if candidate_rank[1] != held_rank[1]:
        # Both verified here; unverified pairs have equal (None) timestamps.
        return candidate_rank[1] > held_rank[1]  # type: ignore[operator]
    return candidate_rank[2] > held_rank[2]


def select_latest_run(runs: Iterable[RunObservation]) -> RunObservation | None:
    """Fold personal-bests down to the latest one.

    Returns:
        The latest run, or None when `runs` is empty.
    """
    return reduce(
        lambda held, candidate: candidate
        if held is None or supersedes(candidate, held)
        else held,
        runs,
        None,
    )
