"""Single extraction round: pick the largest candidate and consume it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..geometry import Point
from .candidates import Candidate, build_candidates
from .working_set import WorkingSet


@dataclass(frozen=True, slots=True)
class RoundOutcome:
    """Winning candidate of a round together with the sizes it competed against."""

    points: tuple[Point, ...]
    source_indices: tuple[int, ...]
    winner_number: int
    candidate_sizes: tuple[int, ...]
    working_size: int


def select_winner(candidates: Sequence[Candidate]) -> Candidate:
    """Return the largest candidate, preferring the earliest formed on ties."""

    if not candidates:
        raise ValueError("select_winner requires at least one candidate")
    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.size > best.size:
            best = candidate
    return best


def run_round(working_set: WorkingSet, max_diameter_squared: float) -> RoundOutcome:
    """Extract one cluster from ``working_set``; losing candidates are discarded."""

    working_size = len(working_set)
    candidates = build_candidates(working_set.coords, max_diameter_squared)
    winner = select_winner(candidates)
    points, sources = working_set.take(winner.indices)
    working_set.remove(winner.indices)
    return RoundOutcome(
        points=points,
        source_indices=sources,
        winner_number=winner.number,
        candidate_sizes=tuple(candidate.size for candidate in candidates),
        working_size=working_size,
    )


__all__ = ["RoundOutcome", "run_round", "select_winner"]
