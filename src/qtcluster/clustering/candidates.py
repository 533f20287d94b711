"""Forward-scan candidate construction for Quality Threshold clustering."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..geometry import distances_squared_from


_UNREACHABLE = np.iinfo(np.int64).max


@dataclass(frozen=True, slots=True)
class Candidate:
    """Tentative cluster grown from a single anchor during one scan."""

    number: int
    indices: tuple[int, ...]

    @property
    def anchor(self) -> int:
        return self.indices[0]

    @property
    def size(self) -> int:
        return len(self.indices)


def build_candidates(coords: np.ndarray, max_diameter_squared: float) -> list[Candidate]:
    """Partition every row of ``coords`` into complete-linkage candidates.

    Rows are scanned in order. Each row that is not yet allocated anchors a new
    candidate which then absorbs, one at a time, the unallocated later row
    whose worst distance to every current member is smallest (lowest index on
    ties), for as long as that worst distance stays within
    ``max_diameter_squared``. ``worst`` accumulates the maximum distance seen
    from each row to any member, which is what makes the linkage complete.
    """

    n_points = coords.shape[0]
    owner = np.full(n_points, -1, dtype=np.intp)
    allocated = 0
    candidates: list[Candidate] = []

    for anchor in range(n_points):
        if allocated == n_points:
            break
        if owner[anchor] >= 0:
            continue

        number = len(candidates)
        owner[anchor] = number
        allocated += 1
        members = [anchor]

        forward = coords[anchor + 1 :]
        worst = np.zeros(forward.shape[0], dtype=np.int64)
        latest = anchor

        while allocated < n_points:
            free = owner[anchor + 1 :] < 0
            if not free.any():
                break

            np.maximum(worst, distances_squared_from(forward, coords[latest]), out=worst)
            masked = np.where(free, worst, _UNREACHABLE)
            offset = int(np.argmin(masked))
            if masked[offset] > max_diameter_squared:
                break

            latest = anchor + 1 + offset
            owner[latest] = number
            allocated += 1
            members.append(latest)

        candidates.append(Candidate(number=number, indices=tuple(members)))

    return candidates


__all__ = ["Candidate", "build_candidates"]
