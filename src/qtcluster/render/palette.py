"""Per-cluster display colours."""

from __future__ import annotations

from typing import Dict

import numpy as np

from ..clustering import ClusterLookup
from ..geometry import Point

DEFAULT_PALETTE_SEED = 100
REPRESENTATIVE_COLOR = "#ff0000"

# Half-open [low, high) channel ranges.
_RED_RANGE = (70, 200)
_GREEN_RANGE = (100, 225)
_BLUE_RANGE = (100, 230)


def assign_colors(lookup: ClusterLookup, *, seed: int = DEFAULT_PALETTE_SEED) -> Dict[Point, str]:
    """Return one ``#rrggbb`` colour per distinct representative, in key order."""

    rng = np.random.default_rng(seed)
    colors: Dict[Point, str] = {}
    for representative in lookup.keys():
        red = int(rng.integers(*_RED_RANGE))
        green = int(rng.integers(*_GREEN_RANGE))
        blue = int(rng.integers(*_BLUE_RANGE))
        colors[representative] = f"#{red:02x}{green:02x}{blue:02x}"
    return colors


__all__ = ["DEFAULT_PALETTE_SEED", "REPRESENTATIVE_COLOR", "assign_colors"]
