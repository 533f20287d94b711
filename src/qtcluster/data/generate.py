"""Seeded random point generation for demos and stress tests."""

from __future__ import annotations

import numpy as np

from ..geometry import Point

DEFAULT_POINT_COUNT = 200
DEFAULT_MAX_X = 600
DEFAULT_MAX_Y = 400


def generate_points(
    count: int = DEFAULT_POINT_COUNT,
    *,
    max_x: int = DEFAULT_MAX_X,
    max_y: int = DEFAULT_MAX_Y,
    seed: int | None = None,
) -> list[Point]:
    """Draw ``count`` uniform integer points in ``[0, max_x) x [0, max_y)``."""

    if count < 0:
        raise ValueError(f"count must be non-negative; received {count}")
    if max_x < 1 or max_y < 1:
        raise ValueError("max_x and max_y must be at least 1")

    rng = np.random.default_rng(seed)
    xs = rng.integers(0, max_x, size=count)
    ys = rng.integers(0, max_y, size=count)
    return [Point(int(x), int(y)) for x, y in zip(xs, ys)]


__all__ = ["DEFAULT_MAX_X", "DEFAULT_MAX_Y", "DEFAULT_POINT_COUNT", "generate_points"]
