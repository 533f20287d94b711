"""Integer point primitives and squared Euclidean distances."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral, Real
from typing import Iterable, Sequence

import numpy as np


COORDINATE_LIMIT = 2**30 - 1
"""Largest absolute coordinate; keeps every squared distance inside int64."""


@dataclass(frozen=True, slots=True, order=True)
class Point:
    """Immutable 2D integer point with value equality."""

    x: int
    y: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _coerce_coordinate("x", self.x))
        object.__setattr__(self, "y", _coerce_coordinate("y", self.y))

    @classmethod
    def coerce(cls, value: Point | Sequence[int]) -> Point:
        """Return ``value`` as a :class:`Point`, accepting ``(x, y)`` pairs."""

        if isinstance(value, Point):
            return value
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise TypeError(f"Expected a Point or an (x, y) pair; received {type(value)!r}")
        if len(value) != 2:
            raise ValueError(f"Expected an (x, y) pair; received {len(value)} values")
        return cls(value[0], value[1])

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def __iter__(self):
        yield self.x
        yield self.y


def _coerce_coordinate(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Point coordinate '{name}' must be an integer, not bool")
    if isinstance(value, Integral):
        coordinate = int(value)
    elif isinstance(value, Real) and float(value).is_integer():
        coordinate = int(value)
    else:
        raise TypeError(f"Point coordinate '{name}' must be an integer; received {value!r}")
    if abs(coordinate) > COORDINATE_LIMIT:
        raise ValueError(
            f"Point coordinate '{name}'={coordinate} exceeds the supported limit of ±{COORDINATE_LIMIT}"
        )
    return coordinate


def distance_squared(p1: Point, p2: Point) -> int:
    """Squared Euclidean distance between two points."""

    dx = p2.x - p1.x
    dy = p2.y - p1.y
    return dx * dx + dy * dy


def distances_squared_from(coords: np.ndarray, origin: np.ndarray) -> np.ndarray:
    """Squared distances from ``origin`` to every row of an ``(n, 2)`` array."""

    delta = coords - origin
    return np.einsum("ij,ij->i", delta, delta)


def to_coordinate_array(points: Iterable[Point]) -> np.ndarray:
    """Pack points into an ``(n, 2)`` ``int64`` array preserving order."""

    coords = np.array([(point.x, point.y) for point in points], dtype=np.int64)
    return coords.reshape(-1, 2)


def bounding_box(points: Sequence[Point]) -> tuple[int, int, int, int]:
    """Return ``(min_x, min_y, max_x, max_y)`` for a non-empty sequence."""

    if not points:
        raise ValueError("bounding_box requires at least one point")
    xs = [point.x for point in points]
    ys = [point.y for point in points]
    return min(xs), min(ys), max(xs), max(ys)


def bounding_box_midpoint(points: Sequence[Point]) -> Point:
    """Midpoint of the bounding box using truncating integer division."""

    min_x, min_y, max_x, max_y = bounding_box(points)
    return Point(min_x + (max_x - min_x) // 2, min_y + (max_y - min_y) // 2)


def diameter_squared(points: Sequence[Point]) -> int:
    """Largest pairwise squared distance within ``points`` (0 for fewer than two)."""

    if len(points) < 2:
        return 0
    coords = to_coordinate_array(points)
    delta = coords[:, None, :] - coords[None, :, :]
    return int((delta * delta).sum(axis=2).max())


__all__ = [
    "COORDINATE_LIMIT",
    "Point",
    "bounding_box",
    "bounding_box_midpoint",
    "diameter_squared",
    "distance_squared",
    "distances_squared_from",
    "to_coordinate_array",
]
