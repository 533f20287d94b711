"""Owned, order-preserving pool of points that are still unclustered."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from ..geometry import Point, to_coordinate_array


class WorkingSet:
    """Copy of the caller's points that shrinks as clusters are extracted.

    The set keeps three aligned views: the points themselves, their ``int64``
    coordinates and the position each point had in the original input. The
    only mutation is :meth:`remove`, a stable compaction, so positional order
    of the remaining points never changes between rounds.
    """

    __slots__ = ("_points", "_coords", "_sources")

    def __init__(self, points: Iterable[Point]) -> None:
        self._points: list[Point] = list(points)
        self._coords = to_coordinate_array(self._points)
        self._sources = np.arange(len(self._points), dtype=np.intp)

    def __len__(self) -> int:
        return len(self._points)

    def __bool__(self) -> bool:
        return bool(self._points)

    @property
    def points(self) -> tuple[Point, ...]:
        return tuple(self._points)

    @property
    def coords(self) -> np.ndarray:
        return self._coords

    @property
    def source_indices(self) -> np.ndarray:
        return self._sources

    def take(self, indices: Sequence[int]) -> tuple[tuple[Point, ...], tuple[int, ...]]:
        """Return the points at ``indices`` with their original input positions."""

        points = tuple(self._points[index] for index in indices)
        sources = tuple(int(self._sources[index]) for index in indices)
        return points, sources

    def remove(self, indices: Iterable[int]) -> None:
        """Drop the points at ``indices`` keeping the rest in their relative order."""

        keep = np.ones(len(self._points), dtype=bool)
        keep[np.asarray(list(indices), dtype=np.intp)] = False
        self._points = [point for point, kept in zip(self._points, keep) if kept]
        self._coords = self._coords[keep]
        self._sources = self._sources[keep]


__all__ = ["WorkingSet"]
