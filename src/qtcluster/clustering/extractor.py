"""Quality Threshold cluster extraction over 2D integer points."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from numbers import Real
from types import MappingProxyType
from typing import Callable, Dict, Mapping

import pandas as pd

from ..explain import TraceRecord, hash_payload
from ..geometry import Point, bounding_box_midpoint, diameter_squared
from .rounds import run_round
from .working_set import WorkingSet


logger = logging.getLogger(__name__)

MetricValue = float | int | str


class QTClusteringError(RuntimeError):
    """Raised when Quality Threshold clustering cannot be performed."""


class ClusteringCancelled(QTClusteringError):
    """Raised when a caller-supplied cancellation check stops a run between rounds."""


@dataclass(frozen=True, slots=True)
class QTClusteringParameters:
    """Configuration for a Quality Threshold clustering run."""

    max_diameter: float
    id_prefix: str = "cluster"

    def __post_init__(self) -> None:
        value = self.max_diameter
        if isinstance(value, bool) or not isinstance(value, Real):
            raise QTClusteringError(f"max_diameter must be a real number; received {value!r}")
        if math.isnan(value):
            raise QTClusteringError("max_diameter must not be NaN")
        if value < 0:
            raise QTClusteringError(f"max_diameter must be non-negative; received {value}")
        if not self.id_prefix:
            raise QTClusteringError("id_prefix must be a non-empty string")

    @property
    def max_diameter_squared(self) -> float:
        return float(self.max_diameter) * float(self.max_diameter)


@dataclass(frozen=True, slots=True)
class Cluster:
    """A finalised cluster keyed by the midpoint of its bounding box."""

    cluster_id: str
    round: int
    representative: Point
    members: tuple[Point, ...]
    source_indices: tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def diameter_squared(self) -> int:
        return diameter_squared(self.members)

    def to_record(self) -> Dict[str, object]:
        """Return a JSON-serialisable representation of the cluster."""

        return {
            "cluster_id": self.cluster_id,
            "round": self.round,
            "representative_x": self.representative.x,
            "representative_y": self.representative.y,
            "member_count": self.size,
            "diameter_squared": self.diameter_squared,
        }


class ClusterLookup:
    """Multi-map from representative point to member lists.

    Iteration yields clusters in extraction order. Two clusters may share a
    representative; indexing by that point returns both member tuples.
    """

    __slots__ = ("_clusters",)

    def __init__(self, clusters: Iterable[Cluster] = ()) -> None:
        self._clusters = tuple(clusters)

    def __iter__(self) -> Iterator[Cluster]:
        return iter(self._clusters)

    def __len__(self) -> int:
        return len(self._clusters)

    def __bool__(self) -> bool:
        return bool(self._clusters)

    def __contains__(self, representative: object) -> bool:
        return any(cluster.representative == representative for cluster in self._clusters)

    def __getitem__(self, representative: Point) -> tuple[tuple[Point, ...], ...]:
        return tuple(
            cluster.members for cluster in self._clusters if cluster.representative == representative
        )

    def __repr__(self) -> str:
        return f"ClusterLookup({len(self._clusters)} clusters)"

    @property
    def clusters(self) -> tuple[Cluster, ...]:
        return self._clusters

    def keys(self) -> tuple[Point, ...]:
        """Distinct representatives in first-seen order."""

        return tuple(dict.fromkeys(cluster.representative for cluster in self._clusters))

    def groups(self) -> Dict[Point, list[tuple[Point, ...]]]:
        grouped: Dict[Point, list[tuple[Point, ...]]] = {}
        for cluster in self._clusters:
            grouped.setdefault(cluster.representative, []).append(cluster.members)
        return grouped

    def items(self) -> list[tuple[Point, tuple[Point, ...]]]:
        return [(cluster.representative, cluster.members) for cluster in self._clusters]


@dataclass(frozen=True, slots=True)
class RoundSummary:
    """What happened in one extraction round."""

    round: int
    cluster_id: str
    working_size: int
    candidate_sizes: tuple[int, ...]
    winner_number: int
    representative: Point

    @property
    def winner_size(self) -> int:
        return self.candidate_sizes[self.winner_number]

    def to_trace(self) -> Dict[str, object]:
        record = TraceRecord(
            cluster_id=self.cluster_id,
            stage="round",
            metadata={"round": self.round},
            working_set={"size": self.working_size},
            candidates={
                "count": len(self.candidate_sizes),
                "largest": max(self.candidate_sizes),
                "sizes": ",".join(str(size) for size in self.candidate_sizes),
            },
            selection={
                "winner": self.winner_number,
                "size": self.winner_size,
                "representative_x": self.representative.x,
                "representative_y": self.representative.y,
            },
        )
        return record.to_dict()


@dataclass(frozen=True, slots=True)
class QTClusteringResult:
    """Structured result of a Quality Threshold clustering run."""

    lookup: ClusterLookup
    rounds: tuple[RoundSummary, ...]
    total_points: int
    parameters: QTClusteringParameters
    metrics: Mapping[str, MetricValue] = field(default_factory=dict)

    @property
    def clusters(self) -> tuple[Cluster, ...]:
        return self.lookup.clusters

    @property
    def assignments(self) -> pd.Series:
        """Cluster identifier for every position of the original input."""

        labels: list[str | None] = [None] * self.total_points
        for cluster in self.clusters:
            for source in cluster.source_indices:
                labels[source] = cluster.cluster_id
        return pd.Series(
            labels,
            index=pd.RangeIndex(self.total_points, name="point_index"),
            name="cluster_id",
            dtype="object",
        )

    def to_frame(self) -> pd.DataFrame:
        """Return one row per cluster."""

        columns = [
            "cluster_id",
            "round",
            "representative_x",
            "representative_y",
            "member_count",
            "diameter_squared",
        ]
        if not self.clusters:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame.from_records([cluster.to_record() for cluster in self.clusters], columns=columns)

    def assignments_frame(self) -> pd.DataFrame:
        """Return one row per input point, in input order."""

        columns = ["point_index", "x", "y", "cluster_id", "member_order"]
        rows: list[Dict[str, object]] = []
        for cluster in self.clusters:
            for order, (point, source) in enumerate(zip(cluster.members, cluster.source_indices)):
                rows.append(
                    {
                        "point_index": source,
                        "x": point.x,
                        "y": point.y,
                        "cluster_id": cluster.cluster_id,
                        "member_order": order,
                    }
                )
        if not rows:
            return pd.DataFrame(columns=columns)
        frame = pd.DataFrame.from_records(rows, columns=columns)
        return frame.sort_values("point_index", kind="stable").reset_index(drop=True)

    def to_trace(self) -> list[Dict[str, object]]:
        return [summary.to_trace() for summary in self.rounds]

    def fingerprint(self) -> str:
        """Stable digest of the partition, representatives and member order."""

        return hash_payload(
            [
                [cluster.representative.as_tuple(), [point.as_tuple() for point in cluster.members]]
                for cluster in self.clusters
            ]
        )


def get_clusters(points: Iterable[Point | Sequence[int]] | None, max_diameter: float) -> ClusterLookup:
    """Cluster ``points`` so that no cluster's diameter exceeds ``max_diameter``."""

    return cluster_points(points, QTClusteringParameters(max_diameter=max_diameter)).lookup


def cluster_points(
    points: Iterable[Point | Sequence[int]] | None,
    params: QTClusteringParameters,
    *,
    should_cancel: Callable[[], bool] | None = None,
) -> QTClusteringResult:
    """Run Quality Threshold clustering and return clusters with round diagnostics.

    Each round partitions every remaining point into candidates, keeps the
    largest (earliest formed on ties) and throws the others away. The loop
    ends when no point is left, so a run takes at most ``len(points)`` rounds.
    """

    if points is None:
        raise QTClusteringError("points must be provided; pass an empty sequence for no points")

    working_set = WorkingSet(_coerce_points(points))
    total_points = len(working_set)
    threshold = params.max_diameter_squared

    clusters: list[Cluster] = []
    rounds: list[RoundSummary] = []

    while working_set:
        if should_cancel is not None and should_cancel():
            raise ClusteringCancelled(
                f"Clustering cancelled after {len(clusters)} rounds with {len(working_set)} points remaining"
            )

        ordinal = len(clusters) + 1
        outcome = run_round(working_set, threshold)
        cluster_id = f"{params.id_prefix}-{ordinal:03d}"
        representative = bounding_box_midpoint(outcome.points)

        clusters.append(
            Cluster(
                cluster_id=cluster_id,
                round=ordinal,
                representative=representative,
                members=outcome.points,
                source_indices=outcome.source_indices,
            )
        )
        rounds.append(
            RoundSummary(
                round=ordinal,
                cluster_id=cluster_id,
                working_size=outcome.working_size,
                candidate_sizes=outcome.candidate_sizes,
                winner_number=outcome.winner_number,
                representative=representative,
            )
        )
        logger.debug(
            "Round %d: %d candidates over %d points, kept %s with %d members",
            ordinal,
            len(outcome.candidate_sizes),
            outcome.working_size,
            cluster_id,
            len(outcome.points),
        )

    metrics = _build_metrics(clusters, total_points, params)
    logger.info(
        "Clustered %d points into %d clusters (max_diameter=%s)",
        total_points,
        len(clusters),
        params.max_diameter,
    )

    return QTClusteringResult(
        lookup=ClusterLookup(clusters),
        rounds=tuple(rounds),
        total_points=total_points,
        parameters=params,
        metrics=MappingProxyType(metrics),
    )


def _coerce_points(points: Iterable[Point | Sequence[int]]) -> list[Point]:
    if isinstance(points, (str, bytes)) or not isinstance(points, Iterable):
        raise QTClusteringError(f"points must be an iterable of points; received {type(points)!r}")

    coerced: list[Point] = []
    for index, value in enumerate(points):
        try:
            coerced.append(Point.coerce(value))
        except (TypeError, ValueError) as exc:
            raise QTClusteringError(f"Invalid point at index {index}: {exc}") from exc
    return coerced


def _build_metrics(
    clusters: Sequence[Cluster],
    total_points: int,
    params: QTClusteringParameters,
) -> Dict[str, MetricValue]:
    sizes = [cluster.size for cluster in clusters]
    return {
        "max_diameter": float(params.max_diameter),
        "total_points": total_points,
        "num_clusters": len(clusters),
        "num_rounds": len(clusters),
        "singleton_clusters": sum(1 for size in sizes if size == 1),
        "largest_cluster": max(sizes, default=0),
        "mean_cluster_size": (total_points / len(clusters)) if clusters else 0.0,
    }


__all__ = [
    "Cluster",
    "ClusterLookup",
    "ClusteringCancelled",
    "QTClusteringError",
    "QTClusteringParameters",
    "QTClusteringResult",
    "RoundSummary",
    "cluster_points",
    "get_clusters",
]
