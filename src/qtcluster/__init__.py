"""Quality Threshold clustering of 2D integer points."""

from .clustering import (
    Cluster,
    ClusterLookup,
    ClusteringCancelled,
    QTClusteringError,
    QTClusteringParameters,
    QTClusteringResult,
    cluster_points,
    get_clusters,
)
from .geometry import Point, distance_squared

__all__ = [
    "Cluster",
    "ClusterLookup",
    "ClusteringCancelled",
    "QTClusteringError",
    "QTClusteringParameters",
    "QTClusteringResult",
    "cluster_points",
    "get_clusters",
    "Point",
    "distance_squared",
]
