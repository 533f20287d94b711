"""Quality Threshold clustering for 2D integer points."""

from .candidates import Candidate, build_candidates
from .extractor import (
    Cluster,
    ClusterLookup,
    ClusteringCancelled,
    QTClusteringError,
    QTClusteringParameters,
    QTClusteringResult,
    RoundSummary,
    cluster_points,
    get_clusters,
)
from .rounds import RoundOutcome, run_round, select_winner
from .working_set import WorkingSet

__all__ = [
    "Candidate",
    "build_candidates",
    "Cluster",
    "ClusterLookup",
    "ClusteringCancelled",
    "QTClusteringError",
    "QTClusteringParameters",
    "QTClusteringResult",
    "RoundSummary",
    "cluster_points",
    "get_clusters",
    "RoundOutcome",
    "run_round",
    "select_winner",
    "WorkingSet",
]
