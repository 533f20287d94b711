"""JSON payload describing a rendered clustering."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..clustering import ClusterLookup
from ..geometry import Point
from .palette import DEFAULT_PALETTE_SEED, REPRESENTATIVE_COLOR, assign_colors


def build_render_payload(
    lookup: ClusterLookup,
    *,
    colors: Mapping[Point, str] | None = None,
    seed: int = DEFAULT_PALETTE_SEED,
) -> Dict[str, Any]:
    """Describe each cluster with its colour, representative and members."""

    colors = colors if colors is not None else assign_colors(lookup, seed=seed)
    return {
        "representative_color": REPRESENTATIVE_COLOR,
        "clusters": [
            {
                "cluster_id": cluster.cluster_id,
                "color": colors[cluster.representative],
                "representative": list(cluster.representative.as_tuple()),
                "members": [list(point.as_tuple()) for point in cluster.members],
            }
            for cluster in lookup
        ],
    }


__all__ = ["build_render_payload"]
