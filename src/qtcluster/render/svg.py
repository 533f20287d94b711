"""SVG and HTML rendering of clustered points."""

from __future__ import annotations

from html import escape
from typing import Mapping

from ..clustering import ClusterLookup
from ..geometry import Point
from .palette import DEFAULT_PALETTE_SEED, REPRESENTATIVE_COLOR, assign_colors

DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 400
DEFAULT_MARKER_SIZE = 10


def render_svg(
    lookup: ClusterLookup,
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    marker_size: int = DEFAULT_MARKER_SIZE,
    colors: Mapping[Point, str] | None = None,
    seed: int = DEFAULT_PALETTE_SEED,
) -> str:
    """Draw every member as a coloured dot and every representative as a red square.

    Markers are anchored at their point: a member dot is the circle inscribed in
    the ``marker_size`` square whose top-left corner is the point, and the
    representative fills that square.
    """

    if marker_size < 1:
        raise ValueError("marker_size must be at least 1")

    colors = colors if colors is not None else assign_colors(lookup, seed=seed)
    radius = marker_size / 2

    elements = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
    ]
    for representative, member_lists in lookup.groups().items():
        fill = colors[representative]
        elements.append(f'<g class="cluster" data-representative="{representative.x},{representative.y}">')
        for members in member_lists:
            for point in members:
                elements.append(
                    f'<circle cx="{_number(point.x + radius)}" cy="{_number(point.y + radius)}" '
                    f'r="{_number(radius)}" fill="{fill}"/>'
                )
        elements.append(
            f'<rect class="representative" x="{representative.x}" y="{representative.y}" '
            f'width="{marker_size}" height="{marker_size}" fill="{REPRESENTATIVE_COLOR}"/>'
        )
        elements.append("</g>")
    elements.append("</svg>")
    return "\n".join(elements)


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def render_html(
    lookup: ClusterLookup,
    *,
    title: str = "QT clusters",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    marker_size: int = DEFAULT_MARKER_SIZE,
    seed: int = DEFAULT_PALETTE_SEED,
) -> str:
    """Embed :func:`render_svg` output in a page with a per-cluster legend."""

    colors = assign_colors(lookup, seed=seed)
    svg = render_svg(
        lookup,
        width=width,
        height=height,
        marker_size=marker_size,
        colors=colors,
    )

    sections = [
        "<html><body>",
        f"<h1>{escape(title)}</h1>",
        f"<p>Clusters: {len(lookup)}</p>",
        svg,
        "<h2>Clusters</h2>",
        "<ul>",
    ]
    if lookup:
        for cluster in lookup:
            color = colors[cluster.representative]
            sections.append(
                f'<li style="color:{color}">{escape(cluster.cluster_id)}: '
                f"{cluster.size} points around ({cluster.representative.x}, {cluster.representative.y})</li>"
            )
    else:
        sections.append("<li>None</li>")
    sections.extend(["</ul>", "</body></html>"])
    return "".join(sections)


__all__ = [
    "DEFAULT_HEIGHT",
    "DEFAULT_MARKER_SIZE",
    "DEFAULT_WIDTH",
    "render_html",
    "render_svg",
]
