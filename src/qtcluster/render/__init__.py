"""Rendering of clustering results as SVG, HTML and JSON."""

from .palette import DEFAULT_PALETTE_SEED, REPRESENTATIVE_COLOR, assign_colors
from .payload import build_render_payload
from .svg import render_html, render_svg
from .writers import RENDER_BASENAME, RENDER_VERSION, write_html, write_json, write_svg

__all__ = [
    "DEFAULT_PALETTE_SEED",
    "REPRESENTATIVE_COLOR",
    "assign_colors",
    "build_render_payload",
    "render_html",
    "render_svg",
    "RENDER_BASENAME",
    "RENDER_VERSION",
    "write_html",
    "write_json",
    "write_svg",
]
