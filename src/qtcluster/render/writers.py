"""Writers for rendered cluster artefacts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Union


PathLike = Union[str, Path]
"""Supported path-like inputs accepted by render writers."""

RENDER_VERSION = "v1"
"""Version tag embedded in default render filenames."""

RENDER_BASENAME = f"qtcluster-render-{RENDER_VERSION}"
"""Base filename (without extension) used when a directory is targeted."""


def _resolve_target_path(target: PathLike, suffix: str) -> Path:
    """Resolve *target* to a file path carrying ``suffix``."""

    path = Path(target)

    if path.suffix:
        if path.suffix.lower() != suffix:
            raise ValueError(f"Render output '{path.name}' must use the '{suffix}' extension.")
        resolved = path
    else:
        if path.exists() and path.is_file():
            raise ValueError("Target path must be a directory or a file with an explicit extension.")
        resolved = path / f"{RENDER_BASENAME}{suffix}"

    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def write_svg(svg: str, target: PathLike) -> Path:
    """Persist SVG markup to disk."""

    path = _resolve_target_path(target, ".svg")
    path.write_text(svg, encoding="utf-8")
    return path


def write_html(html: str, target: PathLike) -> Path:
    """Persist an HTML render to disk."""

    path = _resolve_target_path(target, ".html")
    path.write_text(html, encoding="utf-8")
    return path


def write_json(payload: Mapping[str, Any], target: PathLike) -> Path:
    """Serialize a render payload (clusters and colours) to JSON."""

    path = _resolve_target_path(target, ".json")
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)
        handle.write("\n")
    return path


__all__ = [
    "PathLike",
    "RENDER_BASENAME",
    "RENDER_VERSION",
    "write_html",
    "write_json",
    "write_svg",
]
