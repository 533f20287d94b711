"""Regression scenarios for Quality Threshold clustering.

Each scenario directory holds ``points.csv`` (the input, in order),
``expected_clusters.csv`` (the cluster table a reference run produces) and
``scenario.json`` with the ``max_diameter`` used for that run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable

_FIXTURES_ROOT = Path(__file__).resolve().parent


def available_fixtures() -> list[str]:
    """Return the names of the fixture scenarios that ship with the package."""

    return sorted(entry.name for entry in _FIXTURES_ROOT.iterdir() if (entry / "scenario.json").is_file())


def fixture_path(name: str, dataset: str) -> Path:
    """Return the absolute path to a fixture dataset.

    Parameters
    ----------
    name:
        Name of the fixture scenario (e.g., ``"line_triplet"``).
    dataset:
        Dataset to load from the fixture directory. The ``.csv`` suffix is
        optional.
    """

    normalised = dataset if dataset.endswith(".csv") else f"{dataset}.csv"
    path = _FIXTURES_ROOT / name / normalised
    if not path.exists():
        available = ", ".join(available_fixtures())
        raise FileNotFoundError(
            f"Dataset '{dataset}' not found for fixture '{name}'. Available fixtures: {available}"
        )
    return path


def load_scenario(name: str) -> Dict[str, Any]:
    """Return the run settings recorded for ``name``."""

    path = _FIXTURES_ROOT / name / "scenario.json"
    if not path.is_file():
        available = ", ".join(available_fixtures())
        raise FileNotFoundError(f"Fixture '{name}' not found. Available fixtures: {available}")
    return json.loads(path.read_text(encoding="utf-8"))


def iter_fixture_datasets(name: str) -> Iterable[Path]:
    """Yield all CSV datasets available for ``name``."""

    directory = _FIXTURES_ROOT / name
    if not directory.is_dir():
        available = ", ".join(available_fixtures())
        raise FileNotFoundError(
            f"Fixture '{name}' not found. Available fixtures: {available}"
        )
    yield from sorted(directory.glob("*.csv"))


__all__ = ["available_fixtures", "fixture_path", "iter_fixture_datasets", "load_scenario"]
