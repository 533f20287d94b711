"""Utilities for loading point datasets and converting them to points."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd

from ..geometry import Point
from .schema import POINTS_SCHEMA, DatasetSchema

__all__ = [
    "MissingColumnsError",
    "load_points",
    "points_from_frame",
    "points_to_frame",
]


class MissingColumnsError(ValueError):
    """Raised when a dataset is missing required columns."""

    def __init__(self, schema: DatasetSchema, missing: list[str]):
        message = (
            f"{schema.name.title()} data is missing required columns: {', '.join(missing)}. "
            f"Expected columns include: {', '.join(schema.required_columns)}."
        )
        super().__init__(message)
        self.schema = schema
        self.missing = missing


def load_points(path: str | Path) -> pd.DataFrame:
    """Load a points dataset from CSV or JSON and validate required columns."""

    frame = _load_and_validate(path, POINTS_SCHEMA)
    return frame.reset_index(drop=True)


def points_from_frame(frame: pd.DataFrame) -> list[Point]:
    """Convert the ``X``/``Y`` columns of ``frame`` into points in row order."""

    missing = POINTS_SCHEMA.missing_required(frame.columns)
    if missing:
        raise MissingColumnsError(POINTS_SCHEMA, missing)
    if frame.empty:
        return []

    coords = frame[["X", "Y"]].to_numpy(dtype=float)
    invalid_rows = np.flatnonzero(~np.isfinite(coords).all(axis=1))
    if invalid_rows.size:
        raise ValueError(f"Points data has missing coordinates in rows: {_format_rows(invalid_rows)}")
    fractional_rows = np.flatnonzero((coords != np.round(coords)).any(axis=1))
    if fractional_rows.size:
        raise ValueError(f"Points data has non-integer coordinates in rows: {_format_rows(fractional_rows)}")

    return [Point(int(x), int(y)) for x, y in coords]


def points_to_frame(points: Iterable[Point]) -> pd.DataFrame:
    """Return ``points`` as an ``X``/``Y`` dataframe."""

    rows = [(point.x, point.y) for point in points]
    return pd.DataFrame(rows, columns=["X", "Y"], dtype="int64")


def _format_rows(rows: np.ndarray, limit: int = 10) -> str:
    shown = ", ".join(str(int(row)) for row in rows[:limit])
    if rows.size > limit:
        shown += f", ... ({rows.size} total)"
    return shown


def _load_and_validate(path_like: str | Path, schema: DatasetSchema) -> pd.DataFrame:
    path = Path(path_like)
    frame = _read_structured_file(path, schema)
    missing = schema.missing_required(frame.columns)
    if missing:
        raise MissingColumnsError(schema, missing)
    return schema.coerce_dtypes(frame)


def _read_structured_file(path: Path, schema: DatasetSchema) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype=schema.dtype_for_read())
    if suffix in {".json", ".jsonl", ".ndjson"}:
        return _read_json(path)
    raise ValueError(f"Unsupported file type '{suffix}' for {schema.name} data")


def _read_json(path: Path) -> pd.DataFrame:
    raw = path.read_text(encoding="utf-8").strip()
    if not raw:
        return pd.DataFrame()
    if raw[0] == "{":
        return pd.read_json(path, lines=True)
    return pd.read_json(path)
