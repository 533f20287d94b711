"""Point sources: dataset loaders and random generation."""

from .generate import generate_points
from .loaders import MissingColumnsError, load_points, points_from_frame, points_to_frame
from .schema import POINTS_SCHEMA, DatasetSchema

__all__ = [
    "generate_points",
    "MissingColumnsError",
    "load_points",
    "points_from_frame",
    "points_to_frame",
    "POINTS_SCHEMA",
    "DatasetSchema",
]
