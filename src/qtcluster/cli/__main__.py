"""Command-line entry point for qtcluster."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from qtcluster.cli.schema_validation import SchemaValidationError, SchemaValidator
from qtcluster.clustering import (
    QTClusteringError,
    QTClusteringParameters,
    QTClusteringResult,
    cluster_points,
)
from qtcluster.data import (
    MissingColumnsError,
    generate_points,
    load_points,
    points_from_frame,
    points_to_frame,
)
from qtcluster.data.generate import DEFAULT_MAX_X, DEFAULT_MAX_Y, DEFAULT_POINT_COUNT
from qtcluster.render import build_render_payload, render_html, render_svg, write_html, write_json, write_svg


logger = logging.getLogger("qtcluster.cli")


class QTClusterCliError(RuntimeError):
    """Raised when CLI arguments cannot be satisfied."""


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_SCHEMA_VALIDATOR = SchemaValidator()


def _get_package_version() -> str:
    try:
        return metadata.version("qtcluster")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qtcluster",
        description="Quality Threshold clustering of 2D integer points",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    version = _get_package_version()
    parser.add_argument(
        "--version",
        action="store_true",
        help=f"Show the installed qtcluster version ({version})",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity written to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    generate = subparsers.add_parser(
        "generate",
        help="Generate uniformly random integer points",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    generate.add_argument(
        "--output",
        required=True,
        help="Destination for generated points (CSV or JSON lines)",
    )
    generate.add_argument(
        "--count",
        type=int,
        default=DEFAULT_POINT_COUNT,
        help="Number of points to generate",
    )
    generate.add_argument(
        "--max-x",
        type=int,
        default=DEFAULT_MAX_X,
        help="Exclusive upper bound for X coordinates",
    )
    generate.add_argument(
        "--max-y",
        type=int,
        default=DEFAULT_MAX_Y,
        help="Exclusive upper bound for Y coordinates",
    )
    generate.add_argument(
        "--seed",
        type=int,
        help="Seed for the random generator; omit for a fresh draw",
    )
    generate.set_defaults(handler=_handle_generate)

    cluster = subparsers.add_parser(
        "cluster",
        help="Cluster a points dataset with the Quality Threshold algorithm",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cluster.add_argument(
        "--points",
        required=True,
        help="Path to the points dataset (CSV or JSON) with X and Y columns",
    )
    cluster.add_argument(
        "--max-diameter",
        required=True,
        type=float,
        help="Largest allowed distance between any two points of a cluster",
    )
    cluster.add_argument(
        "--output",
        required=True,
        help="Destination for the cluster table (CSV or JSON lines)",
    )
    cluster.add_argument(
        "--assignments",
        help="Optional path to persist point-to-cluster assignments (CSV or JSON lines)",
    )
    cluster.add_argument(
        "--metrics",
        help="Optional path to persist clustering metrics (JSON)",
    )
    cluster.add_argument(
        "--trace-out",
        help="Optional path for per-round trace records",
    )
    cluster.add_argument(
        "--trace-format",
        choices=["jsonl", "csv"],
        default="jsonl",
        help="Format used when writing --trace-out",
    )
    cluster.add_argument(
        "--render",
        help="Optional SVG, HTML or JSON render of the clusters (chosen by suffix)",
    )
    cluster.add_argument(
        "--id-prefix",
        default="cluster",
        help="Prefix for generated cluster identifiers",
    )
    cluster.set_defaults(handler=_handle_cluster)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if getattr(args, "version", False):
        print(f"qtcluster {_get_package_version()}")
        raise SystemExit(0)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except QTClusterCliError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(f"Error: {exc}") from exc


def _handle_generate(args: argparse.Namespace) -> None:
    try:
        points = generate_points(args.count, max_x=args.max_x, max_y=args.max_y, seed=args.seed)
    except ValueError as exc:
        raise QTClusterCliError(str(exc)) from exc

    path = Path(args.output)
    _write_table(points_to_frame(points), path)
    logger.info("Wrote %d generated points to %s", len(points), path)


def _handle_cluster(args: argparse.Namespace) -> None:
    frame = _load_points_frame(args.points)
    try:
        points = points_from_frame(frame)
        params = QTClusteringParameters(max_diameter=args.max_diameter, id_prefix=args.id_prefix)
        result = cluster_points(points, params)
    except (QTClusteringError, ValueError) as exc:
        raise QTClusterCliError(str(exc)) from exc

    clusters_frame = result.to_frame()
    _validate_frame("cluster", clusters_frame, string_fields=("cluster_id",))
    _write_table(clusters_frame, Path(args.output))
    logger.info("Wrote %d clusters to %s", len(clusters_frame), args.output)

    if args.assignments:
        assignments = result.assignments_frame()
        _validate_frame("assignment", assignments, string_fields=("cluster_id",))
        _write_table(assignments, Path(args.assignments))

    if args.metrics:
        _write_json(dict(result.metrics), Path(args.metrics))

    if args.trace_out:
        records = result.to_trace()
        try:
            _SCHEMA_VALIDATOR.validate_records("trace", records)
        except SchemaValidationError as exc:
            raise QTClusterCliError(f"Trace output failed schema validation: {exc}") from exc
        _write_trace(records, Path(args.trace_out), format_hint=args.trace_format)

    if args.render:
        _write_render(result, Path(args.render))


def _load_points_frame(location: str) -> pd.DataFrame:
    try:
        return load_points(location)
    except FileNotFoundError as exc:
        raise QTClusterCliError(f"Points file '{location}' was not found") from exc
    except (MissingColumnsError, ValueError) as exc:
        raise QTClusterCliError(str(exc)) from exc


def _validate_frame(schema: str, frame: pd.DataFrame, *, string_fields: Sequence[str]) -> None:
    try:
        _SCHEMA_VALIDATOR.validate_frame(schema, frame, string_fields=string_fields)
    except SchemaValidationError as exc:
        raise QTClusterCliError(f"{schema.title()} output failed schema validation: {exc}") from exc


def _write_table(frame: pd.DataFrame, path: Path) -> None:
    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if path.suffix.lower() in {".json", ".jsonl", ".ndjson"}:
            frame.to_json(path, orient="records", lines=True)
        else:
            frame.to_csv(path, index=False)
    except OSError as exc:
        raise QTClusterCliError(f"Failed to write output to '{path}': {exc}") from exc


def _write_json(data: dict[str, object], path: Path) -> None:
    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except OSError as exc:
        raise QTClusterCliError(f"Failed to write JSON output to '{path}': {exc}") from exc


def _write_trace(
    records: Iterable[dict[str, object]],
    path: Path,
    *,
    format_hint: str,
) -> None:
    materialised = list(records)
    if not materialised:
        return

    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        if format_hint == "csv":
            pd.DataFrame.from_records(materialised).to_csv(path, index=False)
        else:
            with path.open("w", encoding="utf-8") as handle:
                for record in materialised:
                    handle.write(json.dumps(record, sort_keys=True) + "\n")
    except OSError as exc:
        raise QTClusterCliError(f"Failed to write trace output to '{path}': {exc}") from exc


def _write_render(result: QTClusteringResult, path: Path) -> None:
    suffix = path.suffix.lower()
    try:
        if suffix == ".svg":
            written = write_svg(render_svg(result.lookup), path)
        elif suffix in {".html", ".htm"}:
            written = write_html(render_html(result.lookup), path.with_suffix(".html"))
        elif suffix == ".json":
            written = write_json(build_render_payload(result.lookup), path)
        else:
            raise QTClusterCliError(f"Unsupported render format '{suffix}'; use .svg, .html or .json")
    except (OSError, ValueError) as exc:
        raise QTClusterCliError(f"Failed to write render to '{path}': {exc}") from exc
    logger.info("Wrote render to %s", written)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
