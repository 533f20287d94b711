from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from qtcluster.cli.__main__ import build_parser, main
from qtcluster.fixtures import fixture_path, iter_fixture_datasets


def test_parser_accepts_version_flag() -> None:
    parser = build_parser()
    args = parser.parse_args(["--version"])
    assert args.version is True


def test_version_flag_reports_package_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        main(["--version"])
    captured = capsys.readouterr()
    assert captured.out.startswith("qtcluster ")


def test_cluster_help_lists_options(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        main(["cluster", "--help"])
    captured = capsys.readouterr()
    assert "--max-diameter" in captured.out
    assert "--render" in captured.out


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    main([])
    assert "generate" in capsys.readouterr().out


def test_generate_writes_points(tmp_path: Path) -> None:
    output = tmp_path / "points.csv"

    main(["generate", "--output", str(output), "--count", "25", "--seed", "3", "--max-x", "50", "--max-y", "40"])

    frame = pd.read_csv(output)
    assert list(frame.columns) == ["X", "Y"]
    assert len(frame) == 25
    assert frame["X"].between(0, 49).all()
    assert frame["Y"].between(0, 39).all()


def test_cluster_writes_all_artefacts(tmp_path: Path) -> None:
    points = fixture_path("larger_later", "points")
    output = tmp_path / "clusters.csv"
    assignments = tmp_path / "assignments.jsonl"
    metrics = tmp_path / "metrics.json"
    trace = tmp_path / "trace.csv"
    render = tmp_path / "render.html"

    main(
        [
            "cluster",
            "--points",
            str(points),
            "--max-diameter",
            "2",
            "--output",
            str(output),
            "--assignments",
            str(assignments),
            "--metrics",
            str(metrics),
            "--trace-out",
            str(trace),
            "--trace-format",
            "csv",
            "--render",
            str(render),
        ]
    )

    expected = pd.read_csv(fixture_path("larger_later", "expected_clusters"))
    pd.testing.assert_frame_equal(pd.read_csv(output), expected, check_dtype=False)

    assignment_frame = pd.read_json(assignments, lines=True)
    assert assignment_frame["cluster_id"].tolist() == [
        "cluster-002",
        "cluster-001",
        "cluster-001",
        "cluster-001",
        "cluster-002",
    ]

    metrics_payload = json.loads(metrics.read_text(encoding="utf-8"))
    assert metrics_payload["num_clusters"] == 2
    assert metrics_payload["total_points"] == 5

    trace_frame = pd.read_csv(trace)
    assert trace_frame["stage"].tolist() == ["round", "round"]
    assert trace_frame["selection.size"].tolist() == [3, 2]

    assert "<svg" in render.read_text(encoding="utf-8")


def test_cluster_render_svg_and_json(tmp_path: Path) -> None:
    points = fixture_path("pair_and_outlier", "points")
    svg = tmp_path / "render.svg"
    payload = tmp_path / "render.json"

    for target in (svg, payload):
        main(
            [
                "cluster",
                "--points",
                str(points),
                "--max-diameter",
                "2",
                "--output",
                str(tmp_path / "clusters.csv"),
                "--render",
                str(target),
            ]
        )

    assert svg.read_text(encoding="utf-8").startswith("<svg")
    clusters = json.loads(payload.read_text(encoding="utf-8"))["clusters"]
    assert [cluster["members"] for cluster in clusters] == [[[0, 0], [1, 0]], [[10, 10]]]


def test_cluster_rejects_negative_diameter(tmp_path: Path) -> None:
    points = fixture_path("line_triplet", "points")

    with pytest.raises(SystemExit) as excinfo:
        main(["cluster", "--points", str(points), "--max-diameter", "-1", "--output", str(tmp_path / "out.csv")])

    assert "non-negative" in str(excinfo.value)
    assert not (tmp_path / "out.csv").exists()


def test_cluster_reports_missing_points_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "cluster",
                "--points",
                str(tmp_path / "absent.csv"),
                "--max-diameter",
                "1",
                "--output",
                str(tmp_path / "out.csv"),
            ]
        )

    assert "was not found" in str(excinfo.value)
    assert "Error:" in capsys.readouterr().err


def test_cluster_rejects_unknown_render_format(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "cluster",
                "--points",
                str(fixture_path("tie_break", "points")),
                "--max-diameter",
                "1.5",
                "--output",
                str(tmp_path / "out.csv"),
                "--render",
                str(tmp_path / "render.png"),
            ]
        )

    assert "Unsupported render format" in str(excinfo.value)


def test_cluster_handles_empty_points_file(tmp_path: Path) -> None:
    points = tmp_path / "points.csv"
    points.write_text("X,Y\n", encoding="utf-8")
    output = tmp_path / "clusters.csv"

    main(["cluster", "--points", str(points), "--max-diameter", "5", "--output", str(output)])

    frame = pd.read_csv(output)
    assert frame.empty
    assert "cluster_id" in frame.columns


def test_fixture_datasets_are_listed() -> None:
    datasets = [path.name for path in iter_fixture_datasets("duplicates")]
    assert datasets == ["expected_clusters.csv", "points.csv"]
