from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pandas as pd
import pytest

from qtcluster.fixtures import fixture_path


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PACKAGE_ROOT / "src"


def _run_cli(arguments: list[str]) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    pythonpath = str(SRC_PATH)
    if existing := env.get("PYTHONPATH"):
        pythonpath = os.pathsep.join([pythonpath, existing])
    env["PYTHONPATH"] = pythonpath

    result = subprocess.run(
        [sys.executable, "-m", "qtcluster.cli", *arguments],
        cwd=PACKAGE_ROOT,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        raise AssertionError(
            "CLI invocation failed",
            result.args,
            result.stdout,
            result.stderr,
        )
    return result


@pytest.mark.integration
def test_cli_generate_then_cluster(tmp_path: Path) -> None:
    points = tmp_path / "points.csv"
    clusters = tmp_path / "clusters.csv"
    assignments = tmp_path / "assignments.csv"
    trace = tmp_path / "trace.jsonl"

    _run_cli(["generate", "--output", str(points), "--seed", "7"])
    result = _run_cli(
        [
            "--log-level",
            "INFO",
            "cluster",
            "--points",
            str(points),
            "--max-diameter",
            "40",
            "--output",
            str(clusters),
            "--assignments",
            str(assignments),
            "--trace-out",
            str(trace),
        ]
    )

    assert "Clustered 200 points" in result.stderr

    cluster_frame = pd.read_csv(clusters)
    assignment_frame = pd.read_csv(assignments)
    assert cluster_frame["member_count"].sum() == 200
    assert (cluster_frame["diameter_squared"] <= 1600).all()
    assert assignment_frame["point_index"].tolist() == list(range(200))
    assert set(assignment_frame["cluster_id"]) == set(cluster_frame["cluster_id"])

    sizes = cluster_frame["member_count"].tolist()
    records = [json.loads(line) for line in trace.read_text(encoding="utf-8").splitlines() if line]
    assert [record["selection.size"] for record in records] == sizes


@pytest.mark.integration
def test_cli_cluster_fixture_is_reproducible(tmp_path: Path) -> None:
    outputs = []
    for attempt in range(2):
        output = tmp_path / f"clusters-{attempt}.csv"
        _run_cli(
            [
                "cluster",
                "--points",
                str(fixture_path("tie_break", "points")),
                "--max-diameter",
                "1.5",
                "--output",
                str(output),
            ]
        )
        outputs.append(output.read_text(encoding="utf-8"))

    assert outputs[0] == outputs[1]
    expected = pd.read_csv(fixture_path("tie_break", "expected_clusters"))
    pd.testing.assert_frame_equal(pd.read_csv(tmp_path / "clusters-0.csv"), expected, check_dtype=False)
