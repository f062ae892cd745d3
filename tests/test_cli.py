# tests/test_cli.py
"""Tests for the ``python -m randstream`` command line."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import numpy as np
from scipy import stats

SRC = Path(__file__).resolve().parents[1] / "src"


def run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    """Run the CLI and return stdout, stderr and return code."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "randstream", *args],
        check=False,
        capture_output=True,
        text=True,
        timeout=30,
        encoding="utf-8",
        env=env,
    )


def _values(stdout: str, sep: str = "\n") -> list[float]:
    return [float(part) for part in stdout.split(sep) if part.strip()]


def test_seeded_normal_output() -> None:
    result = run_cli("norm", "0", "1", "-n", "5", "--seed", "1234")
    assert result.returncode == 0, result.stderr
    assert result.stdout.endswith("\n")
    assert not result.stdout.endswith("\n\n")
    assert result.stdout.count("\n") == 5

    uniforms = np.random.RandomState(1234).random_sample(5)
    expected = stats.norm(0.0, 1.0).ppf(uniforms).tolist()
    assert _values(result.stdout) == expected


def test_custom_separator_joins_values() -> None:
    result = run_cli("poisson", "3", "-n", "4", "--sep", ",", "--seed", "9")
    assert result.returncode == 0, result.stderr
    assert result.stdout.endswith("\n")
    assert not result.stdout.endswith(",\n")
    assert result.stdout.count(",") == 3
    assert len(_values(result.stdout.strip(), ",")) == 4


def test_empty_stream_still_ends_with_newline() -> None:
    result = run_cli("norm", "-n", "0", "--seed", "1")
    assert result.returncode == 0, result.stderr
    assert result.stdout == "\n"


def test_snapshot_and_resume(tmp_path: Path) -> None:
    snapshot = tmp_path / "state.bin"
    first = run_cli("uniform", "-n", "10", "--seed", "77", "--snapshot", str(snapshot))
    assert first.returncode == 0, first.stderr
    assert snapshot.stat().st_size > 0

    second = run_cli("uniform", "-n", "10", "--state", str(snapshot))
    assert second.returncode == 0, second.stderr

    whole = run_cli("uniform", "-n", "20", "--seed", "77")
    assert _values(first.stdout) + _values(second.stdout) == _values(whole.stdout)


def test_unknown_distribution_is_usage_error() -> None:
    result = run_cli("not_a_distribution", "-n", "1")
    assert result.returncode == 2
    assert "not_a_distribution" in result.stderr


def test_negative_iteration_count_is_usage_error() -> None:
    result = run_cli("norm", "-n", "-1")
    assert result.returncode == 2
    assert "iter" in result.stderr


def test_bad_seed_is_usage_error() -> None:
    assert run_cli("norm", "-n", "1", "--seed", "abc").returncode == 2
    assert run_cli("norm", "-n", "1", "--seed", "0").returncode == 2


def test_missing_state_file(tmp_path: Path) -> None:
    result = run_cli("norm", "-n", "1", "--state", str(tmp_path / "missing.bin"))
    assert result.returncode == 1
