"""Shared test fixtures for hv_manager tests.

This module provides common fixtures used across test modules:
- StubCalculator: Deterministic calculator returning fixture values per file
- make_front / make_ref: Helpers writing run directory files with fixed mtimes
- fake_hv: A shell script standing in for the external hv executable
"""

import os
import stat
import sys
import threading
import time
from pathlib import Path

import numpy as np
import pytest

from hv_manager.errors import CalculationError

BASE_MTIME = 1_700_000_000.0

FAKE_HV_SCRIPT = """#!/bin/sh
# Echo the first coordinate of the first point as the "hypervolume"
[ "$1" = "-r" ] || exit 2
awk 'NR == 1 { print $1 }'
"""


class StubCalculator:
    """Calculator returning fixture values keyed by file name.

    Args:
        values: Mapping from front file name to the value to return.
        failures: File names for which CalculationError is raised.
        delays: Optional per-file sleep in seconds, to scramble completion order.
    """

    def __init__(
        self,
        values: dict[str, float],
        failures: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.values = values
        self.failures = failures or set()
        self.delays = delays or {}
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def compute(self, front_path: Path, reference_point: np.ndarray) -> float:
        name = Path(front_path).name
        with self._lock:
            self.calls.append(name)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delays.get(name, 0.0))
            if name in self.failures:
                raise CalculationError(f"stub failure for {name}")
            return self.values[name]
        finally:
            with self._lock:
                self.active -= 1


def write_file(path: Path, content: str, mtime: float | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def make_front():
    """Factory writing a front file with an optional modification time offset.

    Returns:
        Callable (directory, name, offset=0.0, content=...) -> Path.
    """

    def factory(directory: Path, name: str, offset: float = 0.0, content: str = "0.5 0.5\n") -> Path:
        return write_file(Path(directory) / name, content, BASE_MTIME + offset)

    return factory


@pytest.fixture
def make_ref():
    """Factory writing a .ref file."""

    def factory(directory: Path, content: str = "1.0 1.0\n", name: str = "problem.ref") -> Path:
        return write_file(Path(directory) / name, content)

    return factory


@pytest.fixture
def example_run(tmp_path: Path, make_front, make_ref) -> Path:
    """Run directory with reference point (1, 1) and fronts a, b, c (oldest first)."""
    make_ref(tmp_path)
    make_front(tmp_path, "a.pof", offset=0.0, content="0.4 0.9\n")
    make_front(tmp_path, "b.pof", offset=1.0, content="0.0 0.9\n")
    make_front(tmp_path, "c.pof", offset=2.0, content="0.6 0.9\n")
    return tmp_path


@pytest.fixture
def example_calculator() -> StubCalculator:
    """Stub giving a=0.4, b=0.0 (non-convergent), c=0.6."""
    return StubCalculator({"a.pof": 0.4, "b.pof": 0.0, "c.pof": 0.6})


@pytest.fixture
def fake_hv(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Executable stand-in for the hv tool.

    Prints the first coordinate of the first point on stdin, so a front's
    expected hypervolume can be encoded in its own content.
    """
    if sys.platform == "win32":
        pytest.skip("fake hv executable is a POSIX shell script")
    path = tmp_path_factory.mktemp("bin") / "hv"
    path.write_text(FAKE_HV_SCRIPT)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def reference_point() -> np.ndarray:
    return np.array([1.0, 1.0])


@pytest.fixture(autouse=True)
def _clean_hv_manager_env(monkeypatch):
    """Keep HV_MANAGER_* variables from the host out of every test."""
    for name in list(os.environ):
        if name.startswith("HV_MANAGER_"):
            monkeypatch.delenv(name)
