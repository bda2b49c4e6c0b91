"""Hypervolume calculator implementations.

- ExternalHypervolumeCalculator: Runs the ``hv`` tool by Fonseca et al. once
  per front, feeding the front on stdin
- PymooHypervolumeCalculator: Evaluates the front in-process with pymoo's HV
  indicator, for machines without the external tool

Both follow the IndicatorCalculator protocol and raise CalculationError when
a single front cannot be evaluated.
"""

import logging
import subprocess
from pathlib import Path

import numpy as np

from hv_manager.errors import CalculationError
from hv_manager.reference import format_reference_point

logger = logging.getLogger(__name__)


def parse_calculator_output(stdout: str) -> float:
    """Parse the first token of the hv tool's output as a float.

    Raises:
        CalculationError: If the output is empty or not a number.
    """
    tokens = stdout.split()
    if not tokens:
        raise CalculationError("hypervolume calculator produced no output")
    try:
        return float(tokens[0])
    except ValueError as exc:
        raise CalculationError(f"unparsable hypervolume output: {tokens[0]!r}") from exc


class ExternalHypervolumeCalculator:
    """Calculator backed by the external ``hv`` executable.

    Each call runs ``<executable> -r "<reference point>"`` with the front file
    contents on stdin and reads the hypervolume from stdout.

    Attributes:
        executable: Path or command name of the hv tool.
        timeout: Seconds to wait for a single invocation, or None to wait
            indefinitely. A timed-out process is killed and reported as a
            CalculationError.

    Example:
        >>> calc = ExternalHypervolumeCalculator("/opt/hv-2.0rc2/hv", timeout=60)
        >>> calc.compute(Path("run1_gen100.pof"), np.array([1.1, 1.1]))
        0.6591
    """

    def __init__(self, executable: str | Path, timeout: float | None = None) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.executable = str(executable)
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"ExternalHypervolumeCalculator(executable={self.executable!r}, timeout={self.timeout!r})"

    def command(self, reference_point: np.ndarray) -> list[str]:
        """Build the argument vector for one invocation."""
        return [self.executable, "-r", format_reference_point(reference_point)]

    def compute(self, front_path: Path, reference_point: np.ndarray) -> float:
        """Run the hv tool on one front file.

        Raises:
            CalculationError: If the front cannot be read, the process cannot
                start, exits non-zero, times out, or prints something that is
                not a number.
        """
        try:
            front = Path(front_path).read_bytes()
        except OSError as exc:
            raise CalculationError(f"cannot read front file {front_path}: {exc}") from exc

        cmd = self.command(reference_point)
        logger.debug("Running %s < %s", cmd, front_path)
        try:
            proc = subprocess.run(
                cmd,
                input=front,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CalculationError(f"hypervolume calculator timed out after {self.timeout}s on {front_path}") from exc
        except OSError as exc:
            raise CalculationError(f"cannot run hypervolume calculator {self.executable}: {exc}") from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode(errors="replace").strip()
            raise CalculationError(
                f"hypervolume calculator exited with status {proc.returncode} on {front_path}: {stderr}"
            )
        return parse_calculator_output(proc.stdout.decode(errors="replace"))


def load_front(front_path: Path, n_obj: int | None = None) -> np.ndarray:
    """Read a front file into an (n, n_obj) array.

    Args:
        front_path: Front file with one point per line.
        n_obj: Expected number of objectives. Only used to shape an empty file.

    Returns:
        Array of shape (n_points, n_obj). Empty fronts give shape (0, n_obj).

    Raises:
        CalculationError: If the file cannot be read or parsed.
    """
    try:
        points = np.loadtxt(front_path, dtype=np.float64, ndmin=2)
    except (OSError, ValueError) as exc:
        raise CalculationError(f"cannot parse front file {front_path}: {exc}") from exc
    if points.size == 0:
        return np.empty((0, n_obj or 0), dtype=np.float64)
    return points


class PymooHypervolumeCalculator:
    """In-process calculator using ``pymoo.indicators.hv.HV``.

    All objectives are assumed to be minimised, matching the hv tool.
    """

    def compute(self, front_path: Path, reference_point: np.ndarray) -> float:
        from pymoo.indicators.hv import HV

        ref = np.asarray(reference_point, dtype=np.float64)
        points = load_front(front_path, n_obj=ref.shape[0])
        if points.shape[0] == 0:
            return 0.0
        if points.shape[1] != ref.shape[0]:
            raise CalculationError(
                f"front {front_path} has {points.shape[1]} objectives, reference point has {ref.shape[0]}"
            )

        # Points that do not strictly dominate the reference point add no volume
        dominating = points[np.all(points < ref, axis=1)]
        if dominating.shape[0] == 0:
            return 0.0

        indicator = HV(ref_point=ref)
        return float(indicator(dominating))

    def __repr__(self) -> str:
        return "PymooHypervolumeCalculator()"
