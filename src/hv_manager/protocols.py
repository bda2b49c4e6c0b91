"""Protocol definition for hypervolume indicator calculators.

The scheduler treats the indicator computation as an opaque capability: given
a front file and a reference point it gets back one real number. This protocol
lets the subprocess-backed calculator, the in-process pymoo calculator, and
test stubs be swapped without touching the scheduler.

Example usage:
    ```python
    def run(calculator: IndicatorCalculator, fronts, ref):
        for front in fronts:
            value = calculator.compute(front.path, ref)
    ```
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class IndicatorCalculator(Protocol):
    """Protocol for hypervolume calculators.

    Implementations evaluate a single front file against the run's reference
    point. They must be safe to call from several worker threads at once and
    must not write any files: persisting the value is the scheduler's job.

    A calculator signals failure by raising CalculationError. The scheduler
    records such a front as non-convergent (value 0.0) and carries on with the
    rest of the batch.

    Example:
        ```python
        class ConstantCalculator:
            def compute(self, front_path: Path, reference_point: np.ndarray) -> float:
                return 1.0
        ```
    """

    def compute(self, front_path: Path, reference_point: np.ndarray) -> float:
        """Compute the hypervolume of one front.

        Args:
            front_path: Front file with one point per line, coordinates
                separated by whitespace.
            reference_point: Read-only 1D array with one entry per objective.

        Returns:
            The hypervolume. Zero means no point dominates the reference point.

        Raises:
            CalculationError: If the value cannot be computed.
        """
        ...
