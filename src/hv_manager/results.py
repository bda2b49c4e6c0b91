"""Result types produced by a hypervolume batch run.

This module provides the immutable records that flow from the scheduler to
the aggregator:

- HypervolumeResult: The hypervolume computed for one front file
- SummaryStatistics: Count, mean and standard deviation over valid results

Both classes are frozen dataclasses. Values are normalised to plain Python
floats on construction so results coming back from numpy or a subprocess
compare and format identically.
"""

import math
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class HypervolumeResult:
    """Hypervolume of a single front file.

    Attributes:
        index: Position of the front in the discovered and filtered sequence.
            The scheduler sorts results on this field, never on completion time.
        source: Path of the front file the value was computed from.
        value: Hypervolume reported by the calculator. A value of exactly 0.0
            marks a non-convergent front (or a failed calculation).

    Example:
        >>> result = HypervolumeResult(index=0, source=Path("a.pof"), value=0.4)
        >>> result.valid
        True
        >>> result.hv_path
        PosixPath('a.hv')
    """

    index: int
    source: Path
    value: float

    def __post_init__(self) -> None:
        """Validate fields and normalise types.

        Raises:
            TypeError: If index is not an integer.
            ValueError: If index is negative or value is not finite.
        """
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError(f"index must be an integer, got {type(self.index).__name__}")
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")

        value = float(self.value)
        if not math.isfinite(value):
            raise ValueError(f"value must be finite, got {value}")

        object.__setattr__(self, "value", value)
        object.__setattr__(self, "source", Path(self.source))

    @property
    def valid(self) -> bool:
        """True if the front converged, i.e. the hypervolume is non-zero."""
        return self.value != 0.0

    @property
    def hv_path(self) -> Path:
        """Path of the per-file .hv output written next to the source front."""
        return self.source.with_suffix(".hv")


@dataclass(frozen=True)
class SummaryStatistics:
    """Batch-level statistics over the valid hypervolume results.

    Attributes:
        valid_count: Number of results with a non-zero hypervolume.
        mean: Arithmetic mean of the valid values.
        std: Population standard deviation (divides by valid_count) of the
            valid values.
        total_count: Number of results the statistics were drawn from,
            valid or not.
    """

    valid_count: int
    mean: float
    std: float
    total_count: int

    def __post_init__(self) -> None:
        if self.valid_count < 1:
            raise ValueError(f"valid_count must be positive, got {self.valid_count}")
        if self.total_count < self.valid_count:
            raise ValueError(
                f"total_count ({self.total_count}) cannot be smaller than valid_count ({self.valid_count})"
            )
        object.__setattr__(self, "mean", float(self.mean))
        object.__setattr__(self, "std", float(self.std))

    @property
    def invalid_count(self) -> int:
        """Number of non-convergent fronts in the batch."""
        return self.total_count - self.valid_count
