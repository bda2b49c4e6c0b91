"""Batch statistics over hypervolume results.

Only convergent fronts (hypervolume != 0.0) enter the statistics. The standard
deviation is the population one (ddof=0).
"""

from collections.abc import Sequence
from pathlib import Path

import numpy as np

from hv_manager.errors import NoValidResults
from hv_manager.output import write_summary
from hv_manager.results import HypervolumeResult, SummaryStatistics


def partition_results(
    results: Sequence[HypervolumeResult],
) -> tuple[list[HypervolumeResult], list[HypervolumeResult]]:
    """Split results into (valid, invalid), preserving order within each part."""
    valid = [r for r in results if r.valid]
    invalid = [r for r in results if not r.valid]
    return valid, invalid


def summarize(results: Sequence[HypervolumeResult]) -> SummaryStatistics:
    """Compute count, mean and population standard deviation of valid results.

    Args:
        results: Complete, ordered result sequence from the scheduler.

    Returns:
        SummaryStatistics over the non-zero values.

    Raises:
        NoValidResults: If no result has a non-zero value.

    Example:
        >>> stats = summarize([
        ...     HypervolumeResult(0, Path("a.pof"), 0.4),
        ...     HypervolumeResult(1, Path("b.pof"), 0.0),
        ...     HypervolumeResult(2, Path("c.pof"), 0.6),
        ... ])
        >>> stats.valid_count, round(stats.mean, 10), round(stats.std, 10)
        (2, 0.5, 0.1)
    """
    valid, _ = partition_results(results)
    if not valid:
        raise NoValidResults(f"No valid front files: all {len(results)} hypervolumes are zero")

    values = np.array([r.value for r in valid], dtype=np.float64)
    return SummaryStatistics(
        valid_count=len(valid),
        mean=float(np.mean(values)),
        std=float(np.std(values, ddof=0)),
        total_count=len(results),
    )


def aggregate(results: Sequence[HypervolumeResult], summary_path: Path) -> SummaryStatistics:
    """Summarize the batch and write the .ohv file. This is the terminal step of a run."""
    stats = summarize(results)
    write_summary(stats, summary_path)
    return stats
