"""Bounded-concurrency scheduling of hypervolume jobs.

Every discovered front becomes one independent job. Jobs run on a joblib
thread pool: the work is dominated by waiting on the calculator subprocess,
so threads are enough and the calculator does not need to be picklable.

Jobs may finish in any order. Each job writes its own .hv file as soon as its
value is known; the in-memory results are then sorted back into discovery
order so statistics and logs do not depend on scheduling jitter.
"""

import logging
import math
import os
from collections.abc import Sequence

import numpy as np
from joblib import Parallel, delayed

from hv_manager.discovery import FrontFile
from hv_manager.errors import CalculationError
from hv_manager.output import format_value, write_hv_file
from hv_manager.protocols import IndicatorCalculator
from hv_manager.results import HypervolumeResult

logger = logging.getLogger(__name__)


def available_parallelism() -> int:
    """Number of processing units available to this process."""
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return os.cpu_count() or 1


def resolve_n_jobs(n_jobs: int | None, n_files: int) -> int:
    """Resolve the worker count for a batch.

    Args:
        n_jobs: Requested maximum number of concurrent jobs. None or -1 means
            the available parallelism.
        n_files: Number of jobs in the batch.

    Returns:
        Worker count, clamped to the number of files (and at least 1).

    Raises:
        ValueError: If n_jobs is zero or a negative value other than -1.
    """
    if n_jobs is None or n_jobs == -1:
        n_jobs = available_parallelism()
    elif n_jobs < 1:
        raise ValueError(f"n_jobs must be positive or -1, got {n_jobs}")
    return max(1, min(n_jobs, n_files))


def compute_one(
    index: int,
    front: FrontFile,
    reference_point: np.ndarray,
    calculator: IndicatorCalculator,
) -> HypervolumeResult:
    """Run one job: compute, persist the .hv file, and return the result.

    A CalculationError or a non-finite value is logged and recorded as 0.0,
    i.e. the front counts as non-convergent. The .hv file is written either way.
    """
    try:
        value = float(calculator.compute(front.path, reference_point))
    except CalculationError as exc:
        logger.warning("Hypervolume calculation failed for file #%d (%s): %s", index, front.path, exc)
        value = 0.0
    else:
        if not math.isfinite(value):
            logger.warning("Non-finite hypervolume %r for file #%d (%s), recording 0.0", value, index, front.path)
            value = 0.0

    result = HypervolumeResult(index=index, source=front.path, value=value)
    write_hv_file(result)
    logger.info("Finished hv calculation of file #%d: %s Hypervolume: %s", index, front.path, format_value(value))
    return result


def run_jobs(
    fronts: Sequence[FrontFile],
    reference_point: np.ndarray,
    calculator: IndicatorCalculator,
    n_jobs: int | None = None,
) -> list[HypervolumeResult]:
    """Compute the hypervolume of every front with at most ``n_jobs`` concurrent jobs.

    Args:
        fronts: Ordered front files from discovery.
        reference_point: Reference point shared by all jobs. Read-only.
        calculator: Calculator used for every job.
        n_jobs: Maximum concurrency. None or -1 uses all available processing
            units. Clamped to the number of fronts.

    Returns:
        One result per front, in the same order as ``fronts``.

    Raises:
        ValueError: If n_jobs is invalid.

    Example:
        >>> results = run_jobs(fronts, ref, ExternalHypervolumeCalculator("hv"), n_jobs=4)
        >>> [r.index for r in results]
        [0, 1, 2]
    """
    if not fronts:
        return []

    workers = resolve_n_jobs(n_jobs, len(fronts))
    logger.info("Calculating all hypervolumes across %d processes.", workers)

    parallel = Parallel(n_jobs=workers, prefer="threads", return_as="generator_unordered")
    completed = parallel(
        delayed(compute_one)(index, front, reference_point, calculator) for index, front in enumerate(fronts)
    )

    results = sorted(completed, key=lambda r: r.index)
    if len(results) != len(fronts):
        raise RuntimeError(f"expected {len(fronts)} results, got {len(results)}")
    return results
