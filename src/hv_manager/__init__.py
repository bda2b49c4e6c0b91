"""hv_manager: Parallel hypervolume post-processing for Pareto front files.

Computes the hypervolume of every front file in a run directory against one
shared reference point, writes a ``.hv`` file per front and an ``.ohv``
summary (number of convergent fronts, mean, standard deviation).

Example:
    >>> from pathlib import Path
    >>> from hv_manager import RunConfig, run_pipeline
    >>> config = RunConfig(directory=Path("runs/zdt1"), hv_executable="hv", jobs=4)
    >>> stats = run_pipeline(config)
    >>> stats.valid_count, stats.mean, stats.std
    (30, 0.6591, 0.0012)

Example (custom calculator):
    >>> from hv_manager import discover_front_files, load_reference_point, run_jobs, summarize
    >>> ref = load_reference_point(Path("runs/zdt1"))
    >>> fronts = discover_front_files(Path("runs/zdt1"), stepping=10)
    >>> results = run_jobs(fronts, ref, PymooHypervolumeCalculator(), n_jobs=2)
    >>> summarize(results).valid_count
    30
"""

__version__ = "1.1.0"

from hv_manager.aggregation import aggregate, partition_results, summarize
from hv_manager.calculators import ExternalHypervolumeCalculator, PymooHypervolumeCalculator
from hv_manager.config import RunConfig, load_config
from hv_manager.discovery import FrontFile, discover_front_files, parse_generation
from hv_manager.errors import (
    AmbiguousReferenceFile,
    CalculationError,
    ConfigurationError,
    HVManagerError,
    InvalidReferenceFile,
    MissingReferenceFile,
    NoInputFiles,
    NoValidResults,
    ReferenceFileError,
)
from hv_manager.pipeline import run_pipeline
from hv_manager.protocols import IndicatorCalculator
from hv_manager.reference import load_reference_point
from hv_manager.registry import CalculatorRegistry, list_calculators
from hv_manager.results import HypervolumeResult, SummaryStatistics
from hv_manager.scheduler import run_jobs

__all__ = [
    # Pipeline
    "run_pipeline",
    "RunConfig",
    "load_config",
    # Stages
    "load_reference_point",
    "discover_front_files",
    "parse_generation",
    "run_jobs",
    "summarize",
    "aggregate",
    "partition_results",
    # Calculators
    "IndicatorCalculator",
    "ExternalHypervolumeCalculator",
    "PymooHypervolumeCalculator",
    "CalculatorRegistry",
    "list_calculators",
    # Data structures
    "FrontFile",
    "HypervolumeResult",
    "SummaryStatistics",
    # Errors
    "HVManagerError",
    "ConfigurationError",
    "ReferenceFileError",
    "MissingReferenceFile",
    "AmbiguousReferenceFile",
    "InvalidReferenceFile",
    "NoInputFiles",
    "CalculationError",
    "NoValidResults",
]
