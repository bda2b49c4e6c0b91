"""End-to-end hypervolume batch run.

The driver wires the stages in a fixed order:

1. Preflight: make sure the run directory exists and the calculator can run
2. Load the reference point
3. Discover and stepping-filter the front files
4. Schedule one job per front (each writes its .hv file)
5. Aggregate valid results and write the .ohv summary

Any HVManagerError raised along the way is fatal and propagates to the caller.
Per-front calculation failures do not: they are recorded as non-convergent.
"""

import logging
import os
import shutil
from pathlib import Path

from hv_manager.aggregation import aggregate
from hv_manager.config import RunConfig
from hv_manager.discovery import discover_front_files
from hv_manager.errors import ConfigurationError
from hv_manager.output import format_value
from hv_manager.protocols import IndicatorCalculator
from hv_manager.reference import load_reference_point
from hv_manager.registry import CalculatorRegistry
from hv_manager.results import SummaryStatistics
from hv_manager.scheduler import run_jobs

logger = logging.getLogger(__name__)

HV_DOWNLOAD_URL = "http://lopez-ibanez.eu/hypervolume"


def resolve_executable(executable: str | None) -> Path:
    """Resolve the external hv tool to an executable file.

    Args:
        executable: Path, or a command name looked up on PATH.

    Raises:
        ConfigurationError: If no executable is configured or it cannot be run.
    """
    if not executable:
        raise ConfigurationError(
            "Hypervolume executable path not provided. Pass --hv-exec or set "
            f"HV_MANAGER_HV_EXECUTABLE. The tool is available at <{HV_DOWNLOAD_URL}>."
        )
    found = shutil.which(executable)
    if found is None:
        path = Path(executable)
        if path.is_file() and not os.access(path, os.X_OK):
            raise ConfigurationError(f"Hypervolume executable is not executable: {executable}")
        raise ConfigurationError(f"Hypervolume executable not found: {executable}")
    return Path(found)


def check_directory(directory: Path) -> None:
    """Raise ConfigurationError unless the run directory exists."""
    if not directory.is_dir():
        raise ConfigurationError(f"Run directory not found: {directory}")


def check_calculator(config: RunConfig) -> None:
    """Verify the configured calculator backend is usable before any work starts.

    Raises:
        ConfigurationError: If the backend is unknown, its executable is
            missing, or its Python dependency is not installed.
    """
    if config.calculator not in CalculatorRegistry.list():
        raise ConfigurationError(f"Unknown calculator backend: {config.calculator}")

    if config.calculator == "external":
        resolve_executable(config.hv_executable)
    elif config.calculator == "pymoo":
        try:
            import pymoo.indicators.hv  # noqa: F401
        except ImportError as exc:
            raise ConfigurationError("The pymoo calculator requires the 'pymoo' package") from exc


def build_calculator(config: RunConfig) -> IndicatorCalculator:
    """Instantiate the configured calculator backend."""
    try:
        return CalculatorRegistry.get(config.calculator, **config.calculator_options())
    except (KeyError, ValueError) as exc:
        raise ConfigurationError(str(exc)) from exc


def run_pipeline(config: RunConfig, calculator: IndicatorCalculator | None = None) -> SummaryStatistics:
    """Run a full hypervolume batch.

    Args:
        config: Run configuration.
        calculator: Calculator to use. If None, the configured backend is
            checked and built. Passing one skips the preflight check.

    Returns:
        The batch summary statistics (also written to ``config.summary_path``).

    Raises:
        ConfigurationError: If the run directory is missing or the calculator
            backend cannot be used.
        ReferenceFileError: If the .ref file is missing, duplicated or malformed.
        NoInputFiles: If discovery leaves no fronts.
        NoValidResults: If every hypervolume is zero.

    Example:
        >>> config = RunConfig(directory=Path("runs/zdt1"), hv_executable="hv", stepping=10)
        >>> stats = run_pipeline(config)
        >>> stats.valid_count
        30
    """
    check_directory(config.directory)
    if calculator is None:
        check_calculator(config)
        calculator = build_calculator(config)

    logger.info("Searching for .ref file.")
    reference_point = load_reference_point(config.directory)

    logger.info("Searching for %s files.", config.extension)
    fronts = discover_front_files(
        config.directory,
        recursive=config.recursive,
        stepping=config.stepping,
        extension=config.extension,
    )
    logger.info("Found %d %s files.", len(fronts), config.extension)

    results = run_jobs(fronts, reference_point, calculator, n_jobs=config.jobs)

    stats = aggregate(results, config.summary_path)
    logger.info("Number of valid files: %d", stats.valid_count)
    logger.info("Mean Hypervolume: %s", format_value(stats.mean))
    logger.info("Standard Deviation: %s", format_value(stats.std))
    return stats
