"""On-disk formats for per-front and per-run results.

- ``.hv``: one scalar in scientific notation with 10 fractional digits
- ``.ohv``: three labelled lines with the valid count, mean and standard
  deviation

Both files are written without a trailing newline.
"""

from pathlib import Path

from hv_manager.results import HypervolumeResult, SummaryStatistics

DEFAULT_SUMMARY_NAME = "overall_hypervolume.ohv"


def format_value(value: float) -> str:
    """Format a hypervolume for persistence.

    Example:
        >>> format_value(0.4)
        '4.0000000000e-01'
    """
    return f"{value:.10e}"


def write_hv_file(result: HypervolumeResult) -> Path:
    """Write the .hv file for one result next to its source front."""
    path = result.hv_path
    path.write_text(format_value(result.value))
    return path


def format_summary(stats: SummaryStatistics) -> str:
    """Render summary statistics in the .ohv layout (no trailing newline)."""
    return (
        f"Number of valid files: {stats.valid_count}\n"
        f"Mean: {format_value(stats.mean)}\n"
        f"Standard Deviation: {format_value(stats.std)}"
    )


def write_summary(stats: SummaryStatistics, path: Path) -> Path:
    """Write the batch summary to ``path``, replacing any previous run's file."""
    path = Path(path)
    path.write_text(format_summary(stats))
    return path
