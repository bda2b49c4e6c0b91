"""Typer CLI entrypoint for hv_manager."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from typer.core import TyperCommand

from hv_manager import __version__
from hv_manager.config import load_config, parse_jobs, parse_stepping
from hv_manager.errors import ConfigurationError, HVManagerError
from hv_manager.logging_utils import configure_logging
from hv_manager.pipeline import HV_DOWNLOAD_URL, run_pipeline

logger = logging.getLogger("hv_manager.cli")

HELP_TEXT = f"""
Manage hypervolume calculations of many Pareto fronts in parallel, using the
hypervolume calculator by Fonseca et al. (<{HV_DOWNLOAD_URL}>).

Run from within the directory of the Pareto front files ('.pof'). A single
'.ref' file holding the reference point must be present in that directory.
For each processed front a '.hv' file is written with its hypervolume, and an
'overall_hypervolume.ohv' file receives the number of valid (convergent)
fronts, the mean hypervolume and its standard deviation.
"""

app = typer.Typer(add_completion=False, help=HELP_TEXT)

# Options whose value may be left off; a missing value is treated as invalid
_OPTIONAL_VALUE_OPTIONS = frozenset({"-j", "--jobs", "-s", "--stepping"})


def fill_missing_values(args: list[str]) -> list[str]:
    """Give a trailing ``-j``/``-s`` an empty value instead of a usage error."""
    if args and args[-1] in _OPTIONAL_VALUE_OPTIONS:
        return [*args, ""]
    return list(args)


class LenientCommand(TyperCommand):
    def parse_args(self, ctx, args):
        return super().parse_args(ctx, fill_missing_values(args))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hv_manager version {__version__}")
        typer.echo("License LGPLv3: GNU LGPL version 3 <https://www.gnu.org/licenses/lgpl>.")
        typer.echo("Written by Mykel Shumay.")
        raise typer.Exit()


@app.command(
    cls=LenientCommand,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "allow_extra_args": True,
        "ignore_unknown_options": True,
    },
    help=HELP_TEXT,
)
def main(
    ctx: typer.Context,
    jobs: str | None = typer.Option(
        None,
        "-j",
        "--jobs",
        metavar="N",
        help="Maximum number of parallel jobs. Defaults to the number of cores.",
    ),
    stepping: str | None = typer.Option(
        None,
        "-s",
        "--stepping",
        metavar="N",
        help="If a filename contains a generation number '_genX', only process it if X is divisible by N.",
    ),
    recursive: bool = typer.Option(
        False,
        "-r",
        "--recursive",
        help="Find front files recursively.",
    ),
    directory: Path | None = typer.Option(
        None,
        "-d",
        "--directory",
        help="Run directory. Defaults to the current directory.",
        file_okay=False,
        dir_okay=True,
    ),
    hv_exec: str | None = typer.Option(
        None,
        "--hv-exec",
        help="Path to the hv executable (or set HV_MANAGER_HV_EXECUTABLE).",
    ),
    calculator: str | None = typer.Option(
        None,
        "--calculator",
        help="Calculator backend: 'external' (hv tool) or 'pymoo'.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Per-front timeout in seconds. A timed-out front counts as non-convergent.",
    ),
    extension: str | None = typer.Option(
        None,
        "--extension",
        help="Front file extension. Defaults to '.pof'.",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write the log to this file.",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Output version information and exit.",
    ),
) -> None:
    """Compute hypervolumes for all front files and summarise them."""

    configure_logging(log_file=log_file)

    for extra in ctx.args:
        logger.warning("Option not recognized: '%s'", extra)

    n_jobs: int | None = None
    if jobs is not None:
        n_jobs = parse_jobs(jobs)
        if n_jobs is None:
            logger.warning("Invalid jobs value, max number of parallel jobs set to number of cores.")
        else:
            logger.info("Setting max number of parallel jobs to %d.", n_jobs)

    step: int | None = None
    if stepping is not None:
        step = parse_stepping(stepping)
        if step is None:
            logger.warning("Invalid stepping value, set to 1.")
            step = 1
        else:
            logger.info("Setting stepping to %d.", step)

    if recursive:
        logger.info("Searching for front files recursively.")

    try:
        try:
            config = load_config(
                directory=directory,
                jobs=n_jobs,
                stepping=step,
                recursive=recursive or None,
                hv_executable=hv_exec,
                calculator=calculator,
                timeout=timeout,
                extension=extension,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc
        run_pipeline(config)
    except HVManagerError as exc:
        logger.error("Error: %s Exiting.", exc)
        raise typer.Exit(code=1) from exc
