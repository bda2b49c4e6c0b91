"""Run configuration.

A RunConfig is built once at startup (from command line values, with
``HV_MANAGER_*`` environment variables filling anything not given) and passed
explicitly to the pipeline. It is frozen: nothing changes it during a run.

The lenient parsers here implement the command line's forgiving rules: an
invalid jobs or stepping value is reported and replaced by its default rather
than aborting the run.
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hv_manager.discovery import DEFAULT_FRONT_EXTENSION
from hv_manager.output import DEFAULT_SUMMARY_NAME

ENV_PREFIX = "HV_MANAGER_"

# A positive decimal integer without leading zeros
_POSITIVE_INT = re.compile(r"[1-9][0-9]*")


def parse_positive_int(value: str | None) -> int | None:
    """Parse a strictly positive integer written without sign or leading zeros.

    Returns:
        The integer, or None if the value is missing or invalid.

    Example:
        >>> parse_positive_int("8"), parse_positive_int("0"), parse_positive_int("08")
        (8, None, None)
    """
    if value is None:
        return None
    value = value.strip()
    if not _POSITIVE_INT.fullmatch(value):
        return None
    return int(value)


def parse_jobs(value: str | None) -> int | None:
    """Parse ``--jobs``. None means "use the available parallelism"."""
    return parse_positive_int(value)


def parse_stepping(value: str | None) -> int | None:
    """Parse ``--stepping``. None means invalid; the caller falls back to 1 (no filtering)."""
    return parse_positive_int(value)


class RunConfig(BaseSettings):
    """Immutable settings for one hypervolume batch run.

    Attributes:
        directory: Run directory holding the .ref file, searched for fronts,
            and receiving the summary file.
        jobs: Maximum concurrent jobs. None uses all processing units.
        stepping: Generation stepping; 1 keeps every file.
        recursive: Search subdirectories for front files.
        extension: Front file extension, matched case-insensitively.
        hv_executable: Path or command name of the external hv tool.
        calculator: Calculator backend name, see ``hv_manager.registry``.
        timeout: Per-job timeout in seconds for the external tool. None waits
            indefinitely.
        summary_name: File name of the per-run summary.
    """

    directory: Path = Field(default_factory=Path.cwd)
    jobs: int | None = Field(default=None, ge=1)
    stepping: int = Field(default=1, ge=1)
    recursive: bool = False
    extension: str = DEFAULT_FRONT_EXTENSION
    hv_executable: str | None = None
    calculator: Literal["external", "pymoo"] = "external"
    timeout: float | None = Field(default=None, gt=0.0)
    summary_name: str = DEFAULT_SUMMARY_NAME

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        value = value.strip().lower()
        if not value or value == ".":
            raise ValueError("extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("hv_executable")
    @classmethod
    def _blank_executable_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def summary_path(self) -> Path:
        """Location of the .ohv summary file."""
        return self.directory / self.summary_name

    def calculator_options(self) -> dict[str, object]:
        """Keyword arguments for the configured calculator factory."""
        if self.calculator == "external":
            return {"executable": self.hv_executable, "timeout": self.timeout}
        return {}


def load_config(**overrides: object) -> RunConfig:
    """Build a RunConfig from explicit values and the environment.

    Values that are None are dropped so the environment (or the field default)
    supplies them instead.
    """
    return RunConfig(**{key: value for key, value in overrides.items() if value is not None})
