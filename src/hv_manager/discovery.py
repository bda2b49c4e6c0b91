"""Front file discovery and generation stepping.

This module finds the Pareto front files a run should process:

- parse_generation: Extract the generation number from a ``_gen<digits>`` marker
- discover_front_files: Search, order by modification time, and apply stepping

Optimizers commonly dump one front per generation (``run3_gen0050.pof``).
Stepping keeps only every N-th generation so a long run can be sampled
without processing every dump. Files without a generation marker are always
processed.
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from hv_manager.errors import NoInputFiles

logger = logging.getLogger(__name__)

DEFAULT_FRONT_EXTENSION = ".pof"

_GENERATION_PATTERN = re.compile(r"_gen([0-9]+)")


@dataclass(frozen=True)
class FrontFile:
    """A candidate front file found during discovery.

    Attributes:
        path: Location of the front file.
        mtime: Modification time in seconds since the epoch.
        generation: Generation number parsed from the filename, or None if the
            name carries no ``_gen<digits>`` marker.
    """

    path: Path
    mtime: float
    generation: int | None = None


def parse_generation(filename: str) -> int | None:
    """Extract the generation number from a filename.

    The first ``_gen<digits>`` occurrence wins. Digits are read in base 10, so
    zero padding is ignored.

    Args:
        filename: File name (not a full path) to inspect.

    Returns:
        The generation number, or None if there is no marker.

    Example:
        >>> parse_generation("nsga2_gen0050.pof")
        50
        >>> parse_generation("final.pof") is None
        True
    """
    match = _GENERATION_PATTERN.search(filename)
    if match is None:
        return None
    return int(match.group(1), 10)


def keep_for_stepping(front: FrontFile, stepping: int) -> bool:
    """Return True if the front survives the stepping filter."""
    if front.generation is None:
        return True
    return front.generation % stepping == 0


def _iter_candidates(directory: Path, recursive: bool, extension: str) -> Iterator[Path]:
    suffix = extension.lower()
    paths = directory.rglob("*") if recursive else directory.iterdir()
    for path in sorted(paths):
        if path.is_file() and path.name.lower().endswith(suffix):
            yield path


def discover_front_files(
    directory: Path | None = None,
    recursive: bool = False,
    stepping: int = 1,
    extension: str = DEFAULT_FRONT_EXTENSION,
) -> list[FrontFile]:
    """Find, order and filter the front files for a run.

    Args:
        directory: Directory to search. Defaults to the current working directory.
        recursive: Search the whole subtree instead of only ``directory`` itself.
        stepping: Keep generation-tagged files only when their generation is
            divisible by this value. Must be at least 1.
        extension: Front file extension, matched case-insensitively.

    Returns:
        Front files ordered by modification time, oldest first. Ties are broken
        by path.

    Raises:
        ValueError: If stepping is smaller than 1.
        NoInputFiles: If nothing is left after filtering.
    """
    if stepping < 1:
        raise ValueError(f"stepping must be at least 1, got {stepping}")

    directory = Path.cwd() if directory is None else Path(directory)
    candidates = [
        FrontFile(path=path, mtime=path.stat().st_mtime, generation=parse_generation(path.name))
        for path in _iter_candidates(directory, recursive, extension)
    ]
    # sorted() is stable, so equal mtimes keep discovery order
    candidates = sorted(candidates, key=lambda f: f.mtime)

    fronts = [f for f in candidates if keep_for_stepping(f, stepping)]
    logger.debug("Discovered %d %s files, %d kept with stepping %d", len(candidates), extension, len(fronts), stepping)

    if not fronts:
        raise NoInputFiles(f"No {extension} files found in {directory}")
    return fronts
