"""Reference point loading.

A run uses exactly one reference point, read from the single ``.ref`` file in
the run directory. The file holds whitespace-separated real numbers (newlines
included), one per objective.
"""

import logging
from pathlib import Path

import numpy as np

from hv_manager.errors import AmbiguousReferenceFile, InvalidReferenceFile, MissingReferenceFile

logger = logging.getLogger(__name__)

REFERENCE_EXTENSION = ".ref"


def find_reference_file(directory: Path) -> Path:
    """Locate the single .ref file directly inside ``directory``.

    The search is not recursive and the extension match is case-insensitive.

    Args:
        directory: Directory to scan.

    Returns:
        Path of the reference file.

    Raises:
        MissingReferenceFile: If no .ref file exists.
        AmbiguousReferenceFile: If more than one .ref file exists.
    """
    candidates = sorted(
        p for p in Path(directory).iterdir() if p.is_file() and p.suffix.lower() == REFERENCE_EXTENSION
    )
    if not candidates:
        raise MissingReferenceFile(f"No {REFERENCE_EXTENSION} file found in {directory}")
    if len(candidates) > 1:
        names = ", ".join(p.name for p in candidates)
        raise AmbiguousReferenceFile(f"Multiple {REFERENCE_EXTENSION} files found in {directory}: {names}")
    return candidates[0]


def parse_reference_point(text: str) -> np.ndarray:
    """Parse whitespace-separated real numbers into a read-only float array.

    Raises:
        InvalidReferenceFile: If the text is empty or holds a non-numeric token.
    """
    tokens = text.split()
    if not tokens:
        raise InvalidReferenceFile("Reference point file is empty")
    try:
        values = [float(token) for token in tokens]
    except ValueError as exc:
        raise InvalidReferenceFile(f"Reference point contains a non-numeric value: {exc}") from exc

    point = np.array(values, dtype=np.float64)
    point.setflags(write=False)
    return point


def load_reference_point(directory: Path | None = None) -> np.ndarray:
    """Find and parse the reference point for a run.

    Args:
        directory: Directory holding the .ref file. Defaults to the current
            working directory.

    Returns:
        Read-only 1D array with one entry per objective.

    Example:
        >>> point = load_reference_point(Path("runs/zdt1"))
        >>> point
        array([1.1, 1.1])
    """
    directory = Path.cwd() if directory is None else Path(directory)
    ref_file = find_reference_file(directory)
    point = parse_reference_point(ref_file.read_text())
    logger.info("Found .ref file: %s", ref_file.name)
    return point


def format_reference_point(point: np.ndarray) -> str:
    """Render a reference point as the space-separated argument the hv tool expects."""
    return " ".join(repr(float(v)) for v in point)
