"""Exception hierarchy for hypervolume batch runs.

Every fatal condition raised by the pipeline derives from HVManagerError so
the command line layer can report it and exit with status 1. CalculationError
is the one exception that is normally absorbed: the scheduler records the
failing front as non-convergent instead of aborting the batch.
"""


class HVManagerError(Exception):
    """Base class for all errors raised by hv_manager."""


class ConfigurationError(HVManagerError):
    """Raised when the run configuration or an external dependency is unusable."""


class ReferenceFileError(HVManagerError):
    """Base class for problems locating or parsing the reference point file."""


class MissingReferenceFile(ReferenceFileError):
    """Raised when no .ref file exists in the run directory."""


class AmbiguousReferenceFile(ReferenceFileError):
    """Raised when more than one .ref file exists in the run directory."""


class InvalidReferenceFile(ReferenceFileError):
    """Raised when the .ref file does not contain a sequence of real numbers."""


class NoInputFiles(HVManagerError):
    """Raised when discovery and stepping leave no front files to process."""


class CalculationError(HVManagerError):
    """Raised by an indicator calculator when a single front cannot be evaluated."""


class NoValidResults(HVManagerError):
    """Raised when every computed hypervolume is zero."""
