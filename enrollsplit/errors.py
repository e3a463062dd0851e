"""
Error taxonomy for enrollsplit.

Every failure the pipeline or the parentheses checker reports derives from
EnrollSplitError so the CLI can handle them in one place.
"""

from pathlib import Path
from typing import Optional, Union


class EnrollSplitError(Exception):
    """Base class for all enrollsplit errors."""
    pass


class MalformedRecordError(EnrollSplitError):
    """Raised when an input row cannot be turned into an EnrollmentRecord."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.line_number = line_number
        self.field = field
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class IOFailureError(EnrollSplitError):
    """Raised when the input file cannot be read or an output file cannot be written."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class InvalidArgumentError(EnrollSplitError, ValueError):
    """Raised when the parentheses checker is constructed without input."""
    pass
