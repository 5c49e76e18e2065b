"""Error classification for structured error handling.

Separates the three ways a visualize request can go wrong:
- Syntax failures are not exceptions at all; they travel as
  diagnostics inside a normal response.
- Client errors (empty or oversized source) map to 4xx.
- Defects (extraction or visualization raised) map to 5xx and
  are never folded into the diagnostic list.
"""

from __future__ import annotations

from enum import Enum


class ErrorClass(Enum):
    CLIENT = "client"  # rejected input, not retried
    DEFECT = "defect"  # extractor or visualizer bug, reported as 5xx
    UNKNOWN = "unknown"  # unclassified, treated as a defect at the edge


class SourceRejectedError(ValueError):
    """Source text refused before parsing."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisDefectError(RuntimeError):
    """A stage downstream of the parser raised on a well-formed tree."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.cause = cause


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Checks the project's own exception types first, then any
    structured ``status_code`` attribute.
    """
    if isinstance(error, AnalysisDefectError):
        return ErrorClass.DEFECT

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.DEFECT

    return ErrorClass.UNKNOWN


def status_code_for(error: Exception) -> int:
    """HTTP status for an exception escaping the analysis pipeline."""
    if classify_error(error) == ErrorClass.CLIENT:
        status_code: int = getattr(error, "status_code", 400)
        return status_code
    return 500
