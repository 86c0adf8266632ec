"""
Error taxonomy for oneiromancer.

Every failure the analysis pipeline can surface derives from OneiromancerError,
so callers can catch the whole family in one place and map individual
subclasses to exit codes.

oneiromancer/src/oneiromancer/errors.py
"""

from typing import Optional

__all__ = [
    "OneiromancerError",
    "InferenceConnectionError",
    "ProtocolError",
    "AnalysisValidationError",
    "InputFileError",
]


class OneiromancerError(Exception):
    """Base class for all oneiromancer errors."""


class InferenceConnectionError(OneiromancerError):
    """The inference endpoint was unreachable, timed out, or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(OneiromancerError):
    """The outer Ollama envelope is not valid JSON or lacks the `response` field."""


class AnalysisValidationError(OneiromancerError):
    """The model output does not contain a usable analysis object."""


class InputFileError(OneiromancerError):
    """A pseudo-code input file could not be read, or an output file could not be created."""
