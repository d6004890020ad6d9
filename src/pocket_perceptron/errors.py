"""Exception hierarchy for the online classifier."""

from __future__ import annotations


class PocketPerceptronError(Exception):
    """Base class for classifier errors."""


class PersistenceError(PocketPerceptronError):
    """Raised when model or checkpoint storage cannot be read or written."""


class CheckpointFormatError(PersistenceError):
    """Raised when a checkpoint record has the wrong field count or types."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Malformed checkpoint record in {path}: {detail}")
        self.path = path
        self.detail = detail


class UnsupportedOperationError(PocketPerceptronError, NotImplementedError):
    """Raised by configuration hooks that are deliberately not implemented."""


class ThresholdManagedError(UnsupportedOperationError):
    """Raised when the decision threshold is assigned directly."""

    def __init__(self) -> None:
        super().__init__("Unsupported: the decision threshold is managed automatically")
