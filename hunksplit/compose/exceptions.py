"""Engine exception classes and error kinds.

Contains:
- ErrorKind: Why a commit group failed, as recorded in CommitResult
- ComposeError: Base exception for engine errors
- ParseError: A diff section could not be parsed (recovered locally)
- ResolutionError: Classifier output could not be resolved
- ApplyError: A hunk cannot be replayed onto its baseline
- RestoreError: Final restoration failed; the one fatal condition
- OrchestratorBusyError: A run was started while another is in progress
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Why a commit group failed."""

    RESOLUTION = "resolution"
    APPLY = "apply"
    STAGE = "stage"
    COMMIT = "commit"


class ComposeError(Exception):
    """Base exception for commit engine errors."""

    pass


class ParseError(ComposeError):
    """Raised when a diff section cannot be parsed."""

    pass


class ResolutionError(ComposeError):
    """Raised when classifier output cannot be resolved against the registry."""

    pass


class ApplyError(ComposeError):
    """Raised when hunks cannot be replayed onto a baseline."""

    pass


class RestoreError(ComposeError):
    """Raised when the working tree could not be restored after a run.

    Carries the recovery instructions shown to the user.
    """

    def __init__(self, message: str, recovery: list[str] | None = None):
        super().__init__(message)
        self.recovery = recovery or []


class OrchestratorBusyError(ComposeError):
    """Raised when a run is started while another run is in progress."""

    pass
