"""Git-related exception classes.

Contains all exception classes for git operations:
- GitError: Base exception for git-related errors
- StageError: Raised when staging paths fails
- CommitError: Raised when creating a commit fails
- NoChangesError: Raised when there is nothing to split
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class StageError(GitError):
    """Raised when git refuses to stage the requested paths."""

    pass


class CommitError(GitError):
    """Raised when git fails to create a commit."""

    pass


class NoChangesError(GitError):
    """Raised when the working tree has no changes to split."""

    pass
