"""Git collaborator for hunksplit.

This package provides:
- exceptions: GitError, StageError, CommitError, NoChangesError
- runner: _run_git_command, _run_git_raw, get_repo_root
- binding: GitBinding, NotFound, DiffScope, ChangedFile
"""

# Exceptions
from hunksplit.git.exceptions import (
    CommitError,
    GitError,
    NoChangesError,
    StageError,
)

# Runner utilities
from hunksplit.git.runner import (
    _run_git_command,
    _run_git_raw,
    get_repo_root,
)

# Binding
from hunksplit.git.binding import (
    EMPTY_TREE,
    ChangedFile,
    DiffScope,
    GitBinding,
    NotFound,
)


__all__ = [
    # Exceptions
    "GitError",
    "StageError",
    "CommitError",
    "NoChangesError",
    # Runner
    "_run_git_command",
    "_run_git_raw",
    "get_repo_root",
    # Binding
    "EMPTY_TREE",
    "ChangedFile",
    "DiffScope",
    "GitBinding",
    "NotFound",
]
