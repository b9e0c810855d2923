"""Git binding used by the commit engine.

Contains:
- NotFound: Typed "absent" result for content reads
- DiffScope: Which changes raw_diff should cover
- ChangedFile: One entry of list_changed_files
- GitBinding: The VCS collaborator (read, write, stage, commit, diff)

Every method blocks until git returns. The binding holds no global
state, so tests can substitute their own implementation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from hunksplit.git.exceptions import CommitError, GitError, NoChangesError, StageError
from hunksplit.git.runner import ENCODING, ENCODING_ERRORS, _run_git_raw

LOG = logging.getLogger(__name__)

# Hash of git's empty tree, used as the diff base before the first commit
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_DIFF_FLAGS = ["diff", "--no-color", "--no-ext-diff", "--no-renames"]

# Fallback binary detection for untracked files git has not diffed yet
BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff",
        ".woff", ".woff2", ".ttf", ".otf", ".eot",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".zip", ".tar", ".gz", ".rar", ".7z",
        ".mp3", ".mp4", ".wav", ".avi", ".mov", ".webm", ".ogg",
        ".exe", ".dll", ".so", ".dylib", ".bin", ".dat",
    }
)


class _NotFoundType:
    """Marker returned when a file has no content at the requested side."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NotFound"


NotFound = _NotFoundType()


class DiffScope(str, Enum):
    """Which changes raw_diff covers."""

    STAGED = "staged"
    UNSTAGED = "unstaged"
    ALL = "all"


@dataclass(frozen=True)
class ChangedFile:
    """A changed path as reported by git status."""

    path: str
    status: str  # new | modified | deleted | renamed
    binary: bool = False


def _status_from_porcelain(index: str, worktree: str) -> str:
    if index in ("?", "A") or worktree == "?":
        return "new"
    if index == "D" or worktree == "D":
        return "deleted"
    if index == "R":
        return "renamed"
    return "modified"


class GitBinding:
    """Blocking git operations scoped to one repository."""

    def __init__(self, repo_root: Union[str, Path], timeout: Optional[float] = None):
        """Initialize the binding.

        Args:
            repo_root: Root of the working tree.
            timeout: Optional per-command timeout in seconds.
        """
        self.repo_root = Path(repo_root)
        self.timeout = timeout

    def _git(self, args: list[str], **kwargs) -> str:
        return _run_git_raw(args, cwd=self.repo_root, timeout=self.timeout, **kwargs)

    # ------------------------------------------------------------------
    # Revisions
    # ------------------------------------------------------------------

    def head_revision(self) -> Optional[str]:
        """Return the HEAD commit hash, or None on an unborn branch."""
        try:
            return self._git(["rev-parse", "--verify", "-q", "HEAD"]).strip() or None
        except GitError:
            return None

    def current_branch(self) -> str:
        """Return the current branch name, or 'unknown'."""
        try:
            return self._git(["branch", "--show-current"]).strip() or "unknown"
        except GitError:
            return "unknown"

    def recent_commit_subjects(self, count: int = 5) -> list[str]:
        """Return the subjects of the last `count` commits (newest first)."""
        if self.head_revision() is None:
            return []
        output = self._git(["log", f"-n{count}", "--pretty=%s"]).strip()
        return output.split("\n") if output else []

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def read_committed_content(self, file: str):
        """Read a file as of HEAD.

        Returns:
            The content, or NotFound when the path does not exist at HEAD.
        """
        if self.head_revision() is None:
            return NotFound
        try:
            # --filters renders the blob the way checkout would (eol, smudge)
            return self._git(["cat-file", "--filters", f"HEAD:{file}"])
        except GitError:
            return NotFound

    def read_working_content(self, file: str):
        """Read a file from the working tree.

        Returns:
            The content, or NotFound when the file is absent.
        """
        path = self.repo_root / file
        if not path.is_file():
            return NotFound
        return path.read_bytes().decode(ENCODING, ENCODING_ERRORS)

    def write_working_content(self, file: str, content: str) -> None:
        """Write content to a working-tree file, creating parent directories."""
        path = self.repo_root / file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode(ENCODING, ENCODING_ERRORS))

    def remove_working_file(self, file: str) -> None:
        """Delete a working-tree file if it exists."""
        (self.repo_root / file).unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Index and commits
    # ------------------------------------------------------------------

    def stage(self, files: list[str]) -> None:
        """Stage the given paths exactly as they are in the working tree.

        Raises:
            StageError: If git rejects the paths.
        """
        if not files:
            return
        try:
            self._git(["add", "-A", "--"] + list(files))
        except GitError as e:
            raise StageError(str(e)) from e

    def unstage_all(self) -> None:
        """Reset the index to HEAD, leaving the working tree alone."""
        if self.head_revision() is None:
            self._git(["rm", "-r", "-q", "--cached", "--ignore-unmatch", "."])
        else:
            self._git(["reset", "-q"])

    def commit(self, message: str, body: Optional[str] = None, author: Optional[str] = None) -> None:
        """Commit the index.

        Args:
            message: Subject line.
            body: Optional body, separated by a blank line.
            author: Optional "Name <email>" override.

        Raises:
            CommitError: If git refuses (nothing staged, hook failure, ...).
        """
        full_message = f"{message}\n\n{body}" if body else message
        args = ["commit", "-q", "-F", "-"]
        if author:
            args += ["--author", author]
        try:
            self._git(args, input_text=full_message)
        except GitError as e:
            raise CommitError(str(e)) from e

    def list_staged_files(self) -> list[str]:
        """Return the paths currently staged."""
        output = self._git(["diff", "--cached", "--name-only", "-z"])
        return [p for p in output.split("\0") if p]

    # ------------------------------------------------------------------
    # Diffs and status
    # ------------------------------------------------------------------

    def _diff_base(self) -> str:
        return self.head_revision() or EMPTY_TREE

    def _untracked_files(self) -> list[str]:
        output = self._git(["ls-files", "--others", "--exclude-standard", "-z"])
        return [p for p in output.split("\0") if p]

    def _untracked_diff(self, file: str) -> str:
        # --no-index exits 1 when the inputs differ
        return self._git(
            ["diff", "--no-color", "--no-ext-diff", "--no-index", "--", "/dev/null", file],
            ok_returncodes=(0, 1),
        )

    def raw_diff(self, scope: DiffScope = DiffScope.ALL) -> str:
        """Return unified diff text for the requested scope.

        STAGED is index against HEAD. UNSTAGED is working tree against the
        index plus untracked files. ALL is working tree against HEAD plus
        untracked files, so every hunk is relative to the HEAD baseline.
        """
        scope = DiffScope(scope)
        if scope == DiffScope.STAGED:
            return self._git(_DIFF_FLAGS + ["--cached"])

        if scope == DiffScope.UNSTAGED:
            parts = [self._git(list(_DIFF_FLAGS))]
        else:
            parts = [self._git(_DIFF_FLAGS + [self._diff_base()])]

        for file in self._untracked_files():
            parts.append(self._untracked_diff(file))

        return "".join(part if part.endswith("\n") or not part else part + "\n" for part in parts)

    def changes_diff(self, scope: DiffScope = DiffScope.ALL) -> str:
        """Return raw_diff for the scope, insisting that it is not empty.

        Raises:
            NoChangesError: If there is nothing in the requested scope.
        """
        diff = self.raw_diff(scope)
        if not diff.strip():
            raise NoChangesError(f"No {DiffScope(scope).value} changes found.")
        return diff

    def _binary_paths(self) -> set[str]:
        output = self._git(_DIFF_FLAGS + ["--numstat", "-z", self._diff_base()])
        binary = set()
        for record in output.split("\0"):
            fields = record.split("\t")
            if len(fields) == 3 and fields[0] == "-" and fields[1] == "-":
                binary.add(fields[2])
        return binary

    def list_changed_files(self) -> list[ChangedFile]:
        """Return every changed path with its status and binary flag."""
        output = self._git(["status", "--porcelain=v1", "-z", "--untracked-files=all"])
        binary_paths = self._binary_paths()

        files: list[ChangedFile] = []
        seen: set[str] = set()
        records = output.split("\0")
        i = 0
        while i < len(records):
            record = records[i]
            i += 1
            if len(record) < 4:
                continue
            index, worktree, path = record[0], record[1], record[3:]
            if index in ("R", "C"):
                # The original path follows as its own record
                i += 1
            if path in seen:
                continue
            seen.add(path)

            status = _status_from_porcelain(index, worktree)
            binary = path in binary_paths or Path(path).suffix.lower() in BINARY_EXTENSIONS
            files.append(ChangedFile(path=path, status=status, binary=binary))

        return files
