"""Data models for the hunksplit commit engine.

Contains:
- DiffHunk: One hunk of a unified diff
- FileHunks: All hunks of one file, in diff order
- HunkRef: (file, hunk_index) pointer into the registry
- CommitGroup: A resolved group of hunks that becomes one commit
- FileState: Baseline and working content of a file at run start
- CommitResult: Outcome of one group
- RunReport: Outcome of a whole run
"""

from dataclasses import dataclass, field
from typing import Optional

from hunksplit.compose.exceptions import ErrorKind


@dataclass
class DiffHunk:
    """A contiguous change region in one file."""

    file: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    header: str  # The @@ ... @@ line, empty for placeholders
    lines: list[str] = field(default_factory=list)  # Tagged lines: " ", "+", "-", "\"
    context: Optional[str] = None  # Enclosing function/class, display only
    summary: str = ""
    placeholder: bool = False  # Stands for a whole file (binary, mode change, ...)

    @property
    def additions(self) -> int:
        return sum(1 for ln in self.lines if ln.startswith("+"))

    @property
    def deletions(self) -> int:
        return sum(1 for ln in self.lines if ln.startswith("-"))

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    def snippet(self, max_lines: int = 8) -> str:
        """Get a snippet of the hunk's changed lines for display."""
        content_lines = [ln for ln in self.lines if ln.startswith(("+", "-"))]
        if len(content_lines) <= max_lines:
            return "\n".join(content_lines)
        return "\n".join(content_lines[:max_lines]) + f"\n... ({len(content_lines) - max_lines} more lines)"


@dataclass
class FileHunks:
    """All hunks of one file; list position is the stable hunk index."""

    file: str
    hunks: list[DiffHunk] = field(default_factory=list)
    header_lines: list[str] = field(default_factory=list)  # From 'diff --git' up to first @@
    is_new: bool = False
    is_deleted: bool = False
    is_binary: bool = False
    is_renamed: bool = False
    is_symlink: bool = False  # mode 120000
    is_submodule: bool = False  # mode 160000
    old_path: Optional[str] = None  # For renames

    @property
    def whole_file(self) -> bool:
        """True when the file is staged as a unit instead of replayed hunk by hunk.

        Whole-file entries are never read, written or snapshotted; the
        working tree already holds what gets committed.
        """
        return (
            self.is_binary
            or self.is_deleted
            or self.is_renamed
            or self.is_symlink
            or self.is_submodule
            or any(h.placeholder for h in self.hunks)
        )

    @property
    def paths(self) -> list[str]:
        """Paths that must be staged together for this file."""
        if self.is_renamed and self.old_path:
            return [self.old_path, self.file]
        return [self.file]


@dataclass(frozen=True, order=True)
class HunkRef:
    """Pointer to one hunk of the current run's registry."""

    file: str
    hunk_index: int

    def __str__(self) -> str:
        return f"{self.file}#{self.hunk_index}"


@dataclass(frozen=True)
class CommitGroup:
    """A resolved group of hunks to be committed together."""

    number: int
    description: str
    hunks: tuple[HunkRef, ...]
    commit_message: str
    commit_body: Optional[str] = None

    @property
    def full_message(self) -> str:
        if self.commit_body:
            return f"{self.commit_message}\n\n{self.commit_body}"
        return self.commit_message

    @property
    def files(self) -> list[str]:
        """Files referenced by this group, in first-reference order."""
        return list(dict.fromkeys(ref.file for ref in self.hunks))


@dataclass
class FileState:
    """Content of a file at HEAD and in the working tree at run start."""

    file: str
    original_content: str  # "" when absent at HEAD
    working_content: str  # "" when absent from the working tree
    exists_in_working_tree: bool = True


@dataclass
class CommitResult:
    """Outcome of processing one commit group."""

    group_number: int
    commit_message: str
    files_affected: list[str] = field(default_factory=list)
    hunks: list[HunkRef] = field(default_factory=list)
    success: bool = False
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "group": self.group_number,
            "message": self.commit_message,
            "files": self.files_affected,
            "hunks": [{"file": r.file, "hunkIndex": r.hunk_index} for r in self.hunks],
            "success": self.success,
            "errorKind": self.error_kind.value if self.error_kind else None,
            "error": self.error_message,
        }


@dataclass
class RunReport:
    """Outcome of a whole run, in group order."""

    results: list[CommitResult] = field(default_factory=list)
    committed: list[HunkRef] = field(default_factory=list)
    pending: list[HunkRef] = field(default_factory=list)
    restored: bool = False
    pre_head: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> list[CommitResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[CommitResult]:
        return [r for r in self.results if not r.success]

    @property
    def all_succeeded(self) -> bool:
        return bool(self.results) and not self.failed

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "committed": [str(r) for r in self.committed],
            "pending": [str(r) for r in self.pending],
            "restored": self.restored,
            "preHead": self.pre_head,
            "warnings": list(self.warnings),
        }
