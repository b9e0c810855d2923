"""File state snapshots for the hunksplit commit engine.

Contains:
- RunSnapshot: Everything needed to put the working tree back after a run
- capture_file_states: Read HEAD and working content of each file once
- create_snapshot: Capture states, record HEAD and back up the raw diff
- discard_backup: Remove the backup patch after a clean run
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hunksplit.compose.models import FileState
from hunksplit.git import NotFound

LOG = logging.getLogger(__name__)

BACKUP_DIR_NAME = "hunksplit"


@dataclass
class RunSnapshot:
    """State captured before the first mutation of a run."""

    pre_head: Optional[str]
    states: dict[str, FileState] = field(default_factory=dict)
    backup_file: Optional[Path] = None


def capture_file_states(binding, files: list[str]) -> dict[str, FileState]:
    """Read baseline and working content for each file.

    Args:
        binding: VCS binding to read through.
        files: Paths relative to the repository root.

    Returns:
        Dictionary mapping path to FileState. Absent sides read as "".
    """
    states: dict[str, FileState] = {}
    for file in files:
        if file in states:
            continue

        original = binding.read_committed_content(file)
        working = binding.read_working_content(file)

        states[file] = FileState(
            file=file,
            original_content="" if original is NotFound else original,
            working_content="" if working is NotFound else working,
            exists_in_working_tree=working is not NotFound,
        )
    return states


def _git_dir(repo_root: Path) -> Optional[Path]:
    dot_git = repo_root / ".git"
    if dot_git.is_dir():
        return dot_git
    if dot_git.is_file():
        # Linked worktrees and submodules: "gitdir: <path>"
        content = dot_git.read_text().strip()
        if content.startswith("gitdir:"):
            git_dir = Path(content[len("gitdir:"):].strip())
            return git_dir if git_dir.is_absolute() else repo_root / git_dir
    return None


def create_snapshot(
    binding,
    files: list[str],
    repo_root: Optional[Path] = None,
    raw_diff: Optional[str] = None,
) -> RunSnapshot:
    """Create a snapshot of everything a run may modify.

    Args:
        binding: VCS binding to read through.
        files: Text files the run may rewrite.
        repo_root: Repository root, used to place the backup patch.
        raw_diff: The diff the run was planned from. When given, it is
            written to .git/hunksplit/backup-<pid>.patch so the changes can
            be recovered with 'git apply' if restoration fails.

    Returns:
        RunSnapshot with the captured state.
    """
    snapshot = RunSnapshot(
        pre_head=binding.head_revision(),
        states=capture_file_states(binding, files),
    )

    if repo_root is not None and raw_diff:
        git_dir = _git_dir(Path(repo_root))
        if git_dir is None:
            LOG.warning("No .git directory under %s; skipping diff backup", repo_root)
        else:
            backup_dir = git_dir / BACKUP_DIR_NAME
            backup_dir.mkdir(parents=True, exist_ok=True)
            backup_file = backup_dir / f"backup-{os.getpid()}.patch"
            backup_file.write_bytes(raw_diff.encode("utf-8", "surrogateescape"))
            snapshot.backup_file = backup_file
            LOG.info("Backed up diff to %s", backup_file)

    LOG.debug("Snapshot of %d file(s) at %s", len(snapshot.states), snapshot.pre_head or "<no HEAD>")
    return snapshot


def discard_backup(snapshot: RunSnapshot) -> None:
    """Remove the backup patch of a snapshot, if any."""
    if snapshot.backup_file is None:
        return
    try:
        snapshot.backup_file.unlink(missing_ok=True)
    except OSError as e:
        LOG.warning("Could not remove backup %s: %s", snapshot.backup_file, e)
    snapshot.backup_file = None
