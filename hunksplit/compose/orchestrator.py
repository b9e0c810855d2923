"""Commit orchestration for the hunksplit commit engine.

Contains:
- OrchestratorEvent: Progress notification passed to on_event
- CommitOrchestrator: Replays resolved groups as commits and restores the
  working tree afterwards

Every text file is rebuilt from its HEAD content. The content written for
a file in a group is the HEAD content plus the hunks already committed
plus the group's own hunks, so line numbers always refer to one baseline.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from hunksplit.compose.applier import apply_file_hunks
from hunksplit.compose.exceptions import (
    ApplyError,
    ErrorKind,
    OrchestratorBusyError,
    RestoreError,
)
from hunksplit.compose.models import CommitGroup, CommitResult, HunkRef, RunReport
from hunksplit.compose.registry import HunkRegistry
from hunksplit.compose.resolver import ResolvedPlan
from hunksplit.compose.snapshot import RunSnapshot, create_snapshot, discard_backup
from hunksplit.git import CommitError, GitError, NotFound, StageError

LOG = logging.getLogger(__name__)


@dataclass
class OrchestratorEvent:
    """Progress notification for a run."""

    kind: str  # group_started | group_committed | group_failed | restoring | restored
    group_number: Optional[int] = None
    message: str = ""


class CommitOrchestrator:
    """Turns a resolved plan into commits, one group at a time."""

    def __init__(
        self,
        binding,
        author: Optional[str] = None,
        on_event: Optional[Callable[[OrchestratorEvent], None]] = None,
    ):
        """Initialize the orchestrator.

        Args:
            binding: VCS binding (GitBinding or a compatible test double).
            author: Optional "Name <email>" passed to every commit.
            on_event: Optional callback receiving OrchestratorEvent objects.
        """
        self.binding = binding
        self.author = author
        self.on_event = on_event
        self._running = False

    def _emit(self, kind: str, group_number: Optional[int] = None, message: str = "") -> None:
        if self.on_event is not None:
            self.on_event(OrchestratorEvent(kind=kind, group_number=group_number, message=message))

    def run(
        self,
        plan: ResolvedPlan,
        registry: HunkRegistry,
        repo_root: Optional[Union[str, Path]] = None,
        raw_diff: Optional[str] = None,
    ) -> RunReport:
        """Commit every group of the plan and restore the working tree.

        Args:
            plan: Resolved groups from resolve_groups.
            registry: Registry the plan was resolved against.
            repo_root: Repository root, used to place the diff backup.
            raw_diff: Diff text the plan came from, kept as a backup.

        Returns:
            RunReport with one CommitResult per group, in group order.

        Raises:
            OrchestratorBusyError: If a run is already in progress.
            RestoreError: If the working tree could not be restored.
        """
        if self._running:
            raise OrchestratorBusyError("A commit run is already in progress")

        self._running = True
        try:
            return self._run(plan, registry, repo_root, raw_diff)
        finally:
            self._running = False

    def _run(
        self,
        plan: ResolvedPlan,
        registry: HunkRegistry,
        repo_root: Optional[Union[str, Path]],
        raw_diff: Optional[str],
    ) -> RunReport:
        text_files = [f.file for f in registry.files if not f.whole_file]
        snapshot = create_snapshot(
            self.binding,
            text_files,
            repo_root=Path(repo_root) if repo_root is not None else None,
            raw_diff=raw_diff,
        )

        report = RunReport(pre_head=snapshot.pre_head, warnings=list(plan.warnings))
        committed: set[HunkRef] = set()
        touched: set[str] = set()

        try:
            self.binding.unstage_all()
            for group in sorted(plan.groups, key=lambda g: g.number):
                result = self._process_group(group, registry, snapshot, committed, touched)
                report.results.append(result)
        finally:
            self._restore(snapshot, registry, committed, touched, report)

        report.committed = sorted(committed, key=registry.sort_key)
        report.pending = [ref for ref in registry.all_refs() if ref not in committed]
        discard_backup(snapshot)
        return report

    def _process_group(
        self,
        group: CommitGroup,
        registry: HunkRegistry,
        snapshot: RunSnapshot,
        committed: set[HunkRef],
        touched: set[str],
    ) -> CommitResult:
        """Run one group through apply, stage and commit."""
        result = CommitResult(
            group_number=group.number,
            commit_message=group.commit_message,
            files_affected=group.files,
            hunks=list(group.hunks),
        )

        if not group.hunks:
            return self._fail(result, ErrorKind.RESOLUTION, "Group has no valid hunks")

        self._emit("group_started", group.number, group.commit_message)
        LOG.info("Group %d: %s (%d hunks)", group.number, group.commit_message, len(group.hunks))

        try:
            try:
                paths = self._write_group_files(group, registry, snapshot, committed, touched)
            except (ApplyError, OSError) as e:
                return self._fail(result, ErrorKind.APPLY, str(e))

            try:
                self.binding.stage(paths)
            except StageError as e:
                return self._fail(result, ErrorKind.STAGE, str(e))

            try:
                self.binding.commit(group.commit_message, group.commit_body, author=self.author)
            except CommitError as e:
                return self._fail(result, ErrorKind.COMMIT, str(e))
        finally:
            # A failed group must not leave anything staged for the next one
            self.binding.unstage_all()

        committed.update(group.hunks)
        result.success = True
        self._emit("group_committed", group.number, group.commit_message)
        return result

    def _write_group_files(
        self,
        group: CommitGroup,
        registry: HunkRegistry,
        snapshot: RunSnapshot,
        committed: set[HunkRef],
        touched: set[str],
    ) -> list[str]:
        """Write the group's text files and return every path to stage."""
        group_refs = set(group.hunks)
        paths: list[str] = []

        for file in group.files:
            file_hunks = registry.file_hunks(file)
            if file_hunks is None:
                raise ApplyError(f"{file} is not in the registry")

            if file_hunks.whole_file:
                # Staged as-is from the working tree
                paths.extend(file_hunks.paths)
                continue

            state = snapshot.states.get(file)
            if state is None:
                raise ApplyError(f"No snapshot for {file}")

            refs = [r for r in registry.refs_for_file(file) if r in committed or r in group_refs]
            content = apply_file_hunks(state, [registry.get(r) for r in refs])

            touched.add(file)
            self.binding.write_working_content(file, content)
            paths.append(file)

        return paths

    def _fail(self, result: CommitResult, kind: ErrorKind, message: str) -> CommitResult:
        LOG.warning("Group %d failed (%s): %s", result.group_number, kind.value, message)
        result.success = False
        result.error_kind = kind
        result.error_message = message
        self._emit("group_failed", result.group_number, message)
        return result

    def _restore(
        self,
        snapshot: RunSnapshot,
        registry: HunkRegistry,
        committed: set[HunkRef],
        touched: set[str],
        report: RunReport,
    ) -> None:
        """Put every snapshotted file back to its pre-run working content.

        Raises:
            RestoreError: If any file or the index could not be restored.
        """
        self._emit("restoring")
        errors: list[str] = []

        for file, state in snapshot.states.items():
            try:
                if file in touched:
                    # committed + pending covers every hunk of the file
                    rebuilt = apply_file_hunks(state, registry.file_hunks(file).hunks)
                    if rebuilt != state.working_content and state.exists_in_working_tree:
                        message = f"Rebuilt content of {file} differs from the snapshot; using the snapshot"
                        LOG.warning("%s", message)
                        report.warnings.append(message)
                    self._put_back(file, state.exists_in_working_tree, state.working_content)
                else:
                    current = self.binding.read_working_content(file)
                    exists = current is not NotFound
                    if exists != state.exists_in_working_tree or (exists and current != state.working_content):
                        LOG.info("Restoring drifted file %s", file)
                        self._put_back(file, state.exists_in_working_tree, state.working_content)
            except (OSError, GitError, ApplyError) as e:
                LOG.error("Failed to restore %s: %s", file, e)
                errors.append(f"{file}: {e}")

        try:
            self.binding.unstage_all()
        except GitError as e:
            LOG.error("Failed to reset the index: %s", e)
            errors.append(f"index: {e}")

        if errors:
            raise RestoreError(
                "Failed to restore the working tree:\n  " + "\n  ".join(errors),
                recovery=self._recovery_commands(snapshot, bool(committed)),
            )

        report.restored = True
        self._emit("restored")

    def _put_back(self, file: str, exists: bool, content: str) -> None:
        if exists:
            self.binding.write_working_content(file, content)
        else:
            self.binding.remove_working_file(file)

    @staticmethod
    def _recovery_commands(snapshot: RunSnapshot, commits_created: bool) -> list[str]:
        commands: list[str] = []
        if commits_created:
            if snapshot.pre_head:
                commands.append(f"git reset --soft {snapshot.pre_head}")
            else:
                commands.append("git update-ref -d HEAD")
        if snapshot.backup_file is not None:
            commands.append("git reset -q")
            commands.append(f"git apply {snapshot.backup_file}")
        return commands
