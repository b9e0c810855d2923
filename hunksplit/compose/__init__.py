"""Commit engine for hunksplit - replay working-tree hunks as separate commits.

This package provides:
- exceptions: ErrorKind, ComposeError, ParseError, ResolutionError,
              ApplyError, RestoreError, OrchestratorBusyError
- models: DiffHunk, FileHunks, HunkRef, CommitGroup, FileState,
          CommitResult, RunReport
- parser: parse_diff, ParseResult, MAX_PATH_LENGTH
- registry: HunkRegistry
- schema: ClassifierResponse, ClassifierGroup, ClassifierHunkRef
- resolver: resolve_groups, ResolvedPlan
- snapshot: RunSnapshot, capture_file_states, create_snapshot, discard_backup
- applier: apply_hunks, apply_file_hunks
- orchestrator: CommitOrchestrator, OrchestratorEvent
- prompt: CLASSIFY_SYSTEM_PROMPT, format_hunks_for_llm, get_stats,
          build_classify_prompt
"""

# Exceptions
from hunksplit.compose.exceptions import (
    ApplyError,
    ComposeError,
    ErrorKind,
    OrchestratorBusyError,
    ParseError,
    ResolutionError,
    RestoreError,
)

# Models
from hunksplit.compose.models import (
    CommitGroup,
    CommitResult,
    DiffHunk,
    FileHunks,
    FileState,
    HunkRef,
    RunReport,
)

# Parser
from hunksplit.compose.parser import (
    MAX_PATH_LENGTH,
    ParseResult,
    parse_diff,
)

# Registry
from hunksplit.compose.registry import (
    HunkRegistry,
)

# Classifier wire schema
from hunksplit.compose.schema import (
    ClassifierGroup,
    ClassifierHunkRef,
    ClassifierResponse,
)

# Resolver
from hunksplit.compose.resolver import (
    ResolvedPlan,
    resolve_groups,
)

# Snapshot
from hunksplit.compose.snapshot import (
    RunSnapshot,
    capture_file_states,
    create_snapshot,
    discard_backup,
)

# Applier
from hunksplit.compose.applier import (
    apply_file_hunks,
    apply_hunks,
)

# Orchestrator
from hunksplit.compose.orchestrator import (
    CommitOrchestrator,
    OrchestratorEvent,
)

# Prompt
from hunksplit.compose.prompt import (
    CLASSIFY_SYSTEM_PROMPT,
    build_classify_prompt,
    format_hunks_for_llm,
    get_stats,
)


__all__ = [
    # Exceptions
    "ErrorKind",
    "ComposeError",
    "ParseError",
    "ResolutionError",
    "ApplyError",
    "RestoreError",
    "OrchestratorBusyError",
    # Models
    "DiffHunk",
    "FileHunks",
    "HunkRef",
    "CommitGroup",
    "FileState",
    "CommitResult",
    "RunReport",
    # Parser
    "MAX_PATH_LENGTH",
    "ParseResult",
    "parse_diff",
    # Registry
    "HunkRegistry",
    # Schema
    "ClassifierHunkRef",
    "ClassifierGroup",
    "ClassifierResponse",
    # Resolver
    "ResolvedPlan",
    "resolve_groups",
    # Snapshot
    "RunSnapshot",
    "capture_file_states",
    "create_snapshot",
    "discard_backup",
    # Applier
    "apply_hunks",
    "apply_file_hunks",
    # Orchestrator
    "CommitOrchestrator",
    "OrchestratorEvent",
    # Prompt
    "CLASSIFY_SYSTEM_PROMPT",
    "format_hunks_for_llm",
    "get_stats",
    "build_classify_prompt",
]
