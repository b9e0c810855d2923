"""Group resolution for the hunksplit commit engine.

Contains:
- ResolvedPlan: Validated commit groups plus the uncovered hunks
- resolve_groups: Turn raw classifier output into CommitGroups
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import ValidationError

from hunksplit.compose.exceptions import ResolutionError
from hunksplit.compose.models import CommitGroup, HunkRef
from hunksplit.compose.registry import HunkRegistry
from hunksplit.compose.schema import ClassifierGroup, ClassifierHunkRef, ClassifierResponse

LOG = logging.getLogger(__name__)


@dataclass
class ResolvedPlan:
    """Commit groups in execution order and what they leave uncovered."""

    groups: list[CommitGroup] = field(default_factory=list)
    uncovered: list[HunkRef] = field(default_factory=list)
    assigned: list[HunkRef] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    summary: Optional[str] = None

    @property
    def empty_groups(self) -> list[CommitGroup]:
        return [g for g in self.groups if not g.hunks]


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def _coerce_response(response: Union[dict, list, ClassifierResponse]) -> ClassifierResponse:
    if isinstance(response, ClassifierResponse):
        return response
    if isinstance(response, list):
        return ClassifierResponse(groups=response)
    if not isinstance(response, dict):
        raise ResolutionError(
            f"Classifier response must be a JSON object, got {type(response).__name__}"
        )
    if not isinstance(response.get("groups"), list):
        raise ResolutionError("Classifier response has no 'groups' list")
    try:
        return ClassifierResponse.model_validate(response)
    except ValidationError as e:
        raise ResolutionError(f"Invalid classifier response: {_first_error(e)}") from e


def resolve_groups(
    response: Union[dict, list, ClassifierResponse], registry: HunkRegistry
) -> ResolvedPlan:
    """Resolve classifier output against the registry.

    Args:
        response: Parsed classifier JSON, a ClassifierResponse, or a bare
            list of groups.
        registry: Registry of the current run.

    Returns:
        ResolvedPlan whose assigned and uncovered refs partition the registry.

    Raises:
        ResolutionError: If the response has no usable structure at all.
    """
    parsed = _coerce_response(response)
    plan = ResolvedPlan(summary=parsed.summary)

    validated: list[ClassifierGroup] = []
    for position, raw_group in enumerate(parsed.groups, start=1):
        try:
            validated.append(ClassifierGroup.model_validate(raw_group))
        except ValidationError as e:
            _warn(plan, f"Dropped group #{position}: {_first_error(e)}")

    # Stable: groups sharing a number keep classifier order
    validated.sort(key=lambda g: g.number)

    claimed: dict[HunkRef, int] = {}
    for group in validated:
        refs: list[HunkRef] = []
        for raw_ref in group.hunks:
            for ref in _resolve_ref(raw_ref, group.number, registry, plan):
                owner = claimed.get(ref)
                if owner == group.number and ref in refs:
                    continue
                if owner is not None:
                    _warn(plan, f"Hunk {ref} already assigned to group {owner}; dropped from group {group.number}")
                    continue
                claimed[ref] = group.number
                refs.append(ref)

        if not refs:
            _warn(plan, f"Group {group.number} has no valid hunks")

        plan.groups.append(
            CommitGroup(
                number=group.number,
                description=group.description,
                hunks=tuple(refs),
                commit_message=group.commit_message,
                commit_body=group.commit_body,
            )
        )

    plan.assigned = sorted(claimed, key=registry.sort_key)
    plan.uncovered = [ref for ref in registry.all_refs() if ref not in claimed]

    if plan.uncovered:
        LOG.info("%d hunk(s) not assigned to any group", len(plan.uncovered))

    return plan


def _resolve_ref(
    raw_ref: Any, group_number: int, registry: HunkRegistry, plan: ResolvedPlan
) -> list[HunkRef]:
    """Validate one raw ref; whole-file entries expand to all their hunks."""
    try:
        wire_ref = ClassifierHunkRef.model_validate(raw_ref)
    except ValidationError as e:
        _warn(plan, f"Group {group_number}: invalid hunk reference {raw_ref!r} ({_first_error(e)})")
        return []

    ref = HunkRef(wire_ref.file, wire_ref.hunk_index)
    file_hunks = registry.file_hunks(ref.file)
    if file_hunks is None:
        _warn(plan, f"Group {group_number}: unknown file {ref.file}")
        return []
    if not registry.contains(ref):
        _warn(
            plan,
            f"Group {group_number}: hunk index {ref.hunk_index} out of range for "
            f"{ref.file} ({len(file_hunks.hunks)} hunks)",
        )
        return []

    if file_hunks.whole_file:
        return registry.refs_for_file(ref.file)
    return [ref]


def _warn(plan: ResolvedPlan, message: str) -> None:
    LOG.warning("%s", message)
    plan.warnings.append(message)
