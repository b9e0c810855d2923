"""Patch applier for the hunksplit commit engine.

Contains:
- apply_hunks: Rebuild file content from a baseline and a subset of hunks
- apply_file_hunks: Same, starting from a FileState's baseline
"""

import logging

from hunksplit.compose.exceptions import ApplyError
from hunksplit.compose.models import DiffHunk, FileState

LOG = logging.getLogger(__name__)


def _body(line: str) -> str:
    """Strip the tag character from a hunk line."""
    return line[1:]


def _split_lines(content: str) -> list[str]:
    # Only "\n" ends a line for git; str.splitlines would also split on \f, \x1c, ...
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _segment(hunk: DiffHunk) -> list[str]:
    """New-side lines of a hunk, with line terminators restored."""
    segment: list[str] = []
    last_tag = None

    for line in hunk.lines:
        if line.startswith("\\"):
            # The preceding line has no trailing newline
            if last_tag in ("+", " ") and segment and segment[-1].endswith("\n"):
                segment[-1] = segment[-1][:-1]
            continue

        tag = line[:1] or " "
        last_tag = tag
        if tag == "-":
            continue
        segment.append(_body(line) + "\n")

    return segment


def apply_hunks(original_content: str, hunks: list[DiffHunk]) -> str:
    """Apply a subset of a file's hunks to its baseline content.

    Hunks are applied back to front (descending old_start) so that earlier
    line numbers stay valid while later regions are rewritten. The input
    list is not modified.

    Args:
        original_content: File content at the diff's old side (HEAD).
        hunks: Any subset of the file's parsed hunks, in any order.

    Returns:
        The reconstructed content.

    Raises:
        ApplyError: If a placeholder hunk is passed in.
    """
    for hunk in hunks:
        if hunk.placeholder:
            raise ApplyError(f"Cannot apply placeholder hunk for {hunk.file} ({hunk.summary})")

    lines = _split_lines(original_content)

    for hunk in sorted(hunks, key=lambda h: h.old_start, reverse=True):
        start = hunk.old_start - 1 if hunk.old_lines > 0 else hunk.old_start
        end = start + hunk.old_lines

        if start > len(lines) or end > len(lines):
            LOG.warning(
                "Hunk %s in %s extends past the end of the file (%d lines); clipped",
                hunk.header,
                hunk.file,
                len(lines),
            )
            start = min(start, len(lines))
            end = min(end, len(lines))

        lines[start:end] = _segment(hunk)

    return "".join(lines)


def apply_file_hunks(state: FileState, hunks: list[DiffHunk]) -> str:
    """Apply hunks on top of the HEAD content captured in a FileState."""
    return apply_hunks(state.original_content, hunks)
