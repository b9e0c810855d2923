"""Diff parser for the hunksplit commit engine.

Contains functions for parsing unified diff output:
- parse_diff: Parse raw git diff text into per-file hunk collections
- is_valid_path: Sanity check for paths read from diff headers
- _parse_file_section: Parse a single 'diff --git' section
- _parse_hunks: Parse the hunks of one section
- _summarize_hunk: Build a one-line description of a hunk
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from hunksplit.compose.exceptions import ParseError
from hunksplit.compose.models import DiffHunk, FileHunks

LOG = logging.getLogger(__name__)

MAX_PATH_LENGTH = 4096

# Lookahead split: only a line that *starts* with the header opens a section.
# Hunk body lines always carry a ' ', '+' or '-' prefix, so header-like text
# inside content can never match.
_SECTION_SPLIT_RE = re.compile(r"(?=^diff --git )", re.MULTILINE)

_GIT_HEADER_RE = re.compile(r'^diff --git (?:"?a/(?P<old>.+?)"?) (?:"?b/(?P<new>.+?)"?)$')

_HUNK_HEADER_RE = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_lines>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_lines>\d+))? @@(?P<context>.*)$",
    re.MULTILINE,
)

_ILLEGAL_PATH_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")

# Symlinks (120000) and submodules (160000) have no working-tree text to
# rebuild; their mode shows up on the index line or the mode lines.
_SYMLINK_MODE = "120000"
_SUBMODULE_MODE = "160000"
_MODE_LINE_RE = re.compile(
    r"^(?:(?:new file|deleted file|old|new) mode (?P<mode>\d{6})"
    r"|index [0-9a-f]+\.\.[0-9a-f]+ (?P<index_mode>\d{6}))\s*$"
)

NO_NEWLINE_MARKER = "\\"


@dataclass
class ParseResult:
    """Output of parse_diff."""

    files: list[FileHunks] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def hunk_count(self) -> int:
        return sum(len(f.hunks) for f in self.files)


def is_valid_path(path: Optional[str]) -> bool:
    """Check that a path taken from a diff header is plausible.

    Rejects empty paths, paths over MAX_PATH_LENGTH, and paths containing
    NUL, newlines or other control characters, which only show up when a
    header was misparsed. Anything else is a legal git path.
    """
    if not path:
        return False
    if len(path) > MAX_PATH_LENGTH:
        return False
    return not _ILLEGAL_PATH_CHARS_RE.search(path)


def _unquote(path: str) -> str:
    # git C-quotes unusual paths: "b/na\303\257ve.txt"
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if "\\" in path:
        try:
            escaped = path.encode("latin-1", "backslashreplace").decode("unicode_escape")
            path = escaped.encode("latin-1").decode("utf-8")
        except (UnicodeDecodeError, UnicodeEncodeError):
            pass
    return path


def _strip_side(path: str, prefix: str) -> str:
    path = _unquote(path)
    return path[len(prefix):] if path.startswith(prefix) else path


def parse_diff(diff_text: str) -> ParseResult:
    """Parse unified diff output from git into addressable hunks.

    Args:
        diff_text: Raw output of one or more concatenated git diffs.

    Returns:
        ParseResult with one FileHunks per file, in diff order, and any
        warnings about sections that were dropped or degraded.
    """
    result = ParseResult()

    if not diff_text.strip():
        return result

    by_path: dict[str, FileHunks] = {}

    for section in _SECTION_SPLIT_RE.split(diff_text):
        if not section.startswith("diff --git "):
            continue

        try:
            file_hunks = _parse_file_section(section, result.warnings)
        except ParseError as e:
            LOG.warning("%s", e)
            result.warnings.append(str(e))
            continue

        existing = by_path.get(file_hunks.file)
        if existing is None:
            by_path[file_hunks.file] = file_hunks
            result.files.append(file_hunks)
            continue

        # Same path twice (e.g. staged + unstaged diffs concatenated)
        warning = f"Duplicate diff section for {file_hunks.file}; merged"
        LOG.warning("%s", warning)
        result.warnings.append(warning)
        existing.hunks.extend(h for h in file_hunks.hunks if not h.placeholder)
        # A type change (file <-> symlink) arrives as a delete plus an add
        existing.is_binary = existing.is_binary or file_hunks.is_binary
        existing.is_symlink = existing.is_symlink or file_hunks.is_symlink
        existing.is_submodule = existing.is_submodule or file_hunks.is_submodule

    return result


def _section_path(lines: list[str]) -> tuple[Optional[str], Optional[str]]:
    """Return (old_path, new_path) for a section, or (None, None)."""
    old_path: Optional[str] = None
    new_path: Optional[str] = None

    header_match = _GIT_HEADER_RE.match(lines[0].rstrip("\r"))
    if header_match:
        old_path = _unquote(header_match.group("old"))
        new_path = _unquote(header_match.group("new"))

    # The ---/+++ lines are unambiguous even when paths contain " b/"
    for line in lines[1:]:
        if line.startswith("@@"):
            break
        if line.startswith("+++ "):
            target = line[4:].rstrip("\r").split("\t")[0]
            if target != "/dev/null":
                new_path = _strip_side(target, "b/")
        elif line.startswith("--- "):
            source = line[4:].rstrip("\r").split("\t")[0]
            if source != "/dev/null":
                old_path = _strip_side(source, "a/")
        elif line.startswith("rename from "):
            old_path = line[len("rename from "):].rstrip("\r")
        elif line.startswith("rename to "):
            new_path = line[len("rename to "):].rstrip("\r")

    # Deleted files only carry the old side
    if new_path is None and old_path is not None:
        new_path = old_path
    return old_path, new_path


def _parse_file_section(section: str, warnings: list[str]) -> FileHunks:
    """Parse a single file section from the diff.

    Args:
        section: Text from 'diff --git' up to the next section
        warnings: List to append warnings to

    Returns:
        FileHunks for the section

    Raises:
        ParseError: If no usable path can be extracted.
    """
    lines = section.split("\n")
    old_path, file_path = _section_path(lines)

    if not is_valid_path(file_path):
        first_line = lines[0][:120]
        raise ParseError(f"Skipped diff section with unusable path: {first_line!r}")

    # Only the region before the first @@ is scanned for file-level markers;
    # content lines may legitimately contain the same words.
    header_lines: list[str] = []
    for line in lines:
        if line.startswith("@@"):
            break
        header_lines.append(line)

    is_new = any(ln.startswith("new file mode") for ln in header_lines)
    is_deleted = any(ln.startswith("deleted file mode") for ln in header_lines)
    is_binary = any(
        ln.startswith("Binary files ") or ln.startswith("GIT binary patch") for ln in header_lines
    )
    is_renamed = bool(old_path and old_path != file_path and not is_new and not is_deleted)
    modes = _header_modes(header_lines)

    file_hunks = FileHunks(
        file=file_path,
        header_lines=header_lines,
        is_new=is_new,
        is_deleted=is_deleted,
        is_binary=is_binary,
        is_renamed=is_renamed,
        is_symlink=_SYMLINK_MODE in modes,
        is_submodule=_SUBMODULE_MODE in modes,
        old_path=old_path if is_renamed else None,
    )

    has_markers = len(header_lines) < len(lines)
    if is_binary or not has_markers:
        file_hunks.hunks = [_placeholder_hunk(file_hunks)]
        return file_hunks

    hunk_text = "\n".join(lines[len(header_lines):])
    hunks = _parse_hunks(hunk_text, file_path)
    if not hunks:
        warning = f"Unparseable hunk header in {file_path}; file kept as a single unit"
        LOG.warning("%s", warning)
        warnings.append(warning)
        file_hunks.hunks = [_placeholder_hunk(file_hunks)]
        return file_hunks

    file_hunks.hunks = hunks
    return file_hunks


def _header_modes(header_lines: list[str]) -> set[str]:
    modes: set[str] = set()
    for line in header_lines:
        match = _MODE_LINE_RE.match(line.rstrip("\r"))
        if match:
            modes.add(match.group("mode") or match.group("index_mode"))
    return modes


def _placeholder_hunk(file_hunks: FileHunks) -> DiffHunk:
    if file_hunks.is_binary:
        summary = "Binary file"
    elif file_hunks.is_submodule:
        summary = "Submodule"
    elif file_hunks.is_symlink:
        summary = "Symlink"
    elif file_hunks.is_new:
        summary = "New file"
    elif file_hunks.is_deleted:
        summary = "Deleted file"
    elif file_hunks.is_renamed:
        summary = "Renamed file"
    else:
        summary = "Modified file"

    return DiffHunk(
        file=file_hunks.file,
        old_start=0,
        old_lines=0,
        new_start=0,
        new_lines=0,
        header="",
        lines=[],
        summary=summary,
        placeholder=True,
    )


def _parse_hunks(text: str, file_path: str) -> list[DiffHunk]:
    """Parse hunks from the hunk portion of a file section.

    Args:
        text: Section text starting at the first @@ line
        file_path: Path to the file

    Returns:
        List of DiffHunk objects in header order; empty if no header parses
    """
    headers = list(_HUNK_HEADER_RE.finditer(text))
    hunks: list[DiffHunk] = []

    for i, match in enumerate(headers):
        body_start = match.end() + 1
        body_end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        body = text[body_start:body_end] if body_start <= body_end else ""

        old_lines = int(match.group("old_lines")) if match.group("old_lines") is not None else 1
        new_lines = int(match.group("new_lines")) if match.group("new_lines") is not None else 1
        context = match.group("context").strip() or None

        hunk = DiffHunk(
            file=file_path,
            old_start=int(match.group("old_start")),
            old_lines=old_lines,
            new_start=int(match.group("new_start")),
            new_lines=new_lines,
            header=match.group(0).rstrip("\r"),
            lines=_take_hunk_lines(body.split("\n"), old_lines, new_lines),
            context=context,
        )
        hunk.summary = _summarize_hunk(hunk)
        hunks.append(hunk)

    return hunks


def _take_hunk_lines(raw_lines: list[str], old_lines: int, new_lines: int) -> list[str]:
    """Consume body lines until the declared old/new counts are met.

    Anything after that (blank separators between concatenated diffs,
    trailing newline artifacts) is dropped.
    """
    taken: list[str] = []
    old_seen = 0
    new_seen = 0

    for line in raw_lines:
        if old_seen >= old_lines and new_seen >= new_lines:
            if line.startswith(NO_NEWLINE_MARKER):
                taken.append(line)
            break

        if line.startswith(NO_NEWLINE_MARKER):
            taken.append(line)
        elif line.startswith("+"):
            taken.append(line)
            new_seen += 1
        elif line.startswith("-"):
            taken.append(line)
            old_seen += 1
        elif line.startswith(" ") or line == "":
            # Some tools strip the space from blank context lines
            taken.append(line if line else " ")
            old_seen += 1
            new_seen += 1
        else:
            break

    return taken


def _summarize_hunk(hunk: DiffHunk) -> str:
    """Build a one-line description of a hunk."""
    if hunk.context:
        return hunk.context

    added = hunk.additions
    removed = hunk.deletions
    if added and not removed:
        return f"Added {added} lines"
    if removed and not added:
        return f"Removed {removed} lines"
    return f"Modified {added} / removed {removed}"
