"""Hunk registry for the hunksplit commit engine.

Contains:
- HunkRegistry: Lookup table from HunkRef to DiffHunk for one run
"""

from typing import Optional

from hunksplit.compose.models import DiffHunk, FileHunks, HunkRef


class HunkRegistry:
    """Index of every parsed hunk, keyed by file path and hunk index.

    A registry is built once per run from parser output. HunkRefs are only
    meaningful against the registry they were resolved with.
    """

    def __init__(self, files: list[FileHunks]):
        self._files: dict[str, FileHunks] = {}
        self._order: dict[str, int] = {}
        for position, file_hunks in enumerate(files):
            self._files[file_hunks.file] = file_hunks
            self._order.setdefault(file_hunks.file, position)

    @property
    def files(self) -> list[FileHunks]:
        """Registered files in diff order."""
        return list(self._files.values())

    @property
    def file_count(self) -> int:
        return len(self._files)

    @property
    def hunk_count(self) -> int:
        return sum(len(f.hunks) for f in self._files.values())

    def file_hunks(self, path: str) -> Optional[FileHunks]:
        return self._files.get(path)

    def contains(self, ref: HunkRef) -> bool:
        file_hunks = self._files.get(ref.file)
        if file_hunks is None:
            return False
        return 0 <= ref.hunk_index < len(file_hunks.hunks)

    def get(self, ref: HunkRef) -> DiffHunk:
        """Return the hunk a ref points to.

        Raises:
            KeyError: If the ref is not registered.
        """
        if not self.contains(ref):
            raise KeyError(str(ref))
        return self._files[ref.file].hunks[ref.hunk_index]

    def refs_for_file(self, path: str) -> list[HunkRef]:
        file_hunks = self._files.get(path)
        if file_hunks is None:
            return []
        return [HunkRef(path, i) for i in range(len(file_hunks.hunks))]

    def all_refs(self) -> list[HunkRef]:
        """Every registered ref, in diff order."""
        refs: list[HunkRef] = []
        for path in self._files:
            refs.extend(self.refs_for_file(path))
        return refs

    def sort_key(self, ref: HunkRef) -> tuple[int, int]:
        """Sort key that orders refs the way they appear in the diff."""
        return self._order.get(ref.file, len(self._order)), ref.hunk_index

    def __len__(self) -> int:
        return self.hunk_count

    def __contains__(self, ref: object) -> bool:
        return isinstance(ref, HunkRef) and self.contains(ref)
