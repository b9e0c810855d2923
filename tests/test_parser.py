"""Tests for hunksplit.compose.parser module."""

from hunksplit.compose import MAX_PATH_LENGTH, parse_diff
from hunksplit.compose.parser import is_valid_path


class TestParseDiff:
    """Tests for parse_diff function."""

    def test_parses_multiple_files(self, sample_diff):
        """Test parsing diff with multiple files."""
        result = parse_diff(sample_diff)

        assert [f.file for f in result.files] == ["src/main.py", "tests/test_main.py"]
        assert result.warnings == []

    def test_parses_multiple_hunks(self, sample_diff):
        """Test parsing file with multiple hunks."""
        result = parse_diff(sample_diff)

        hunks = result.files[0].hunks
        assert len(hunks) == 2
        assert (hunks[0].old_start, hunks[0].old_lines, hunks[0].new_start, hunks[0].new_lines) == (10, 3, 10, 5)
        assert (hunks[1].old_start, hunks[1].old_lines, hunks[1].new_start, hunks[1].new_lines) == (20, 1, 22, 3)
        assert result.hunk_count == 3

    def test_hunk_header_and_context(self, sample_diff):
        """Test the header line and enclosing context are kept."""
        hunk = parse_diff(sample_diff).files[0].hunks[0]

        assert hunk.header == "@@ -10,3 +10,5 @@ def main():"
        assert hunk.context == "def main():"
        assert hunk.summary == "def main():"

    def test_detects_new_file(self, sample_diff):
        """Test detecting new file."""
        result = parse_diff(sample_diff)

        new_file = result.files[1]
        assert new_file.is_new is True
        assert new_file.whole_file is False
        assert new_file.hunks[0].old_start == 0
        assert new_file.hunks[0].old_lines == 0

    def test_empty_diff(self):
        """Test parsing empty diff."""
        result = parse_diff("")

        assert result.files == []
        assert result.warnings == []

    def test_text_before_first_header_is_ignored(self, sample_diff):
        result = parse_diff("warning: LF will be replaced by CRLF\n" + sample_diff)

        assert len(result.files) == 2

    def test_line_counts_match_header(self, sample_diff):
        """Filtering lines by tag yields the declared old/new counts."""
        for file_hunks in parse_diff(sample_diff).files:
            for hunk in file_hunks.hunks:
                old = [ln for ln in hunk.lines if ln[:1] in (" ", "-")]
                new = [ln for ln in hunk.lines if ln[:1] in (" ", "+")]
                assert len(old) == hunk.old_lines
                assert len(new) == hunk.new_lines

    def test_omitted_counts_default_to_one(self):
        diff = """diff --git a/a.txt b/a.txt
index 1..2 100644
--- a/a.txt
+++ b/a.txt
@@ -3 +3 @@
-old
+new
"""
        hunk = parse_diff(diff).files[0].hunks[0]

        assert hunk.old_lines == 1
        assert hunk.new_lines == 1
        assert hunk.lines == ["-old", "+new"]

    def test_trailing_noise_is_discarded(self):
        diff = """diff --git a/a.txt b/a.txt
index 1..2 100644
--- a/a.txt
+++ b/a.txt
@@ -1,2 +1,2 @@
 keep
-old
+new


"""
        hunk = parse_diff(diff).files[0].hunks[0]

        assert hunk.lines == [" keep", "-old", "+new"]

    def test_keeps_no_newline_marker(self):
        diff = """diff --git a/a.txt b/a.txt
index 1..2 100644
--- a/a.txt
+++ b/a.txt
@@ -1 +1 @@
-old
\\ No newline at end of file
+new
\\ No newline at end of file
"""
        hunk = parse_diff(diff).files[0].hunks[0]

        assert hunk.lines == [
            "-old",
            "\\ No newline at end of file",
            "+new",
            "\\ No newline at end of file",
        ]

    def test_indices_are_dense_per_file(self, sample_diff):
        result = parse_diff(sample_diff)

        assert len(result.files[0].hunks) == 2
        assert len(result.files[1].hunks) == 1


class TestSectionBoundaries:
    """Section splitting must only happen at line-start headers."""

    def test_header_text_inside_content_does_not_split(self):
        diff = """diff --git a/docs/guide.md b/docs/guide.md
index 1..2 100644
--- a/docs/guide.md
+++ b/docs/guide.md
@@ -1,2 +1,3 @@
 Run this:
+    diff --git a/x b/x
 done
"""
        result = parse_diff(diff)

        assert len(result.files) == 1
        assert result.files[0].hunks[0].lines == [
            " Run this:",
            "+    diff --git a/x b/x",
            " done",
        ]

    def test_added_line_starting_with_header_stays_in_hunk(self):
        """A '+diff --git a/' line is content, never a boundary."""
        diff = """diff --git a/notes.txt b/notes.txt
index 1..2 100644
--- a/notes.txt
+++ b/notes.txt
@@ -1 +1,2 @@
 intro
+diff --git a/fake b/fake
"""
        result = parse_diff(diff)

        assert len(result.files) == 1
        assert result.files[0].hunks[0].additions == 1

    def test_markers_in_content_do_not_change_flags(self):
        diff = """diff --git a/script.sh b/script.sh
index 1..2 100644
--- a/script.sh
+++ b/script.sh
@@ -1 +1,2 @@
 echo start
+echo "new file mode 100644 deleted file mode Binary files"
"""
        file_hunks = parse_diff(diff).files[0]

        assert not file_hunks.is_new
        assert not file_hunks.is_deleted
        assert not file_hunks.is_binary


class TestPlaceholders:
    """Sections without parseable hunks become a single placeholder."""

    def test_binary_file(self):
        diff = """diff --git a/image.png b/image.png
index 1234567..abcdefg 100644
Binary files a/image.png and b/image.png differ
"""
        file_hunks = parse_diff(diff).files[0]

        assert file_hunks.is_binary
        assert file_hunks.whole_file
        assert len(file_hunks.hunks) == 1
        assert file_hunks.hunks[0].placeholder
        assert file_hunks.hunks[0].summary == "Binary file"
        assert file_hunks.hunks[0].lines == []

    def test_empty_new_file(self):
        diff = """diff --git a/empty.txt b/empty.txt
new file mode 100644
index 0000000..e69de29
"""
        hunk = parse_diff(diff).files[0].hunks[0]

        assert hunk.placeholder
        assert hunk.summary == "New file"

    def test_deleted_file_keeps_hunks_but_is_whole_file(self):
        diff = """diff --git a/old.txt b/old.txt
deleted file mode 100644
index 1234567..0000000
--- a/old.txt
+++ /dev/null
@@ -1,2 +0,0 @@
-one
-two
"""
        file_hunks = parse_diff(diff).files[0]

        assert file_hunks.file == "old.txt"
        assert file_hunks.is_deleted
        assert file_hunks.whole_file
        assert file_hunks.hunks[0].summary == "Removed 2 lines"

    def test_mode_change_only(self):
        diff = """diff --git a/run.sh b/run.sh
old mode 100644
new mode 100755
"""
        hunk = parse_diff(diff).files[0].hunks[0]

        assert hunk.placeholder
        assert hunk.summary == "Modified file"

    def test_unparseable_hunk_header_degrades_with_warning(self):
        diff = """diff --git a/a.txt b/a.txt
index 1..2 100644
--- a/a.txt
+++ b/a.txt
@@ garbage @@
+x
"""
        result = parse_diff(diff)

        assert result.files[0].hunks[0].placeholder
        assert any("a.txt" in w for w in result.warnings)


class TestPaths:
    """Tests for path extraction and validation."""

    def test_path_from_plus_plus_plus_line(self):
        diff = """diff --git a/dir with space/f.txt b/dir with space/f.txt
index 1..2 100644
--- a/dir with space/f.txt
+++ b/dir with space/f.txt
@@ -1 +1 @@
-a
+b
"""
        assert parse_diff(diff).files[0].file == "dir with space/f.txt"

    def test_rename_records_old_path(self):
        diff = """diff --git a/old_name.py b/new_name.py
similarity index 90%
rename from old_name.py
rename to new_name.py
index 1..2 100644
--- a/old_name.py
+++ b/new_name.py
@@ -1 +1 @@
-a
+b
"""
        file_hunks = parse_diff(diff).files[0]

        assert file_hunks.file == "new_name.py"
        assert file_hunks.is_renamed
        assert file_hunks.old_path == "old_name.py"
        assert file_hunks.paths == ["old_name.py", "new_name.py"]
        assert file_hunks.whole_file

    def test_quoted_path_is_unquoted(self):
        diff = """diff --git "a/na\\303\\257ve.txt" "b/na\\303\\257ve.txt"
index 1..2 100644
--- "a/na\\303\\257ve.txt"
+++ "b/na\\303\\257ve.txt"
@@ -1 +1 @@
-a
+b
"""
        assert parse_diff(diff).files[0].file == "naïve.txt"

    def test_invalid_path_section_is_dropped_with_warning(self, sample_diff):
        bad = """diff --git "a/bad\\007name.txt" "b/bad\\007name.txt"
index 1..2 100644
--- "a/bad\\007name.txt"
+++ "b/bad\\007name.txt"
@@ -1 +1 @@
-a
+b
"""
        result = parse_diff(bad + sample_diff)

        assert [f.file for f in result.files] == ["src/main.py", "tests/test_main.py"]
        assert len(result.warnings) == 1

    def test_is_valid_path(self):
        assert is_valid_path("src/app.py")
        assert not is_valid_path("")
        assert not is_valid_path(None)
        assert not is_valid_path("a\nb")
        assert not is_valid_path("a\x07b")
        assert not is_valid_path("a\x00b")
        assert is_valid_path("what?.md")
        assert is_valid_path("a*b <draft> \"x\" |.txt")
        assert not is_valid_path("x" * (MAX_PATH_LENGTH + 1))
        assert is_valid_path("x" * MAX_PATH_LENGTH)


    def test_wildcard_characters_are_kept(self):
        diff = """diff --git a/what?.md b/what?.md
index 1..2 100644
--- a/what?.md
+++ b/what?.md
@@ -1 +1 @@
-a
+b
"""
        result = parse_diff(diff)

        assert [f.file for f in result.files] == ["what?.md"]
        assert result.warnings == []


class TestSpecialModes:
    """Symlinks and submodules are committed as a whole."""

    def test_symlink_retarget(self):
        diff = """diff --git a/link b/link
index 2e65efe..9d4d5b8 120000
--- a/link
+++ b/link
@@ -1 +1 @@
-a.txt
\\ No newline at end of file
+missing.txt
\\ No newline at end of file
"""
        file_hunks = parse_diff(diff).files[0]

        assert file_hunks.is_symlink
        assert not file_hunks.is_submodule
        assert file_hunks.whole_file
        assert not file_hunks.hunks[0].placeholder

    def test_new_symlink(self):
        diff = """diff --git a/link b/link
new file mode 120000
index 0000000..2e65efe
--- /dev/null
+++ b/link
@@ -0,0 +1 @@
+a.txt
\\ No newline at end of file
"""
        file_hunks = parse_diff(diff).files[0]

        assert file_hunks.is_new
        assert file_hunks.is_symlink
        assert file_hunks.whole_file

    def test_submodule_bump(self):
        diff = """diff --git a/mod b/mod
index 1111111..2222222 160000
--- a/mod
+++ b/mod
@@ -1 +1 @@
-Subproject commit 1111111111111111111111111111111111111111
+Subproject commit 2222222222222222222222222222222222222222
"""
        file_hunks = parse_diff(diff).files[0]

        assert file_hunks.is_submodule
        assert file_hunks.whole_file
        assert file_hunks.paths == ["mod"]

    def test_regular_file_is_not_special(self, sample_diff):
        for file_hunks in parse_diff(sample_diff).files:
            assert not file_hunks.is_symlink
            assert not file_hunks.is_submodule
            assert not file_hunks.whole_file

    def test_mode_text_in_content_is_ignored(self):
        diff = """diff --git a/notes.txt b/notes.txt
index 1..2 100644
--- a/notes.txt
+++ b/notes.txt
@@ -1 +1,2 @@
 intro
+new file mode 120000
"""
        file_hunks = parse_diff(diff).files[0]

        assert not file_hunks.is_symlink
        assert not file_hunks.whole_file

    def test_type_change_merges_flags(self):
        diff = """diff --git a/entry b/entry
deleted file mode 100644
index 1234567..0000000
--- a/entry
+++ /dev/null
@@ -1 +0,0 @@
-plain text
diff --git a/entry b/entry
new file mode 120000
index 0000000..2e65efe
--- /dev/null
+++ b/entry
@@ -0,0 +1 @@
+a.txt
\\ No newline at end of file
"""
        result = parse_diff(diff)

        assert len(result.files) == 1
        assert result.files[0].is_symlink
        assert result.files[0].whole_file


class TestDuplicateSections:
    def test_duplicate_sections_are_merged(self):
        section = """diff --git a/a.txt b/a.txt
index 1..2 100644
--- a/a.txt
+++ b/a.txt
@@ -1 +1 @@
-a
+b
"""
        result = parse_diff(section + section)

        assert len(result.files) == 1
        assert len(result.files[0].hunks) == 2
        assert any("Duplicate" in w for w in result.warnings)


class TestSummaries:
    def _single_hunk(self, body: str, header: str):
        diff = (
            "diff --git a/f.txt b/f.txt\nindex 1..2 100644\n--- a/f.txt\n+++ b/f.txt\n"
            f"{header}\n{body}"
        )
        return parse_diff(diff).files[0].hunks[0]

    def test_added(self):
        hunk = self._single_hunk(" a\n+b\n+c\n", "@@ -1 +1,3 @@")
        assert hunk.summary == "Added 2 lines"

    def test_removed(self):
        hunk = self._single_hunk(" a\n-b\n", "@@ -1,2 +1 @@")
        assert hunk.summary == "Removed 1 lines"

    def test_modified(self):
        hunk = self._single_hunk("-a\n-b\n+c\n", "@@ -1,2 +1 @@")
        assert hunk.summary == "Modified 1 / removed 2"
