"""Shared test fixtures and configuration."""

import subprocess
import tempfile
from pathlib import Path

import pytest

from hunksplit.git import CommitError, NotFound, StageError


def run_git(repo: Path, *args: str) -> str:
    """Run git in a test repository and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _init_repo(repo_dir: Path) -> Path:
    """Initialise a git repository without any commits."""
    repo_dir.mkdir()

    run_git(repo_dir, "init", "-q")
    run_git(repo_dir, "config", "user.email", "test@example.com")
    run_git(repo_dir, "config", "user.name", "Test User")
    run_git(repo_dir, "config", "commit.gpgsign", "false")
    run_git(repo_dir, "config", "core.autocrlf", "false")

    return repo_dir


@pytest.fixture
def empty_repo(tmp_path):
    """Create a git repository without any commits."""
    return _init_repo(tmp_path / "empty_repo")


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository with an initial commit."""
    repo_dir = _init_repo(tmp_path / "test_repo")
    (repo_dir / "README.md").write_text("# Test Repo\n")
    run_git(repo_dir, "add", "README.md")
    run_git(repo_dir, "commit", "-q", "-m", "Initial commit")
    return repo_dir


@pytest.fixture
def sample_diff():
    """Two modified hunks in one file plus a new file."""
    return """diff --git a/src/main.py b/src/main.py
index 1234567..abcdefg 100644
--- a/src/main.py
+++ b/src/main.py
@@ -10,3 +10,5 @@ def main():
     print("Hello")
+    print("World")
+    print("!")
     return 0
@@ -20,1 +22,3 @@ def helper():
     pass
+    # New comment
+    return True
diff --git a/tests/test_main.py b/tests/test_main.py
new file mode 100644
index 0000000..1234567
--- /dev/null
+++ b/tests/test_main.py
@@ -0,0 +1,4 @@
+import pytest
+
+def test_main():
+    assert True
"""


class FakeBinding:
    """In-memory VCS binding with failure injection.

    head: committed content per path
    working: working-tree content per path
    """

    def __init__(self, head: dict[str, str], working: dict[str, str]):
        self.head = dict(head)
        self.working = dict(working)
        self.staged: dict[str, object] = {}
        self.commits: list[dict] = []
        self.fail_stage_for: set[str] = set()
        self.fail_commit_messages: set[str] = set()
        self.fail_writes: set[str] = set()
        self.calls: list[str] = []

    def head_revision(self):
        return f"rev{len(self.commits)}" if self.head or self.commits else None

    def read_committed_content(self, file):
        return self.head.get(file, NotFound)

    def read_working_content(self, file):
        return self.working.get(file, NotFound)

    def write_working_content(self, file, content):
        if file in self.fail_writes:
            raise OSError(f"disk full writing {file}")
        self.calls.append(f"write {file}")
        self.working[file] = content

    def remove_working_file(self, file):
        self.calls.append(f"remove {file}")
        self.working.pop(file, None)

    def stage(self, files):
        self.calls.append(f"stage {','.join(files)}")
        for file in files:
            if file in self.fail_stage_for:
                raise StageError(f"cannot stage {file}")
            self.staged[file] = self.working.get(file, NotFound)

    def unstage_all(self):
        self.calls.append("unstage_all")
        self.staged.clear()

    def commit(self, message, body=None, author=None):
        if message in self.fail_commit_messages:
            raise CommitError(f"hook rejected {message}")
        if not self.staged:
            raise CommitError("nothing to commit")
        for file, content in self.staged.items():
            if content is NotFound:
                self.head.pop(file, None)
            else:
                self.head[file] = content
        self.commits.append(
            {"message": message, "body": body, "author": author, "files": sorted(self.staged)}
        )
        self.staged.clear()


@pytest.fixture
def fake_binding_factory():
    """Build FakeBinding instances."""
    return FakeBinding
