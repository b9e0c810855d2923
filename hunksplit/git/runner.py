"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its stripped output
- _run_git_raw: Run a git command and return its exact stdout
- get_repo_root: Get the root directory of the current git repository
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from hunksplit.git.exceptions import GitError

LOG = logging.getLogger(__name__)

# Content and diffs are decoded without newline translation so CRLF files
# survive a parse/apply/write cycle byte for byte.
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def _run_git_command(
    args: list[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the process cwd).
        timeout: Optional timeout in seconds.

    Returns:
        The stdout of the git command, stripped.

    Raises:
        GitError: If the command fails.
    """
    return _run_git_raw(args, cwd=cwd, timeout=timeout).strip()


def _run_git_raw(
    args: list[str],
    cwd: Optional[Union[str, Path]] = None,
    input_text: Optional[str] = None,
    timeout: Optional[float] = None,
    ok_returncodes: tuple[int, ...] = (0,),
) -> str:
    """Run a git command and return its stdout exactly as produced.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in.
        input_text: Optional text fed to stdin.
        timeout: Optional timeout in seconds.
        ok_returncodes: Exit codes treated as success (git diff --no-index
            exits 1 when the inputs differ).

    Returns:
        The decoded stdout.

    Raises:
        GitError: If git is missing, times out, or exits with another code.
    """
    cmd = ["git"] + args
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            input=input_text.encode(ENCODING, ENCODING_ERRORS) if input_text is not None else None,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command timed out after {timeout}s: git {' '.join(args)}")

    stderr = result.stderr.decode(ENCODING, "replace").strip()
    if result.returncode not in ok_returncodes:
        LOG.debug("git stderr: %s", stderr)
        raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr}")

    return result.stdout.decode(ENCODING, ENCODING_ERRORS)


def get_repo_root(cwd: Optional[Union[str, Path]] = None) -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=cwd)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")
