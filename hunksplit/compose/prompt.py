"""Classifier prompt utilities for the hunksplit commit engine.

Contains:
- CLASSIFY_SYSTEM_PROMPT: System prompt for hunk grouping
- format_hunks_for_llm: Render the hunk listing the classifier sees
- get_stats: File and hunk counts for the prompt
- build_classify_prompt: Build the user prompt for hunk grouping
"""

from hunksplit.compose.models import FileHunks


CLASSIFY_SYSTEM_PROMPT = """You are an expert software engineer splitting a set of uncommitted changes into a clean sequence of commits.

Your task is to group the given hunks into logical, atomic commits:
- Each commit should be cohesive and focused on one logical change
- Separate features, refactors, tests, docs, and config changes
- Order groups so that each commit builds on the previous ones
- Hunks of the same file may go to different commits when they are unrelated
- Reference hunks ONLY by the file path and hunk index given in the listing

Output ONLY valid JSON matching the required schema. No markdown fences or commentary."""


def _file_label(file_hunks: FileHunks) -> str:
    if file_hunks.is_binary:
        return "binary file, commit as a whole"
    if file_hunks.is_submodule:
        return "submodule, commit as a whole"
    if file_hunks.is_symlink:
        return "symlink, commit as a whole"
    if file_hunks.is_new:
        return "new file"
    if file_hunks.is_deleted:
        return "deleted file, commit as a whole"
    if file_hunks.is_renamed:
        return f"renamed from {file_hunks.old_path}, commit as a whole"
    if file_hunks.whole_file:
        return "commit as a whole"
    return ""


def format_hunks_for_llm(files: list[FileHunks], max_snippet_lines: int = 20) -> str:
    """Format the parsed hunks for inclusion in the classifier prompt.

    Args:
        files: Parsed files with hunks
        max_snippet_lines: Maximum changed lines to show per hunk

    Returns:
        Formatted listing, one block per hunk
    """
    lines = ["[HUNKS]"]

    for file_hunks in files:
        label = _file_label(file_hunks)
        lines.append(f"\nFile: {file_hunks.file}" + (f"  ({label})" if label else ""))

        for index, hunk in enumerate(file_hunks.hunks):
            lines.append(f"\n  Hunk {index}: {hunk.summary}")
            if hunk.placeholder:
                continue
            lines.append(f"    {hunk.header}")
            for snippet_line in hunk.snippet(max_snippet_lines).split("\n"):
                lines.append(f"    {snippet_line}")

    return "\n".join(lines)


def get_stats(files: list[FileHunks]) -> dict[str, int]:
    """Count files and hunks."""
    return {
        "files": len(files),
        "hunks": sum(len(f.hunks) for f in files),
        "additions": sum(h.additions for f in files for h in f.hunks),
        "deletions": sum(h.deletions for f in files for h in f.hunks),
    }


def build_classify_prompt(
    files: list[FileHunks],
    branch: str,
    recent_commits: list[str],
) -> str:
    """Build the user prompt for hunk grouping.

    Args:
        files: Parsed files with hunks
        branch: Current branch name
        recent_commits: Last N commit subjects

    Returns:
        User prompt string
    """
    stats = get_stats(files)
    listing = format_hunks_for_llm(files)

    prompt = f"""Group the following changes into a sequence of commits.

[CONTEXT]
Branch: {branch}
Recent commits: {', '.join(recent_commits[:5]) if recent_commits else 'None'}

[STATS]
Files with changes: {stats['files']}
Total hunks: {stats['hunks']}
Lines added: {stats['additions']}
Lines removed: {stats['deletions']}

{listing}

[OUTPUT SCHEMA]
Return a JSON object with this exact structure:
{{
  "groups": [
    {{
      "number": 1,
      "description": "<why these hunks belong together>",
      "hunks": [{{"file": "<path>", "hunkIndex": 0}}],
      "commitMessage": "<short subject in imperative mood, max 72 chars>",
      "commitBody": "<optional longer explanation, or null>"
    }}
  ],
  "summary": "<one sentence describing the whole change set>"
}}

[RULES]
1. Reference ONLY files and hunk indices from the listing above
2. Each hunk must appear in exactly ONE group
3. Every hunk should be assigned to some group
4. Number groups from 1 in the order they should be committed
5. Files marked "commit as a whole" must not be split across groups

Output ONLY the JSON object:"""

    return prompt
