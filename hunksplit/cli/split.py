"""CLI commands for splitting working-tree changes into commits."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from hunksplit import global_config
from hunksplit.cli.utils import echo_event, plan_to_dict, render_plan, render_report
from hunksplit.compose import (
    CommitOrchestrator,
    HunkRegistry,
    ParseResult,
    ResolutionError,
    RestoreError,
    format_hunks_for_llm,
    get_stats,
    parse_diff,
    resolve_groups,
)
from hunksplit.config import LLMProvider, load_config
from hunksplit.git import DiffScope, GitBinding, GitError, NoChangesError, get_repo_root
from hunksplit.llm import (
    JSONParseError,
    LLMError,
    MissingAPIKeyError,
    classify_hunks,
    get_provider,
)
from hunksplit.logging_utils import configure_logging

LOG = logging.getLogger(__name__)


def _load_changes(scope: DiffScope) -> tuple[Path, GitBinding, str, ParseResult]:
    """Locate the repository, read the diff and parse it.

    Exits with status 0 when there is nothing to split.
    """
    try:
        repo_root = get_repo_root()
        binding = GitBinding(repo_root)
        if scope == DiffScope.UNSTAGED and binding.list_staged_files():
            # Unstaged hunks are relative to the index, not to HEAD
            typer.echo("--scope unstaged needs an empty index; use --scope all instead.", err=True)
            raise typer.Exit(1)
        raw_diff = binding.changes_diff(scope)
    except NoChangesError:
        typer.echo("No changes to split.", err=True)
        raise typer.Exit(0)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    parsed = parse_diff(raw_diff)
    for warning in parsed.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    if not parsed.files:
        typer.echo("No parseable changes found.", err=True)
        raise typer.Exit(0)

    return repo_root, binding, raw_diff, parsed


def _load_plan_file(from_plan: Path) -> dict:
    if not from_plan.exists():
        typer.echo(f"Plan file not found: {from_plan}", err=True)
        raise typer.Exit(1)
    try:
        return json.loads(from_plan.read_text())
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Failed to load plan: {e}", err=True)
        raise typer.Exit(1)


def split_command(
    scope: DiffScope = typer.Option(
        DiffScope.ALL,
        "--scope",
        "-s",
        help="Which changes to split: all, staged or unstaged",
        case_sensitive=False,
    ),
    from_plan: Optional[Path] = typer.Option(
        None,
        "--from-plan",
        help="Load the grouping JSON from a file instead of calling the LLM",
    ),
    show_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the plan and run report as JSON",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show the proposed commits without touching the repository",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip the confirmation prompt",
    ),
    author: Optional[str] = typer.Option(
        None,
        "--author",
        help='Commit author as "Name <email>" (defaults to the configured author)',
    ),
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        help="Override the configured LLM provider",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Override the configured model",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log output (-v info, -vv debug)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print the classifier prompt and raw response",
    ),
) -> None:
    """Split uncommitted changes into a sequence of focused commits.

    Parses the working-tree diff into hunks, asks the LLM (or a plan file)
    how to group them, then commits each group in turn. Hunks that no group
    claims stay in the working tree, and the working tree is always put back
    as it was.
    """
    configure_logging(2 if debug else verbose)
    load_config()

    repo_root, binding, raw_diff, parsed = _load_changes(scope)
    registry = HunkRegistry(parsed.files)

    if from_plan:
        response = _load_plan_file(from_plan)
        typer.echo(f"Loaded plan from {from_plan}", err=True)
    else:
        stats = get_stats(parsed.files)
        typer.echo(f"Grouping {stats['hunks']} hunks in {stats['files']} files...", err=True)
        try:
            llm_provider = LLMProvider(provider.lower()) if provider else None
        except ValueError:
            typer.echo(f"Invalid provider: {provider}", err=True)
            raise typer.Exit(1)

        try:
            response, result = classify_hunks(
                parsed.files,
                branch=binding.current_branch(),
                recent_commits=binding.recent_commit_subjects(5),
                provider=get_provider(llm_provider, model),
            )
        except MissingAPIKeyError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
        except JSONParseError as e:
            typer.echo(f"Failed to parse LLM response: {e}", err=True)
            raise typer.Exit(1)
        except (LLMError, GitError) as e:
            typer.echo(f"Error generating plan: {e}", err=True)
            raise typer.Exit(1)

        if debug:
            typer.echo(f"LLM Response ({result.input_tokens} in, {result.output_tokens} out):", err=True)
            typer.echo(result.raw_response, err=True)

    try:
        plan = resolve_groups(response, registry)
    except ResolutionError as e:
        typer.echo(f"Invalid plan: {e}", err=True)
        raise typer.Exit(1)

    if not show_json:
        render_plan(plan, registry)

    if dry_run:
        if show_json:
            typer.echo(json.dumps({"plan": plan_to_dict(plan)}, indent=2))
        typer.echo("Dry run - no changes made to git state.", err=True)
        raise typer.Exit(0)

    if not plan.groups:
        typer.echo("The plan has no commit groups.", err=True)
        raise typer.Exit(1)

    if not yes:
        if not typer.confirm("Create these commits?", default=False):
            typer.echo("Cancelled.", err=True)
            raise typer.Exit(0)

    try:
        author = author or global_config.get_default_author()
    except global_config.GlobalConfigError as e:
        LOG.warning("Ignoring configured author: %s", e)

    orchestrator = CommitOrchestrator(
        binding,
        author=author,
        on_event=None if show_json else echo_event,
    )

    try:
        report = orchestrator.run(plan, registry, repo_root=repo_root, raw_diff=raw_diff)
    except RestoreError as e:
        typer.echo("", err=True)
        typer.echo("!" * 60, err=True)
        typer.echo(f"FAILED TO RESTORE THE WORKING TREE: {e}", err=True)
        if e.recovery:
            typer.echo("", err=True)
            typer.echo("MANUAL RECOVERY:", err=True)
            for command in e.recovery:
                typer.echo(f"  {command}", err=True)
        typer.echo("!" * 60, err=True)
        raise typer.Exit(2)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if show_json:
        typer.echo(json.dumps({"plan": plan_to_dict(plan), "report": report.to_dict()}, indent=2))
    else:
        render_report(report)

    raise typer.Exit(0 if report.all_succeeded else 1)


def hunks_command(
    scope: DiffScope = typer.Option(
        DiffScope.ALL,
        "--scope",
        "-s",
        help="Which changes to list: all, staged or unstaged",
        case_sensitive=False,
    ),
) -> None:
    """List parsed hunks with the indices used by plan files."""
    _, _, _, parsed = _load_changes(scope)
    stats = get_stats(parsed.files)

    typer.echo(format_hunks_for_llm(parsed.files))
    typer.echo("")
    typer.echo(
        f"{stats['files']} files, {stats['hunks']} hunks "
        f"(+{stats['additions']} / -{stats['deletions']})"
    )
