"""Rendering helpers shared by the CLI commands."""

import typer

from hunksplit.compose import (
    HunkRegistry,
    OrchestratorEvent,
    ResolvedPlan,
    RunReport,
)


def plan_to_dict(plan: ResolvedPlan) -> dict:
    """Serialize a resolved plan for --json output."""
    return {
        "groups": [
            {
                "number": group.number,
                "description": group.description,
                "commitMessage": group.commit_message,
                "commitBody": group.commit_body,
                "hunks": [{"file": r.file, "hunkIndex": r.hunk_index} for r in group.hunks],
            }
            for group in plan.groups
        ],
        "uncovered": [str(r) for r in plan.uncovered],
        "warnings": list(plan.warnings),
        "summary": plan.summary,
    }


def render_plan(plan: ResolvedPlan, registry: HunkRegistry) -> None:
    """Print the proposed commit sequence."""
    typer.echo("")
    typer.echo("=" * 60)
    typer.echo(f"Proposed commits ({len(plan.groups)})")
    typer.echo("=" * 60)

    for warning in plan.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    if plan.summary:
        typer.echo("")
        typer.echo(plan.summary)

    for group in plan.groups:
        typer.echo("")
        typer.echo(f"  {group.number}. {group.commit_message}")
        if group.description:
            typer.echo(f"     {group.description}")
        for ref in group.hunks:
            hunk = registry.get(ref)
            typer.echo(f"       - {ref}  {hunk.summary}")
        if not group.hunks:
            typer.echo("       (no valid hunks)")

    if plan.uncovered:
        typer.echo("")
        typer.echo(f"Left in the working tree ({len(plan.uncovered)} hunks):")
        for ref in plan.uncovered:
            typer.echo(f"  - {ref}  {registry.get(ref).summary}")

    typer.echo("")
    typer.echo("=" * 60)


def echo_event(event: OrchestratorEvent) -> None:
    """Print orchestrator progress."""
    if event.kind == "group_started":
        typer.echo(f"  Creating commit {event.group_number}: {event.message[:50]}...", err=True)
    elif event.kind == "group_failed":
        typer.echo(f"  ✗ Group {event.group_number} failed: {event.message}", err=True)
    elif event.kind == "restoring":
        typer.echo("  Restoring working tree...", err=True)


def render_report(report: RunReport) -> None:
    """Print the outcome of a run."""
    typer.echo("")
    succeeded = report.succeeded
    failed = report.failed

    if succeeded:
        typer.echo(f"Created {len(succeeded)} commit(s):", err=True)
        for result in succeeded:
            typer.echo(f"  ✓ {result.commit_message}", err=True)

    if failed:
        typer.echo(f"{len(failed)} group(s) failed:", err=True)
        for result in failed:
            kind = result.error_kind.value if result.error_kind else "unknown"
            typer.echo(f"  ✗ {result.commit_message} [{kind}] {result.error_message or ''}", err=True)

    if report.pending:
        typer.echo(f"{len(report.pending)} hunk(s) remain uncommitted in the working tree.", err=True)

    if succeeded:
        typer.echo("")
        typer.echo("Review with 'git log' and push when ready.", err=True)
