"""Rich terminal reporter — run summaries, dry-run estimates, status."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from cartographer.output.markdown import estimate_tokens
from cartographer.pipeline.controller import RunMode, RunResult
from cartographer.pipeline.status import StatusReport
from cartographer.rules.models import Tier

_TIER_LABEL = {
    Tier.SKIP.value: "Auto-skip",
    Tier.BATCH.value: "Batch",
    Tier.DEEP.value: "Deep",
}


def _tier_table(result: RunResult, *, with_calls: bool) -> Table:
    table = Table(title="Files by tier", title_style="bold", border_style="dim")
    table.add_column("Tier", style="cyan")
    table.add_column("Files", justify="right", style="green")
    if with_calls and result.estimate is not None:
        table.add_column("API calls", justify="right")
    calls = {
        Tier.SKIP.value: 0,
        Tier.BATCH.value: result.estimate.batch_calls if result.estimate else 0,
        Tier.DEEP.value: result.estimate.deep_calls if result.estimate else 0,
    }
    for tier, label in _TIER_LABEL.items():
        row = [label, str(result.tiers.get(tier, 0))]
        if with_calls and result.estimate is not None:
            row.append(str(calls[tier]))
        table.add_row(*row)
    return table


def render_dry_run(result: RunResult, console: Console) -> None:
    console.print()
    console.print("[bold]Dry run summary[/bold]")
    console.print(_tier_table(result, with_calls=True))
    console.print(f"[dim]Files to analyze:[/dim] {result.analyzed}")
    if result.estimate is not None:
        console.print(f"[dim]Estimated cost:[/dim]  {result.estimate.estimated_cost}")


def render_run(result: RunResult, console: Console, *, quiet: bool = False) -> None:
    """Print the outcome of a run that wrote (or skipped writing) the map."""
    if quiet:
        return
    if not result.written:
        console.print("[green]✓[/green] No changes detected, map is up to date")
        return

    console.print()
    if result.mode is RunMode.INCREMENTAL:
        console.print(f"[dim]Changes:[/dim] {result.diff.summary}")
    console.print(_tier_table(result, with_calls=False))
    console.print(f"[dim]Described:[/dim]     {len(result.descriptions)} files")
    console.print(f"[dim]Service calls:[/dim] {result.service_calls}")
    if result.diff.unreadable:
        console.print(f"[dim]Unreadable:[/dim]    {len(result.diff.unreadable)} (excluded)")

    console.print()
    if result.output_path is not None:
        console.print(f"[bold green]✅ Context map written to {result.output_path}[/bold green]")
    if result.pending:
        console.print(
            f"[bold yellow]⚠️  {len(result.pending)} files pending. "
            "Run 'cartographer refresh' to retry them.[/bold yellow]"
        )
        for path in result.pending:
            console.print(f"  [yellow]{path}[/yellow]")


def render_status(report: StatusReport, console: Console) -> None:
    if not report.map_exists:
        console.print("[bold red]❌ No context map found.[/bold red] Run: cartographer init")
        return

    console.print(f"📄 Context map: {report.output_path}")
    console.print(f"   Last generated: {report.generated_at.isoformat()}")
    commits = "unknown (not a git repo?)" if report.commits_since is None else str(report.commits_since)
    console.print(f"   Commits since:  {commits}")

    if report.diff is None:
        console.print("   Cache:          empty")
    else:
        console.print(f"   Cached files:   {report.cached_files}")
        console.print(f"   Current files:  {report.current_files}")
        if report.diff.has_changes:
            console.print(f"   Status:         [yellow]⚠️ stale ({report.diff.summary})[/yellow]")
            console.print("   Run: cartographer refresh")
        else:
            console.print("   Status:         [green]✅ up to date[/green]")

    console.print(
        f"   Map size:       {report.map_lines} lines, "
        f"~{estimate_tokens(report.map_text)} tokens"
    )
