"""cartographer CLI — Typer application with init, refresh, status, install and config."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from cartographer import __version__

app = typer.Typer(
    name="cartographer",
    help="Semantic context maps for codebases, refreshed incrementally.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _resolve_repo_root() -> Path:
    """The git repo root, or the working directory outside a repo."""
    from cartographer.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError:
        return Path.cwd()


def _configure_logging(verbose: bool, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=verbose)],
        force=True,
    )


def _load_config(repo_root: Path, config: Optional[str]):
    from cartographer.config.loader import ConfigError, load_config

    try:
        return load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _ensure_cache_ignored(repo_root: Path, cfg) -> None:
    """Add the configured cache directory to .gitignore if it is inside the repo."""
    from cartographer.config.loader import relative_to_root, resolve_cache_dir

    cache = relative_to_root(repo_root, resolve_cache_dir(repo_root, cfg))
    if cache is None:
        return
    line = f"{cache}/"
    gitignore = repo_root / ".gitignore"
    if gitignore.is_file():
        content = gitignore.read_text(encoding="utf-8", errors="replace")
        existing = {entry.strip().strip("/") for entry in content.splitlines()}
        if cache in existing:
            return
        prefix = "" if content.endswith("\n") or not content else "\n"
        gitignore.write_text(f"{content}{prefix}{line}\n", encoding="utf-8")
    else:
        gitignore.write_text(f"{line}\n", encoding="utf-8")


def _run(
    *,
    config: Optional[str],
    full: bool,
    free: bool,
    dry_run: bool,
    verbose: bool,
    quiet: bool,
    output: Optional[str] = None,
):
    """Shared body of init and refresh. Returns (repo root, config, RunResult)."""
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from cartographer.config.loader import ConfigError
    from cartographer.output import terminal
    from cartographer.pipeline.controller import run_pipeline
    from cartographer.rules.registry import build_registry
    from cartographer.service.base import ServiceConfigError
    from cartographer.service.client import create_service

    _configure_logging(verbose, quiet)
    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)
    if output:
        cfg.output.path = output

    if verbose:
        console.print(f"[dim]Project root: {repo_root}[/dim]")
        console.print(f"[dim]Provider: {cfg.llm.provider} (free mode: {free})[/dim]")

    try:
        registry = build_registry(repo_root)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    if verbose:
        for source in registry.custom_sources:
            console.print(f"[dim]Custom rules: {os.path.relpath(source, repo_root)}[/dim]")

    def on_unreadable(path: str, exc: Exception) -> None:
        if verbose:
            console.print(f"[dim]Skipping {path}: {exc}[/dim]")

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
        disable=quiet,
    )
    try:
        with progress:
            task = progress.add_task("Analyzing files", total=None)

            def on_progress(completed: int, total: int) -> None:
                progress.update(task, completed=completed, total=total)

            result = run_pipeline(
                repo_root,
                cfg,
                service_factory=lambda: create_service(cfg),
                free=free,
                dry_run=dry_run,
                full=full,
                rules=registry.tier_rules(cfg),
                on_progress=on_progress,
                on_unreadable=on_unreadable,
            )
    except ServiceConfigError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if dry_run:
        terminal.render_dry_run(result, console)
    else:
        terminal.render_run(result, console, quiet=quiet)
    return repo_root, cfg, result


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cartographer.toml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Context map path"),
    free: bool = typer.Option(False, "--free", help="Pattern-based descriptions only (no API key)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show file counts and cost estimate only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Generate the context map from scratch."""
    repo_root, cfg, result = _run(
        config=config, full=True, free=free, dry_run=dry_run,
        verbose=verbose, quiet=False, output=output,
    )
    if result.written:
        _ensure_cache_ignored(repo_root, cfg)


# ── refresh ───────────────────────────────────────────────────────────────────


@app.command()
def refresh(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cartographer.toml"),
    free: bool = typer.Option(False, "--free", help="Pattern-based descriptions only (no API key)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output (for git hooks)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Update the context map for files changed since the last run."""
    _run(config=config, full=False, free=free, dry_run=False, verbose=verbose, quiet=quiet)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cartographer.toml"),
) -> None:
    """Show context map freshness and cache health."""
    from cartographer.output import terminal
    from cartographer.pipeline.status import collect_status

    _configure_logging(False)
    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)
    terminal.render_status(collect_status(repo_root, cfg), console)


# ── install ───────────────────────────────────────────────────────────────────


@app.command()
def install(
    force: bool = typer.Option(False, "--force", help="Replace an existing post-commit hook"),
) -> None:
    """Install a post-commit hook that refreshes the map after each commit."""
    from cartographer.hooks.installer import install_hook

    repo_root = _resolve_repo_root()
    success, msg = install_hook(repo_root, force=force)
    if success:
        console.print(f"[green]✓[/green] {msg}")
    else:
        console.print(f"[red]✗[/red] {msg}")
        raise typer.Exit(code=1)


# ── uninstall ─────────────────────────────────────────────────────────────────


@app.command()
def uninstall() -> None:
    """Remove the cartographer post-commit hook."""
    from cartographer.hooks.installer import uninstall_hook

    repo_root = _resolve_repo_root()
    success, msg = uninstall_hook(repo_root)
    if success:
        console.print(f"[green]✓[/green] {msg}")
    else:
        console.print(f"[red]✗[/red] {msg}")
        raise typer.Exit(code=1)


# ── config ────────────────────────────────────────────────────────────────────


@app.command("config")
def write_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Generate a starter .cartographer.toml in the project root."""
    from cartographer.config.defaults import DEFAULT_TOML

    repo_root = _resolve_repo_root()
    config_path = repo_root / ".cartographer.toml"

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  .cartographer.toml already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"cartographer {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """cartographer — the README for AI agents."""
