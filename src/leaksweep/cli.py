"""leaksweep CLI — Typer application with audit and init commands."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from leaksweep import __version__

if TYPE_CHECKING:
    from leaksweep.git.adapter import Repository

app = typer.Typer(
    name="leaksweep",
    help="Audit git history for committed secrets.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

REPORT_FORMATS = ("json", "csv")


def _error(label: str, exc: Exception) -> None:
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}")


@contextmanager
def _open_repository(path: Optional[Path], repo_url: Optional[str]) -> Iterator[Repository]:
    """Yield a local repository, cloning *repo_url* into a temp dir if given."""
    from leaksweep.git.adapter import Repository
    from leaksweep.git.clone import cloned_repository

    if repo_url:
        console.print(f"Cloning [bold]{escape(repo_url)}[/bold]...")
        with cloned_repository(repo_url) as repo:
            yield repo
    else:
        yield Repository.open(path or Path.cwd())


# ── audit ─────────────────────────────────────────────────────────────────────


@app.command()
def audit(
    path: Optional[Path] = typer.Argument(None, help="Local repository (default: current directory)"),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", "-r", help="Clone and audit a remote repository"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a leaksweep TOML config"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Audit this branch only"),
    all_refs: bool = typer.Option(False, "--all-refs", help="Audit every local and remote branch"),
    stop_at: Optional[str] = typer.Option(None, "--stop-at", help="Stop before reaching this commit"),
    depth: Optional[int] = typer.Option(None, "--depth", min=0, help="Audit at most N commits per branch"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-j", min=1, help="Concurrent diff workers"),
    redact: bool = typer.Option(False, "--redact", help="Replace offending values with REDACTED"),
    single_search: Optional[str] = typer.Option(None, "--single-search", help="Search for one regex instead of the rule set"),
    rules_dir: Optional[str] = typer.Option(None, "--rules-dir", help="Directory of extra YAML rule files"),
    report: Optional[str] = typer.Option(None, "--report", "-o", help="Write the report to this file"),
    report_format: str = typer.Option("json", "--report-format", help="Report format: json | csv"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print each leak as it is found"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Audit a repository's history for secrets. Exit 1 if any leak is found."""
    from leaksweep.config.loader import ConfigurationError, apply_env_overrides, load_config
    from leaksweep.config.schema import AuditOptions
    from leaksweep.git.adapter import GitError
    from leaksweep.log import configure_logging
    from leaksweep.output import csv_report, json_report, terminal
    from leaksweep.scanner.engine import audit as run_audit

    if report_format not in REPORT_FORMATS:
        console.print(f"[bold red]Invalid report format:[/bold red] {escape(report_format)}")
        raise typer.Exit(code=2)
    if path is not None and repo_url:
        console.print("[bold red]Error:[/bold red] give either a path or --repo-url, not both")
        raise typer.Exit(code=2)
    if branch and all_refs:
        console.print("[bold red]Error:[/bold red] --branch and --all-refs are mutually exclusive")
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, debug=debug)

    # --- Options: env first, explicit flags win ---
    options = AuditOptions()
    apply_env_overrides(options)
    options.branch = branch
    options.all_refs = all_refs
    options.stop_at_commit = stop_at
    options.max_depth = depth
    options.single_search = single_search
    options.rules_dir = rules_dir
    if concurrency is not None:
        options.concurrency = concurrency
    if redact:
        options.redact = True

    on_leak = terminal.print_leak if verbose else None

    # --- Run audit ---
    try:
        with _open_repository(path, repo_url) as repo:
            cfg = load_config(repo.root, config)
            if verbose or debug:
                console.print(f"[dim]Repository: {escape(repo.name)} ({repo.root})[/dim]")
                console.print(f"[dim]Concurrency: {options.concurrency}[/dim]")
            result = run_audit(repo, cfg, options, on_leak=on_leak)
    except ConfigurationError as exc:
        _error("Config error", exc)
        raise typer.Exit(code=2) from exc
    except GitError as exc:
        _error("Git error", exc)
        raise typer.Exit(code=2) from exc

    # --- Output ---
    terminal.render(result)

    if report:
        renderer = json_report if report_format == "json" else csv_report
        try:
            Path(report).write_text(renderer.render(result), encoding="utf-8")
        except OSError as exc:
            _error("Cannot write report", exc)
            raise typer.Exit(code=2) from exc
        if verbose:
            console.print(f"[dim]Report written to {escape(report)}[/dim]")

    # --- Exit code ---
    raise typer.Exit(code=1 if result.has_leaks else 0)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    path: Optional[Path] = typer.Argument(None, help="Repository to write .leaksweep.toml into"),
) -> None:
    """Write the built-in config to .leaksweep.toml in the repo root."""
    from leaksweep.config.defaults import DEFAULT_TOML
    from leaksweep.config.loader import REPO_CONFIG_NAME
    from leaksweep.git.adapter import GitError, Repository

    try:
        repo = Repository.open(path or Path.cwd())
    except GitError as exc:
        _error("Error", exc)
        raise typer.Exit(code=2) from exc

    config_path = repo.root / REPO_CONFIG_NAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {REPO_CONFIG_NAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"leaksweep {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """leaksweep — audit git history for committed secrets."""
