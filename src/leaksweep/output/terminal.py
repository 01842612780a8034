"""Rich terminal reporter — live leak lines and a summary table."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from leaksweep.findings.models import Leak, Report


def print_leak(leak: Leak, console: Optional[Console] = None) -> None:
    """Print one leak as it arrives (verbose mode)."""
    console = console or Console(stderr=True)
    line = Text()
    line.append(leak.commit[:12], style="yellow")
    line.append(f" {leak.branch} ", style="dim")
    line.append(f"{leak.file}:{leak.line_no} ", style="magenta")
    line.append(leak.reason, style="cyan")
    line.append(f"  {leak.offender}", style="bold red")
    console.print(line)


def render(report: Report, *, show_summary: bool = True, console: Optional[Console] = None) -> None:
    """Print audit results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not report.has_leaks:
        console.print()
        console.print(f"[bold green]No leaks detected in {escape(report.repo)}.[/bold green]")
        if show_summary:
            _print_summary(console, report)
        return

    console.print()
    table = Table(
        title=f"Leaks in {escape(report.repo)}",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Branch", style="dim")
    table.add_column("Author")
    table.add_column("File", style="magenta")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Reason", style="cyan", min_width=14)
    table.add_column("Offender", min_width=15)

    for leak in report.sorted():
        cells = [
            leak.commit[:12],
            leak.branch,
            leak.author,
            leak.file,
            str(leak.line_no),
            leak.reason,
            leak.offender,
        ]
        table.add_row(*(Text(c) for c in cells))

    console.print(table)

    if show_summary:
        _print_summary(console, report)


def _print_summary(console: Console, report: Report) -> None:
    console.print()
    console.print(f"[dim]Commits scanned:[/dim] {report.commits_scanned}")
    console.print(f"[dim]Diff failures:[/dim]   {report.commits_failed}")
    console.print(f"[dim]Leaks:[/dim]           {report.total_leaks}")
    console.print(f"[dim]Duration:[/dim]        {report.duration_ms:.0f}ms")
