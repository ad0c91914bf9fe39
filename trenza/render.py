"""
Rendering functions for trenza output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Optional

from .domain.operation import JoinSummary, OperationStatus

console = Console()

STATUS_STYLES = {
    OperationStatus.SUCCESS: "green",
    OperationStatus.DRY_RUN: "cyan",
    OperationStatus.FAILED: "red",
}


def render_join_summary(summary: JoinSummary, out: Optional[Console] = None) -> None:
    """
    Render the repositories of a join run as a table.

    Args:
        summary: Result of the join
        out: Console to print to (module console by default)
    """
    out = out or console
    if not summary.details:
        out.print("[yellow]No repositories found.[/yellow]")
        return

    title = f"{summary.root} → {summary.target}"
    if summary.dry_run:
        title += " (dry run)"

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Alias", style="cyan", no_wrap=True)
    table.add_column("Source", overflow="fold")
    table.add_column("Ref")
    table.add_column("Status", no_wrap=True)

    for detail in summary.details:
        ref = detail.ref or ""
        if detail.from_tag:
            ref += " (tag)"
        style = STATUS_STYLES.get(detail.status, "white")
        table.add_row(
            detail.alias,
            detail.repo_path,
            ref,
            f"[{style}]{detail.status.value}[/{style}]",
        )

    out.print(table)
    out.print(f"Merged {summary.merged} of {summary.total} repositories into {summary.target}")
