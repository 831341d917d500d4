"""Colorized console output for eks-idp commands.

Thin wrapper around :mod:`rich` that degrades gracefully when stdout
is not a TTY (e.g. piped, CI, cron).  ``logger.*`` calls stay in the
library modules for structured logging; only the CLI prints through here.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table

# Shared console; force_terminal=None lets Rich decide.
console = Console(stderr=False, force_terminal=None)

_PASS = "[bold green]✓[/]"
_FAIL = "[bold red]✗[/]"
_WARN = "[bold yellow]⚠[/]"
_ARROW = "[bold cyan]›[/]"


def phase(title: str) -> None:
    """Print a bold phase header (e.g. ``PLAN``, ``RECONCILE``)."""
    console.print()
    console.print(f"[bold blue]── {title} ──[/]")


def ok(msg: str) -> None:
    console.print(f"  {_PASS} {msg}")


def fail(msg: str) -> None:
    console.print(f"  {_FAIL} [red]{msg}[/]")


def warn(msg: str) -> None:
    console.print(f"  {_WARN} [yellow]{msg}[/]")


def step(msg: str) -> None:
    console.print(f"  {_ARROW} {msg}")


def detail(key: str, value: str) -> None:
    """Key-value pair, indented."""
    console.print(f"    [bold]{key}[/]: {value}")


def procedure_table(cluster_name: str, names: Sequence[str]) -> Table:
    """Build a table listing planned procedures in execution order."""
    table = Table(title=f"Identity provider plan for {cluster_name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Procedure", style="cyan")
    for i, name in enumerate(names, start=1):
        table.add_row(str(i), name)
    return table


def print_plan(cluster_name: str, names: Sequence[str]) -> None:
    """Print the plan, or a one-liner when there is nothing to do."""
    if not names:
        ok(f"No identity provider changes for {cluster_name}")
        return
    console.print(procedure_table(cluster_name, names))
