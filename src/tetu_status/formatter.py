"""Rich console rendering of one-shot agent results."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .agents import CycleResult


def format_results_table(
    results: Sequence[CycleResult], console: Console | None = None
) -> None:
    """Print one row per agent with its label, status text or error."""
    console = console or Console()

    table = Table(title="[bold]Agent results[/]", header_style="bold")
    table.add_column("Agent", style="cyan")
    table.add_column("Label", style="magenta")
    table.add_column("Status")
    table.add_column("Result", justify="center")

    for result in results:
        label = Text(result.metric.label if result.metric and result.metric.label else "-")
        if result.ok:
            assert result.metric is not None
            table.add_row(result.agent, label, Text(result.metric.value), "[green]ok[/]")
        else:
            table.add_row(
                result.agent, label, Text(result.error or "", style="red"), "[red]failed[/]"
            )

    console.print(table)
