"""Implementation of the 'next' command.

Prints the next version and the changelog without changing anything.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nextver.cli.commands._common import PlanOptions, fail, prepare_plan
from nextver.core.commits import get_breaking_changes
from nextver.core.release import release_outputs, version_outputs
from nextver.core.version import VersionInfo
from nextver.exceptions import NextverError

if TYPE_CHECKING:
    from rich.console import Console


def run_next(
    options: PlanOptions,
    output: str,
    console: Console,
    err_console: Console,
) -> None:
    """Run the next command.

    Args:
        options: Release planning inputs
        output: ``text`` for a rich summary, ``json`` for machine output
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        planned = asyncio.run(prepare_plan(options))
    except NextverError as e:
        raise fail(err_console, e) from e

    plan = planned.plan
    if plan is None:
        if output == "json":
            unchanged = VersionInfo(planned.current, planned.current, None)
            _print_json(console, {**version_outputs(unchanged), "changelog": ""})
        else:
            console.print("[yellow]Head matches the latest release commit. Nothing to do.[/]")
        return

    outputs = release_outputs(plan)

    if output == "json":
        _print_json(console, {**outputs, "changelog": plan.changelog})
        return

    table = Table(show_header=False, box=None)
    table.add_row("Current version", f"[cyan]{outputs['current-version']}[/]")
    table.add_row("Next version", f"[green]{outputs['next-version']}[/]")
    table.add_row("Increment", outputs["increment-type"] or "[dim]none[/]")
    table.add_row("History", plan.resolution.outcome.value)
    table.add_row("Commits", str(len(plan.commits)))
    breaking = get_breaking_changes(plan.commits)
    if breaking:
        table.add_row("Breaking changes", f"[red]{len(breaking)}[/]")
    console.print(table)

    if not plan.has_changes:
        console.print("[yellow]Next version equals the current version. Nothing to publish.[/]")

    console.print(
        Panel(
            escape(plan.changelog) if plan.changelog else "[dim]No conventional commits found.[/]",
            title=f"[green]Changelog {outputs['next-version']}[/]",
            border_style="green",
        )
    )


def _print_json(console: Console, data: dict[str, str]) -> None:
    console.out(json.dumps(data, indent=2, ensure_ascii=False), highlight=False)
