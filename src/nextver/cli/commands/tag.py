"""Implementation of the 'tag' command.

Plans the release and applies the version tags to the released commit,
which is ``--head`` when given and the checkout HEAD otherwise.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from rich.panel import Panel

from nextver.cli.commands._common import PlanOptions, PlannedRelease, fail, prepare_plan
from nextver.exceptions import NextverError
from nextver.vcs.git import apply_release_tags, release_tag_names

if TYPE_CHECKING:
    from rich.console import Console


async def _tag(options: PlanOptions, dry_run: bool) -> tuple[PlannedRelease, list[str], bool]:
    planned = await prepare_plan(options)
    plan = planned.plan
    if plan is None:
        return planned, [], False

    config = planned.config
    tags = release_tag_names(
        plan.version.next,
        suffix=config.tags.suffix,
        latest_tag_name=config.tags.latest_tag_name,
    )
    applied = False
    if plan.has_changes and config.tags.enabled and not (dry_run or config.dry_run):
        await apply_release_tags(planned.repo, tags, plan.resolution.range.to_sha)
        applied = True
    return planned, tags, applied


def run_tag(
    options: PlanOptions,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the tag command.

    Args:
        options: Release planning inputs
        dry_run: Only show the tags that would be applied
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        result = asyncio.run(_tag(options, dry_run))
    except NextverError as e:
        raise fail(err_console, e) from e

    planned, tags, applied = result
    if planned.plan is None:
        console.print("[yellow]Head matches the latest release commit. Nothing to do.[/]")
        return

    next_version = planned.plan.version.next
    tag_list = "\n".join(f"  • [cyan]{tag}[/]" for tag in tags)

    if not planned.plan.has_changes:
        console.print("[yellow]Next version equals the current version. No tags applied.[/]")
    elif not planned.config.tags.enabled:
        console.print("[yellow]Git tagging is disabled in the configuration.[/]")
    elif not applied:
        console.print(
            Panel(
                f"[bold]Would add and push these tags for {next_version}:[/]\n\n{tag_list}",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
    else:
        console.print(
            Panel(
                f"[green]Tagged version {next_version}![/]\n\n{tag_list}",
                title="[green]Tags Pushed[/]",
                border_style="green",
            )
        )
