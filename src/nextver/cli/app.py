"""Typer application for nextver."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from nextver import __version__
from nextver.cli.commands._common import PlanOptions
from nextver.logging import configure_logging

app = typer.Typer(
    name="nextver",
    help="Compute the next semantic version and changelog from conventional commits.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

PathOption = Annotated[
    str | None, typer.Option("--path", "-p", help="Project directory (default: current)")
]
PreviousVersionOption = Annotated[
    str | None,
    typer.Option("--previous-version", help="Version of the last published release"),
]
PreviousShaOption = Annotated[
    str | None,
    typer.Option("--previous-sha", help="Commit sha of the last published release"),
]
HeadOption = Annotated[
    str | None, typer.Option("--head", help="Commit being released (default: HEAD)")
]
VersionOverrideOption = Annotated[
    str | None, typer.Option("--version", help="Use this version instead of computing one")
]
MajorTypesOption = Annotated[
    str | None,
    typer.Option("--major-types", help="Comma-separated commit types for a major increment"),
]
MinorTypesOption = Annotated[
    str | None,
    typer.Option("--minor-types", help="Comma-separated commit types for a minor increment"),
]
ChangelogTitlesOption = Annotated[
    str | None,
    typer.Option("--changelog-titles", help='JSON object of section titles, e.g. \'{"feat": "New"}\''),
]
RepoUrlOption = Annotated[
    str | None,
    typer.Option("--repo-url", help="Repository URL used to link commits in the changelog"),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"nextver {__version__}")
        raise typer.Exit


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug output")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Warnings and errors only")] = False,
    json_log: Annotated[bool, typer.Option("--json-log", help="JSON log lines on stderr")] = False,
    show_version: Annotated[
        bool,
        typer.Option(
            "--show-version",
            callback=_version_callback,
            is_eager=True,
            help="Show the nextver version and exit",
        ),
    ] = False,
) -> None:
    """nextver - release versioning for continuous delivery."""
    configure_logging(verbose=verbose, quiet=quiet, json_log=json_log)


@app.command("next")
def next_version(
    path: PathOption = None,
    previous_version: PreviousVersionOption = None,
    previous_sha: PreviousShaOption = None,
    head: HeadOption = None,
    version_override: VersionOverrideOption = None,
    major_types: MajorTypesOption = None,
    minor_types: MinorTypesOption = None,
    changelog_titles: ChangelogTitlesOption = None,
    repo_url: RepoUrlOption = None,
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format: text or json")
    ] = "text",
) -> None:
    """Show the next version, increment type and changelog."""
    from nextver.cli.commands.next import run_next

    options = PlanOptions(
        path=path,
        previous_version=previous_version,
        previous_sha=previous_sha,
        head=head,
        version_override=version_override,
        major_types=major_types,
        minor_types=minor_types,
        changelog_titles=changelog_titles,
        repo_url=repo_url,
    )
    run_next(options, output, console, err_console)


@app.command("tag")
def tag(
    path: PathOption = None,
    previous_version: PreviousVersionOption = None,
    previous_sha: PreviousShaOption = None,
    head: HeadOption = None,
    version_override: VersionOverrideOption = None,
    major_types: MajorTypesOption = None,
    minor_types: MinorTypesOption = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the tags without creating them")
    ] = False,
) -> None:
    """Tag the head commit with the next version tags and push them."""
    from nextver.cli.commands.tag import run_tag

    options = PlanOptions(
        path=path,
        previous_version=previous_version,
        previous_sha=previous_sha,
        head=head,
        version_override=version_override,
        major_types=major_types,
        minor_types=minor_types,
    )
    run_tag(options, dry_run, console, err_console)
