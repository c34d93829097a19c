"""Shared setup for commands that plan a release."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from nextver.config import CommitsConfig, load_config, parse_title_overrides
from nextver.core.changelog import TypeTitleMap
from nextver.core.release import ReleasePlan, plan_release
from nextver.core.version import Version
from nextver.exceptions import NextverError
from nextver.logging import get_logger
from nextver.project.pyproject import get_project_version
from nextver.vcs import GitRepository, PreviousRelease

if TYPE_CHECKING:
    from rich.console import Console

    from nextver.config import NextverConfig


@dataclass(frozen=True)
class PlanOptions:
    """Command line inputs shared by ``next`` and ``tag``."""

    path: str | None = None
    previous_version: str | None = None
    previous_sha: str | None = None
    head: str | None = None
    version_override: str | None = None
    major_types: str | None = None
    minor_types: str | None = None
    changelog_titles: str | None = None
    repo_url: str | None = None


@dataclass(frozen=True)
class PlannedRelease:
    """Planning result; ``plan`` is None when head is the released commit."""

    config: NextverConfig
    repo: GitRepository
    current: Version
    plan: ReleasePlan | None = None


def apply_overrides(config: NextverConfig, options: PlanOptions) -> NextverConfig:
    """Return ``config`` with command line type lists applied."""
    commits = config.commits.model_dump()
    if options.major_types is not None:
        commits["major_types"] = options.major_types
    if options.minor_types is not None:
        commits["minor_types"] = options.minor_types
    return config.model_copy(update={"commits": CommitsConfig.model_validate(commits)})


async def prepare_plan(options: PlanOptions) -> PlannedRelease:
    """Load configuration and git state, then plan the release.

    Returns:
        The planned release, without a plan when head is already released

    Raises:
        NextverError: On invalid input or git failures
    """
    log = get_logger(__name__)
    project_path = Path(options.path) if options.path else Path.cwd()

    config = apply_overrides(load_config(project_path), options)
    titles = TypeTitleMap.from_overrides(
        {**config.changelog.titles, **parse_title_overrides(options.changelog_titles)}
    )
    override = Version.parse(options.version_override) if options.version_override else None

    repo = GitRepository(project_path)
    head_sha = options.head or await repo.head_sha()

    previous_release = None
    if options.previous_version:
        current = Version.parse(options.previous_version)
        if options.previous_sha:
            if options.previous_sha == head_sha:
                log.info("head matches the latest release commit, nothing to do", sha=head_sha)
                return PlannedRelease(config=config, repo=repo, current=current)
            previous_release = PreviousRelease(
                tag_name=config.tags.previous_tag(str(current)),
                sha=options.previous_sha,
            )
    else:
        manifest_version = get_project_version(project_path)
        current = Version.parse(manifest_version)
        log.warning(
            "no previous release given, using the manifest version as the current version",
            version=manifest_version,
        )

    plan = await plan_release(
        repo,
        config,
        current,
        head_sha,
        previous_release,
        version_override=override,
        title_map=titles,
        repo_url=options.repo_url,
    )
    return PlannedRelease(config=config, repo=repo, current=current, plan=plan)


def fail(err_console: Console, error: NextverError) -> SystemExit:
    """Report ``error`` and return the exit to raise."""
    err_console.print(f"[red]Error:[/] {escape(str(error))}", soft_wrap=True)
    return SystemExit(1)
