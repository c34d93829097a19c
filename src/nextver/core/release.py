"""Release planning.

Puts the pieces together for one run: resolve the history window, load
and classify the commits, then compute the next version and the
changelog from the same classified commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from nextver.core.changelog import TypeTitleMap, build_changelog, render_changelog
from nextver.core.commits import classify_commits, resolve_increment
from nextver.core.version import compute_version, parse_version
from nextver.logging import get_logger
from nextver.vcs.history import get_history, resolve_range

if TYPE_CHECKING:
    from nextver.config.models import NextverConfig
    from nextver.core.changelog import ChangelogSection
    from nextver.core.commits import ClassifiedCommit
    from nextver.core.version import Version, VersionInfo
    from nextver.vcs.git import GitQuery
    from nextver.vcs.history import PreviousRelease, RangeResolution


@dataclass(frozen=True)
class ReleasePlan:
    """Everything a caller needs to publish a release."""

    version: VersionInfo
    resolution: RangeResolution
    commits: tuple[ClassifiedCommit, ...]
    sections: tuple[ChangelogSection, ...]
    changelog: str

    @property
    def has_changes(self) -> bool:
        """False when the next version equals the current one."""
        return not self.version.is_noop


async def plan_release(
    git: GitQuery,
    config: NextverConfig,
    current: Version | str,
    head_sha: str,
    previous_release: PreviousRelease | None,
    *,
    version_override: Version | str | None = None,
    title_map: TypeTitleMap | None = None,
    repo_url: str | None = None,
) -> ReleasePlan:
    """Plan the next release of a package.

    Args:
        git: Git collaborator
        config: Loaded configuration
        current: Currently published version
        head_sha: Commit being released
        previous_release: Tag and sha of the last release, if known
        version_override: Explicit next version
        title_map: Changelog titles, built from the config when omitted
        repo_url: Repository web URL used for commit links

    Raises:
        InvalidVersionError: If a version does not parse
        TagMismatchError: If the previous release tag moved
    """
    log = get_logger(__name__)
    current_version = parse_version(current)
    override = parse_version(version_override) if version_override is not None else None

    resolution = await resolve_range(previous_release, head_sha, git)
    history = await get_history(resolution, git)
    classified = classify_commits(history)
    log.debug(
        "loaded history",
        commits=len(classified),
        classified=sum(1 for cc in classified if cc.is_classified),
        outcome=resolution.outcome.value,
    )

    major_types = config.commits.major_types
    minor_types = config.commits.minor_types

    if override is not None:
        version = compute_version(current_version, override=override)
    else:
        increment = resolve_increment(classified, major_types, minor_types)
        version = compute_version(current_version, increment_type=increment)

    titles = title_map if title_map is not None else TypeTitleMap.from_overrides(
        config.changelog.titles
    )
    sections = build_changelog(classified, titles, major_types)

    log.info("current package version", version=str(version.current))
    log.info("next package version", version=str(version.next))
    log.info(
        "increment type",
        increment=version.increment_type.value if version.increment_type else "",
    )

    return ReleasePlan(
        version=version,
        resolution=resolution,
        commits=tuple(classified),
        sections=tuple(sections),
        changelog=render_changelog(sections, repo_url),
    )


def release_outputs(plan: ReleasePlan) -> dict[str, str]:
    """Flat string outputs for CI consumers."""
    return version_outputs(plan.version)


def version_outputs(info: VersionInfo) -> dict[str, str]:
    """Flat string outputs for ``info``; no increment is an empty string."""
    next_version = info.next
    increment = info.increment_type
    return {
        "current-version": str(info.current),
        "next-version": str(next_version),
        "next-version-major": str(next_version.major),
        "next-version-minor": str(next_version.minor),
        "next-version-patch": str(next_version.patch),
        "increment-type": increment.value if increment else "",
    }
