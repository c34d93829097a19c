"""Core business logic for nextver.

- Semantic version parsing and next-version calculation
- Conventional commit classification and increment resolution
- Changelog grouping and rendering
- Release planning
"""

from __future__ import annotations

from nextver.core.changelog import (
    DEFAULT_TYPE_TITLES,
    ChangelogSection,
    TypeTitleMap,
    build_changelog,
    render_changelog,
)
from nextver.core.commits import (
    ClassifiedCommit,
    classify_commit,
    classify_commits,
    resolve_increment,
)
from nextver.core.release import ReleasePlan, plan_release, release_outputs
from nextver.core.version import (
    IncrementType,
    Version,
    VersionInfo,
    compute_version,
    diff,
    parse_version,
)

__all__ = [
    # Changelog
    "DEFAULT_TYPE_TITLES",
    "ChangelogSection",
    # Commits
    "ClassifiedCommit",
    # Version
    "IncrementType",
    # Release
    "ReleasePlan",
    "TypeTitleMap",
    "Version",
    "VersionInfo",
    "build_changelog",
    "classify_commit",
    "classify_commits",
    "compute_version",
    "diff",
    "parse_version",
    "plan_release",
    "release_outputs",
    "render_changelog",
    "resolve_increment",
]
