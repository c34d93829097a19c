"""Git access and history range selection."""

from __future__ import annotations

from nextver.vcs.git import Commit, GitQuery, GitRepository, apply_release_tags, release_tag_names
from nextver.vcs.history import (
    GitRange,
    PreviousRelease,
    RangeOutcome,
    RangeResolution,
    get_history,
    resolve_range,
)

__all__ = [
    "Commit",
    "GitQuery",
    "GitRange",
    "GitRepository",
    "PreviousRelease",
    "RangeOutcome",
    "RangeResolution",
    "apply_release_tags",
    "get_history",
    "release_tag_names",
    "resolve_range",
]
