"""Selection of the git history window for a release.

The window starts at the commit of the previous release and ends at the
head commit. Finding the start has to cope with shallow CI clones and
with release tags that are missing from the repository:

==================== =====================================================
Outcome              When
==================== =====================================================
FULL_SCAN            No previous release is known.
TAG_FOUND            The previous release tag exists.
FALLBACK_TAG         The release tag is missing but a ``latest`` tag exists.
FULL_SCAN_FALLBACK   Neither tag exists; the whole history is scanned.
EMPTY_RANGE          The previous release commit is the head commit.
==================== =====================================================

Only the full-scan outcomes unshallow the clone. When a tag is used, a
shallow clone is deepened just far enough to contain the tag commit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from nextver.exceptions import TagMismatchError
from nextver.logging import get_logger

if TYPE_CHECKING:
    from nextver.vcs.git import Commit, GitQuery

FALLBACK_TAG = "latest"


@dataclass(frozen=True)
class GitRange:
    """Commits after ``from_sha`` up to and including ``to_sha``.

    ``from_sha`` of ``None`` means the entire history up to ``to_sha``.
    """

    from_sha: str | None
    to_sha: str

    @property
    def is_full_scan(self) -> bool:
        return self.from_sha is None

    @property
    def is_empty(self) -> bool:
        return self.from_sha == self.to_sha


@dataclass(frozen=True)
class PreviousRelease:
    """The tag and commit of the last published release."""

    tag_name: str
    sha: str


class RangeOutcome(Enum):
    """How the history window was determined."""

    FULL_SCAN = "full-scan"
    TAG_FOUND = "tag-found"
    FALLBACK_TAG = "fallback-tag"
    FULL_SCAN_FALLBACK = "full-scan-fallback"
    EMPTY_RANGE = "empty-range"


@dataclass(frozen=True)
class RangeResolution:
    """The resolved window plus the branch of the decision that produced it."""

    range: GitRange
    outcome: RangeOutcome
    tag_used: str | None = None

    @property
    def is_fallback(self) -> bool:
        """Whether the release tag was missing.

        An empty range replaces the outcome, so a ``latest`` tag pointing
        at head is only visible through ``tag_used``.
        """
        return self.tag_used == FALLBACK_TAG or self.outcome in (
            RangeOutcome.FALLBACK_TAG,
            RangeOutcome.FULL_SCAN_FALLBACK,
        )


async def resolve_range(
    previous_release: PreviousRelease | None,
    head_sha: str,
    git: GitQuery,
) -> RangeResolution:
    """Determine which commits belong to the next release.

    Args:
        previous_release: Tag and sha of the last release, if any
        head_sha: The commit being released
        git: Git collaborator used for tag lookups and fetches

    Returns:
        The resolved range and how it was chosen

    Raises:
        TagMismatchError: If the tag used points at a different commit
            than ``previous_release.sha``
    """
    log = get_logger(__name__)
    is_shallow = await git.is_shallow_clone()

    if previous_release is None:
        log.info("no previous release, scanning the full history")
        return await _full_scan(git, head_sha, is_shallow, RangeOutcome.FULL_SCAN)

    await git.fetch_tags()
    tags = set(await git.list_tags())

    if previous_release.tag_name in tags:
        tag = previous_release.tag_name
        outcome = RangeOutcome.TAG_FOUND
    elif FALLBACK_TAG in tags:
        log.warning(
            "release tag not found, using fallback tag",
            tag=previous_release.tag_name,
            fallback=FALLBACK_TAG,
        )
        tag = FALLBACK_TAG
        outcome = RangeOutcome.FALLBACK_TAG
    else:
        log.warning(
            "release tag and fallback tag not found, loading the full history",
            tag=previous_release.tag_name,
            fallback=FALLBACK_TAG,
        )
        log.warning(
            "retrieving the full history may be slow for large repositories; "
            "enable git tagging to avoid it",
        )
        return await _full_scan(git, head_sha, is_shallow, RangeOutcome.FULL_SCAN_FALLBACK)

    if is_shallow:
        await git.fetch_shallow_exclude(tag)
        # One more commit so the tag commit itself is present.
        await git.fetch_deepen(1)

    actual_sha = await git.resolve_tag_sha(tag)
    if actual_sha != previous_release.sha:
        raise TagMismatchError(tag, previous_release.sha, actual_sha)

    git_range = GitRange(from_sha=previous_release.sha, to_sha=head_sha)
    if git_range.is_empty:
        log.info("head is the previous release commit, nothing to scan", tag=tag)
        outcome = RangeOutcome.EMPTY_RANGE

    log.debug(
        "resolved history range",
        tag=tag,
        from_sha=git_range.from_sha,
        to_sha=git_range.to_sha,
        outcome=outcome.value,
    )
    return RangeResolution(range=git_range, outcome=outcome, tag_used=tag)


async def _full_scan(
    git: GitQuery,
    head_sha: str,
    is_shallow: bool,
    outcome: RangeOutcome,
) -> RangeResolution:
    if is_shallow:
        await git.fetch_unshallow()
    return RangeResolution(range=GitRange(from_sha=None, to_sha=head_sha), outcome=outcome)


async def get_history(resolution: RangeResolution, git: GitQuery) -> list[Commit]:
    """Load the commits of a resolved range, newest first."""
    if resolution.outcome is RangeOutcome.EMPTY_RANGE:
        return []
    return await git.log(resolution.range)
