"""Conventional commit classification and increment resolution.

Commit subjects are matched against ``type(scope)!: description``.
Subjects that do not match are kept as unclassified commits: they are
part of the scanned history but contribute nothing to the increment or
the changelog.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nextver.core.version import IncrementType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nextver.vcs.git import Commit

SUBJECT_PATTERN = re.compile(
    r"^(?P<type>[a-zA-Z]+)"
    r"(?:\((?P<scope>[^)]*)\))?"
    r"(?P<breaking>!)?"
    r":\s*"
    r"(?P<description>\S.*)$"
)

# Case-sensitive, anywhere in the body or footers.
BREAKING_MARKER = "BREAKING CHANGE"


@dataclass(frozen=True)
class ClassifiedCommit:
    """A commit with its conventional commit type and breaking flag.

    Attributes:
        commit: The underlying git commit
        type: Commit type such as ``feat``, or None if unclassified
        breaking: Whether the commit is a breaking change
        scope: Scope from the subject, informational only
        description: Subject text after the colon, or the whole subject
    """

    commit: Commit
    type: str | None
    breaking: bool = False
    scope: str | None = None
    description: str = ""

    @property
    def is_classified(self) -> bool:
        return self.type is not None

    @property
    def subject(self) -> str:
        return self.commit.subject


def classify_commit(commit: Commit) -> ClassifiedCommit:
    """Classify a commit by its subject line. Never raises."""
    match = SUBJECT_PATTERN.match(commit.subject.strip())
    if not match:
        return ClassifiedCommit(commit=commit, type=None, description=commit.subject)

    breaking = bool(match.group("breaking")) or BREAKING_MARKER in commit.body
    return ClassifiedCommit(
        commit=commit,
        type=match.group("type"),
        breaking=breaking,
        scope=match.group("scope") or None,
        description=match.group("description").strip(),
    )


def classify_commits(commits: Iterable[Commit]) -> list[ClassifiedCommit]:
    """Classify commits, keeping their order."""
    return [classify_commit(commit) for commit in commits]


def resolve_increment(
    commits: Iterable[ClassifiedCommit],
    major_types: Sequence[str],
    minor_types: Sequence[str],
) -> IncrementType:
    """Fold classified commits into a single increment type.

    Any breaking commit or any commit whose type is in ``major_types``
    gives MAJOR. Otherwise any commit whose type is in ``minor_types``
    gives MINOR. Everything else, including no commits at all, is PATCH.
    A type listed in both ``major_types`` and ``minor_types`` counts as
    major. Type matching is case-sensitive.
    """
    majors = frozenset(major_types)
    minors = frozenset(minor_types)

    increment = IncrementType.PATCH
    for cc in commits:
        if not cc.is_classified:
            continue
        if cc.breaking or cc.type in majors:
            return IncrementType.MAJOR
        if cc.type in minors:
            increment = IncrementType.MINOR
    return increment


def get_breaking_changes(commits: Iterable[ClassifiedCommit]) -> list[ClassifiedCommit]:
    """Return the breaking commits."""
    return [cc for cc in commits if cc.is_classified and cc.breaking]
