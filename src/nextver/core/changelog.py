"""Changelog generation from classified commits.

Commits are grouped into one section per commit type. Section titles come
from a :class:`TypeTitleMap`, which is built once per run from the
built-in titles plus user overrides and is never modified afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nextver.core.commits import ClassifiedCommit

DEFAULT_TYPE_TITLES: Mapping[str, str] = MappingProxyType(
    {
        "feat": "✨ Features",
        "fix": "🐛 Bug Fixes",
        "perf": "⚡ Performance",
        "refactor": "♻️ Refactoring",
        "docs": "📚 Documentation",
        "test": "🧪 Tests",
        "build": "📦 Build",
        "ci": "🔧 CI",
        "style": "💄 Style",
        "chore": "🔨 Chores",
        "revert": "⏪ Reverts",
    }
)


class TypeTitleMap(Mapping[str, str]):
    """Read-only mapping from commit type to changelog section title."""

    def __init__(self, titles: Mapping[str, str] | None = None) -> None:
        self._titles: Mapping[str, str] = MappingProxyType(
            dict(DEFAULT_TYPE_TITLES if titles is None else titles)
        )

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, str] | None = None) -> TypeTitleMap:
        """Merge ``overrides`` on top of the default titles."""
        return cls({**DEFAULT_TYPE_TITLES, **(overrides or {})})

    def title_for(self, commit_type: str) -> str:
        """Title for ``commit_type``, or the type itself if it has none."""
        return self._titles.get(commit_type, commit_type)

    def __getitem__(self, key: str) -> str:
        return self._titles[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._titles)

    def __len__(self) -> int:
        return len(self._titles)

    def __repr__(self) -> str:
        return f"TypeTitleMap({dict(self._titles)!r})"


@dataclass(frozen=True)
class ChangelogSection:
    """Commits of one type under a single title."""

    title: str
    type: str
    entries: tuple[ClassifiedCommit, ...] = ()


def build_changelog(
    commits: Iterable[ClassifiedCommit],
    title_map: Mapping[str, str],
    major_types: Sequence[str] = (),
) -> list[ChangelogSection]:
    """Group classified commits into changelog sections.

    Sections appear in the order their type is first seen in ``commits``,
    except that sections for ``major_types`` come before all others.
    Unclassified commits are left out.

    Args:
        commits: Classified commits in history order
        title_map: Section titles by commit type
        major_types: Commit types that are listed first

    Returns:
        Ordered changelog sections
    """
    grouped: dict[str, list[ClassifiedCommit]] = {}
    for cc in commits:
        if cc.type is not None:
            grouped.setdefault(cc.type, []).append(cc)

    sections = [
        ChangelogSection(title=title_map.get(type_, type_), type=type_, entries=tuple(entries))
        for type_, entries in grouped.items()
    ]

    majors = set(major_types)
    hoisted = [s for s in sections if s.type in majors]
    rest = [s for s in sections if s.type not in majors]
    return hoisted + rest


def format_commit_reference(cc: ClassifiedCommit, repo_url: str | None = None) -> str:
    """Short sha of a commit, linked to the commit page when ``repo_url`` is known."""
    short_sha = cc.commit.short_sha
    if repo_url:
        return f"[{short_sha}]({repo_url.rstrip('/')}/commit/{cc.commit.sha})"
    return short_sha


def render_changelog(
    sections: Iterable[ChangelogSection],
    repo_url: str | None = None,
) -> str:
    """Render changelog sections as a markdown body.

    Args:
        sections: Sections from :func:`build_changelog`
        repo_url: Web URL of the repository, e.g. ``https://github.com/owner/repo``

    Returns:
        Markdown text, empty if there are no sections
    """
    lines: list[str] = []
    for section in sections:
        lines.append(f"## {section.title}")
        lines.append("")
        for cc in section.entries:
            lines.append(f"- {cc.subject} ({format_commit_reference(cc, repo_url)})")
        lines.append("")

    return "\n".join(lines).strip()
