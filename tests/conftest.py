"""Shared fixtures for nextver tests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from nextver.vcs.git import Commit, GitRepository

if TYPE_CHECKING:
    from pathlib import Path


def make_commit(subject: str, sha: str = "a" * 40, body: str = "", author: str = "Test") -> Commit:
    """Build a commit with defaults for fields a test does not care about."""
    return Commit(sha=sha, subject=subject, author_name=author, body=body)


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat: add user authentication", sha="feat123" + "0" * 33)


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix(core): handle empty config", sha="fix4567" + "0" * 33)


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit("feat(api)!: drop v1 endpoints", sha="break89" + "0" * 33)


@pytest.fixture
def sample_commits() -> list[Commit]:
    """A realistic history, newest first."""
    return [
        make_commit("docs: update readme", sha="1" * 40),
        make_commit("feat(cli): add --output flag", sha="2" * 40),
        make_commit("Merge branch 'main' into feature", sha="3" * 40),
        make_commit("fix: handle missing tags", sha="4" * 40),
        make_commit(
            "refactor: split resolver",
            sha="5" * 40,
            body="BREAKING CHANGE: resolver is now async",
        ),
        make_commit("feat: add json logging", sha="6" * 40),
        make_commit("chore: bump dependencies", sha="7" * 40),
    ]


@pytest.fixture
def mock_git() -> MagicMock:
    """A GitRepository mock for a full, non-shallow clone without tags."""
    git = MagicMock(spec=GitRepository)
    git.is_shallow_clone.return_value = False
    git.list_tags.return_value = []
    git.resolve_tag_sha.return_value = "0" * 40
    git.log.return_value = []
    git.head_sha.return_value = "f" * 40
    return git


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """A project directory with a minimal pyproject.toml."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.nextver.commits]
major_types = ["breaking"]
minor_types = ["feat", "perf"]
"""
    )
    return tmp_path
