"""Tests for the git collaborator and release tagging."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from nextver.core.version import Version
from nextver.exceptions import GitError
from nextver.vcs.git import (
    Commit,
    GitRepository,
    apply_release_tags,
    parse_log_output,
    release_tag_names,
)
from nextver.vcs.history import GitRange

FS = "\x1f"
RS = "\x1e"


def fake_process(stdout: str = "", stderr: str = "", returncode: int = 0) -> MagicMock:
    process = MagicMock()
    process.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
    process.returncode = returncode
    return process


class TestCommit:
    """Tests for Commit."""

    def test_short_sha(self):
        """The short sha is the first seven characters."""
        commit = Commit("abcdef0123" + "0" * 30, "feat: x", "Test", body="details")
        assert commit.short_sha == "abcdef0"


class TestParseLogOutput:
    """Tests for parse_log_output()."""

    def test_parse_records(self):
        """Records are split into commits with multi-line bodies intact."""
        output = (
            f"{'1' * 40}{FS}Alice{FS}feat: add X{FS}line one\nline two\n{RS}\n"
            f"{'2' * 40}{FS}Bob{FS}fix: y{FS}{RS}\n"
        )
        commits = parse_log_output(output)

        assert commits == [
            Commit("1" * 40, "feat: add X", "Alice", body="line one\nline two"),
            Commit("2" * 40, "fix: y", "Bob"),
        ]

    def test_parse_empty(self):
        """Empty output gives no commits."""
        assert parse_log_output("") == []


class TestGitRepository:
    """Tests for GitRepository command execution."""

    @pytest.mark.asyncio
    async def test_is_shallow_clone(self, tmp_path: Path):
        """The rev-parse answer is turned into a bool."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process("true\n")) as run:
            assert await repo.is_shallow_clone() is True

        args = run.call_args[0]
        assert args == ("git", "rev-parse", "--is-shallow-repository")
        assert run.call_args.kwargs["cwd"] == tmp_path

    @pytest.mark.asyncio
    async def test_list_tags(self, tmp_path: Path):
        """Tags are returned one per line."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process("v1.0.0\nlatest\n")):
            assert await repo.list_tags() == ["v1.0.0", "latest"]

    @pytest.mark.asyncio
    async def test_log_range(self, tmp_path: Path):
        """A bounded range is passed as from..to."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process("")) as run:
            await repo.log(GitRange("a" * 40, "b" * 40))

        assert run.call_args[0][-1] == f"{'a' * 40}..{'b' * 40}"

    @pytest.mark.asyncio
    async def test_log_full(self, tmp_path: Path):
        """A full-scan range logs everything reachable from head."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process("")) as run:
            await repo.log(GitRange(None, "b" * 40))

        assert run.call_args[0][-1] == "b" * 40

    @pytest.mark.asyncio
    async def test_add_tag_on_target(self, tmp_path: Path):
        """A tag with a target is created on that commit."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process()) as run:
            await repo.add_tag("v1.2.3", "c" * 40)

        assert run.call_args[0] == ("git", "tag", "v1.2.3", "c" * 40, "--force")

    @pytest.mark.asyncio
    async def test_add_tag_without_target(self, tmp_path: Path):
        """Without a target the tag goes on the checkout HEAD."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process()) as run:
            await repo.add_tag("latest")

        assert run.call_args[0] == ("git", "tag", "latest", "--force")

    @pytest.mark.asyncio
    async def test_fetch_shallow_exclude(self, tmp_path: Path):
        """Deepening up to a tag uses --shallow-exclude."""
        repo = GitRepository(tmp_path)
        with patch("asyncio.create_subprocess_exec", return_value=fake_process()) as run:
            await repo.fetch_shallow_exclude("v1.2.3")

        assert run.call_args[0] == ("git", "fetch", "--shallow-exclude", "v1.2.3")

    @pytest.mark.asyncio
    async def test_failure_raises_git_error(self, tmp_path: Path):
        """A non-zero exit raises GitError with stderr."""
        repo = GitRepository(tmp_path)
        process = fake_process(stderr="fatal: not a git repository", returncode=128)
        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(GitError) as exc_info:
                await repo.fetch_tags()

        assert "exit code 128" in str(exc_info.value)
        assert exc_info.value.stderr == "fatal: not a git repository"


class TestReleaseTagNames:
    """Tests for release_tag_names()."""

    def test_default(self):
        """Latest, full, minor and major tags."""
        assert release_tag_names(Version(1, 2, 3)) == ["latest", "v1.2.3", "v1.2", "v1"]

    def test_suffix_and_latest_name(self):
        """The suffix applies to version tags only."""
        tags = release_tag_names(Version(2, 0, 0), suffix="-next", latest_tag_name="stable")
        assert tags == ["stable", "v2.0.0-next", "v2.0-next", "v2-next"]


class TestApplyReleaseTags:
    """Tests for apply_release_tags()."""

    @pytest.mark.asyncio
    async def test_tags_then_push(self):
        """All tags are added before the push starts."""
        git = MagicMock(spec=GitRepository)
        events: list[str] = []

        async def add_tag(name: str, target: str | None = None, *, force: bool = True) -> None:
            await asyncio.sleep(0)
            events.append(name)

        async def push_tags(*, force: bool = True) -> None:
            events.append("push")

        git.add_tag.side_effect = add_tag
        git.push_tags.side_effect = push_tags

        await apply_release_tags(git, ["latest", "v1.2.3", "v1.2", "v1"], "c" * 40)

        assert sorted(events[:4]) == ["latest", "v1", "v1.2", "v1.2.3"]
        assert events[4] == "push"

    @pytest.mark.asyncio
    async def test_failure_skips_push(self):
        """A failed tag write propagates and nothing is pushed."""
        git = MagicMock(spec=GitRepository)
        git.add_tag.side_effect = [None, GitError("tag failed")]

        with pytest.raises(GitError, match="tag failed"):
            await apply_release_tags(git, ["latest", "v1.2.3"], "c" * 40)

        git.push_tags.assert_not_called()

    @pytest.mark.asyncio
    async def test_tags_target_commit(self):
        """Every tag points at the given commit, not the checkout HEAD."""
        git = MagicMock(spec=GitRepository)

        await apply_release_tags(git, ["latest", "v1.2.3"], "c" * 40)

        targets = {c.args[1] for c in git.add_tag.call_args_list}
        assert targets == {"c" * 40}
