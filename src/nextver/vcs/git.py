"""Git operations used by nextver.

:class:`GitQuery` is the interface the history and release logic depend
on. :class:`GitRepository` implements it by running the ``git`` binary
as an asyncio subprocess. Tests substitute a mock with the same methods.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from nextver.exceptions import GitError
from nextver.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nextver.core.version import Version
    from nextver.vcs.history import GitRange

# Unit and record separators keep multi-line bodies intact in log output.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%s", "%b"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A single commit from git history."""

    sha: str
    subject: str
    author_name: str
    body: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@runtime_checkable
class GitQuery(Protocol):
    """Git operations needed to resolve history and apply tags."""

    async def is_shallow_clone(self) -> bool: ...

    async def list_tags(self) -> list[str]: ...

    async def fetch_tags(self) -> None: ...

    async def fetch_deepen(self, depth: int) -> None: ...

    async def fetch_shallow_exclude(self, ref: str) -> None: ...

    async def fetch_unshallow(self) -> None: ...

    async def resolve_tag_sha(self, tag: str) -> str: ...

    async def log(self, git_range: GitRange | None = None) -> list[Commit]: ...

    async def add_tag(self, name: str, target: str | None = None, *, force: bool = True) -> None: ...

    async def push_tags(self, *, force: bool = True) -> None: ...


class GitRepository:
    """Git repository driven through the ``git`` command line."""

    def __init__(self, path: Path | str | None = None, *, git_binary: str = "git") -> None:
        self.path = Path(path) if path else Path.cwd()
        self.git_binary = git_binary

    async def _run(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitError: If git exits with a non-zero status
        """
        log = get_logger(__name__)
        log.debug("git", args=list(args))
        process = await asyncio.create_subprocess_exec(
            self.git_binary,
            *args,
            cwd=self.path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise GitError(
                f"git {' '.join(args)} failed with exit code {process.returncode}",
                stderr=stderr.decode(errors="replace"),
            )
        return stdout.decode(errors="replace")

    async def is_shallow_clone(self) -> bool:
        output = await self._run("rev-parse", "--is-shallow-repository")
        return output.strip() == "true"

    async def list_tags(self) -> list[str]:
        output = await self._run("tag", "--list")
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def fetch_tags(self) -> None:
        await self._run("fetch", "--tags")

    async def fetch_deepen(self, depth: int) -> None:
        await self._run("fetch", "--deepen", str(depth))

    async def fetch_shallow_exclude(self, ref: str) -> None:
        """Deepen history up to, but not including, ``ref``."""
        await self._run("fetch", "--shallow-exclude", ref)

    async def fetch_unshallow(self) -> None:
        await self._run("fetch", "--unshallow")

    async def resolve_tag_sha(self, tag: str) -> str:
        """Return the sha of the commit a tag points at."""
        output = await self._run("rev-list", "-n", "1", tag)
        return output.strip()

    async def head_sha(self) -> str:
        output = await self._run("rev-parse", "HEAD")
        return output.strip()

    async def log(self, git_range: GitRange | None = None) -> list[Commit]:
        """Return commits newest first, limited to ``git_range`` if given."""
        args = ["log", f"--format={_LOG_FORMAT}"]
        if git_range is not None and git_range.from_sha is not None:
            args.append(f"{git_range.from_sha}..{git_range.to_sha}")
        elif git_range is not None:
            args.append(git_range.to_sha)
        output = await self._run(*args)
        return parse_log_output(output)

    async def add_tag(self, name: str, target: str | None = None, *, force: bool = True) -> None:
        """Point tag ``name`` at ``target``, or at the checkout HEAD if omitted."""
        args = ["tag", name]
        if target:
            args.append(target)
        if force:
            args.append("--force")
        await self._run(*args)

    async def push_tags(self, *, force: bool = True) -> None:
        args = ["push", "--tags"]
        if force:
            args.append("--force")
        await self._run(*args)


def parse_log_output(output: str) -> list[Commit]:
    """Parse ``git log`` output produced with the nextver log format."""
    commits = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        sha, author_name, subject, body = record.split(_FIELD_SEP, 3)
        commits.append(
            Commit(
                sha=sha.strip(),
                subject=subject,
                author_name=author_name,
                body=body.strip(),
            )
        )
    return commits


def release_tag_names(
    version: Version,
    suffix: str = "",
    latest_tag_name: str = "latest",
) -> list[str]:
    """Tags to apply for a release of ``version``.

    For ``1.2.3`` these are ``latest``, ``v1.2.3``, ``v1.2`` and ``v1``.
    """
    return [
        latest_tag_name,
        f"v{version}{suffix}",
        f"v{version.major}.{version.minor}{suffix}",
        f"v{version.major}{suffix}",
    ]


async def apply_release_tags(git: GitQuery, tags: Sequence[str], target: str) -> None:
    """Create all ``tags`` on commit ``target`` concurrently, then push them.

    Tags are independent writes so they are added in parallel. The push
    only starts once every tag exists; the first failure propagates and
    nothing is pushed.
    """
    await asyncio.gather(*(git.add_tag(tag, target, force=True) for tag in tags))
    await git.push_tags(force=True)
