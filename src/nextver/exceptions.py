"""Exception hierarchy for nextver.

Every error raised on purpose by nextver derives from :class:`NextverError`
so the CLI can report it without a traceback. Errors raised by third-party
libraries are wrapped at the boundary where they occur.
"""

from __future__ import annotations


class NextverError(Exception):
    """Base class for all nextver errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n  Hint: {self.hint}"
        return self.message


# Configuration


class ConfigError(NextverError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


# Versions


class VersionError(NextverError):
    """Base class for version errors."""


class InvalidVersionError(VersionError):
    """A version string is not a valid semantic version."""


# Git


class GitError(NextverError):
    """A git command failed."""

    def __init__(
        self,
        message: str,
        *,
        stderr: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.stderr = stderr

    def __str__(self) -> str:
        text = super().__str__()
        if self.stderr:
            return f"{text}\n{self.stderr.strip()}"
        return text


class TagMismatchError(NextverError):
    """The sha a tag points at differs from the recorded release sha."""

    def __init__(self, tag: str, expected_sha: str, actual_sha: str) -> None:
        super().__init__(
            f'Latest release SHA "{expected_sha}" does not match the SHA '
            f'"{actual_sha}" for tag "{tag}"',
            hint="The tag was moved or recreated outside of the release process.",
        )
        self.tag = tag
        self.expected_sha = expected_sha
        self.actual_sha = actual_sha


# Project manifest


class ProjectError(NextverError):
    """The project manifest could not be read or updated."""


class VersionNotFoundError(ProjectError):
    """The project manifest does not declare a version."""
