"""Semantic version parsing and next-version calculation.

Versions follow `Semantic Versioning 2.0.0 <https://semver.org/>`_:
``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]``. A leading ``v`` is accepted
when parsing and dropped from the canonical string form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from nextver.exceptions import InvalidVersionError

_NUMERIC = r"0|[1-9]\d*"
_PRERELEASE_ID = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"^v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$"
)


class IncrementType(StrEnum):
    """The version field a release increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def severity(self) -> int:
        """Numeric severity, higher is more severe."""
        return _SEVERITY[self]


_SEVERITY = {
    IncrementType.PATCH: 0,
    IncrementType.MINOR: 1,
    IncrementType.MAJOR: 2,
}


@dataclass(frozen=True)
class Version:
    """An immutable semantic version.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        prerelease: Dot-separated pre-release identifiers, numeric ones as int
        build: Dot-separated build metadata identifiers
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[int | str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a semantic version string.

        Raises:
            InvalidVersionError: If ``text`` is not a valid semantic version
        """
        match = SEMVER_PATTERN.match(text.strip())
        if not match:
            raise InvalidVersionError(f'"{text}" is not a valid semantic version')

        prerelease: tuple[int | str, ...] = ()
        if match.group("prerelease"):
            prerelease = tuple(
                int(part) if part.isdigit() else part
                for part in match.group("prerelease").split(".")
            )
        build: tuple[str, ...] = ()
        if match.group("build"):
            build = tuple(match.group("build").split("."))

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=prerelease,
            build=build,
        )

    @property
    def core(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def bump(self, increment: IncrementType) -> Version:
        """Return the next version for ``increment``.

        Pre-release and build metadata are dropped. A pre-release of the
        target version is finalised instead of skipped, so
        ``2.0.0-rc.1`` bumped by major gives ``2.0.0``.
        """
        if increment is IncrementType.MAJOR:
            if self.prerelease and self.minor == 0 and self.patch == 0:
                return Version(self.major, 0, 0)
            return Version(self.major + 1, 0, 0)
        if increment is IncrementType.MINOR:
            if self.prerelease and self.patch == 0:
                return Version(self.major, self.minor, 0)
            return Version(self.major, self.minor + 1, 0)
        if self.prerelease:
            return Version(self.major, self.minor, self.patch)
        return Version(self.major, self.minor, self.patch + 1)

    def _precedence_key(self) -> tuple:
        if not self.prerelease:
            return (*self.core, (1,))
        identifiers = tuple(
            (0, part, "") if isinstance(part, int) else (1, 0, part)
            for part in self.prerelease
        )
        return (*self.core, (0, identifiers))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() <= other._precedence_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() > other._precedence_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() >= other._precedence_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(part) for part in self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def parse_version(version: Version | str) -> Version:
    """Return ``version`` as a :class:`Version`, parsing strings."""
    if isinstance(version, Version):
        return version
    return Version.parse(version)


def diff(current: Version, other: Version) -> IncrementType | None:
    """Return the most significant field that differs between two versions.

    Versions with the same ``MAJOR.MINOR.PATCH`` give ``None`` even when
    their pre-release or build metadata differ.
    """
    if current.major != other.major:
        return IncrementType.MAJOR
    if current.minor != other.minor:
        return IncrementType.MINOR
    if current.patch != other.patch:
        return IncrementType.PATCH
    return None


@dataclass(frozen=True)
class VersionInfo:
    """Current and next version of a release.

    ``increment_type`` is ``None`` only when an override equals the
    current version, which callers treat as nothing to publish.
    """

    current: Version
    next: Version
    increment_type: IncrementType | None

    @property
    def is_noop(self) -> bool:
        return self.increment_type is None


def compute_version(
    current: Version | str,
    override: Version | str | None = None,
    increment_type: IncrementType | None = None,
) -> VersionInfo:
    """Compute the next version from an override or an increment.

    Args:
        current: The currently published version
        override: Explicit next version, wins over ``increment_type``
        increment_type: Increment to apply when there is no override

    Returns:
        VersionInfo with the current and next versions

    Raises:
        InvalidVersionError: If ``current`` or ``override`` is not valid semver
        ValueError: If neither ``override`` nor ``increment_type`` is given
    """
    current_version = parse_version(current)

    if override is not None:
        next_version = parse_version(override)
        return VersionInfo(
            current=current_version,
            next=next_version,
            increment_type=diff(current_version, next_version),
        )

    if increment_type is None:
        raise ValueError("Either an override or an increment type is required")

    return VersionInfo(
        current=current_version,
        next=current_version.bump(IncrementType(increment_type)),
        increment_type=IncrementType(increment_type),
    )
