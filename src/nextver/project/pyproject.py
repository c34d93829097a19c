"""Project version lookup in pyproject.toml.

nextver only reads the manifest; bumping the version in it is left to the
packaging tool run after nextver.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nextver.config.loader import find_pyproject_toml, load_pyproject_toml
from nextver.exceptions import VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


def get_project_version(path: Path | None = None) -> str:
    """Get the version declared in pyproject.toml.

    Looks at ``[project].version`` first, then ``[tool.poetry].version``.

    Args:
        path: Path to pyproject.toml or a directory to search from

    Returns:
        Version string as written in the manifest

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
        VersionNotFoundError: If no version is declared
    """
    if path is not None and path.is_file():
        pyproject_path = path
    else:
        pyproject_path = find_pyproject_toml(path)

    data = load_pyproject_toml(pyproject_path)

    version = data.get("project", {}).get("version")
    if version is None:
        version = data.get("tool", {}).get("poetry", {}).get("version")
    if not isinstance(version, str) or not version:
        raise VersionNotFoundError(
            f"Could not find version in {pyproject_path}. "
            "Expected [project].version or [tool.poetry].version.",
            hint="Pass --previous-version to set the current version explicitly.",
        )
    return version
