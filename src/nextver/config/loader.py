"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from nextver.config.models import NextverConfig
from nextver.exceptions import ConfigNotFoundError, ConfigValidationError

TOOL_SECTION = "nextver"

_TITLES_ADAPTER: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or one of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(
        f"No pyproject.toml found in {current} or its parents",
        hint="Run nextver from the project directory or pass --path.",
    )


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_nextver_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.nextver]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_SECTION, {})


def load_config(path: Path | None = None) -> NextverConfig:
    """Load configuration for the project at ``path``.

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
        ConfigValidationError: If the configuration is invalid
    """
    if path is not None and path.is_file():
        pyproject_path = path
    else:
        pyproject_path = find_pyproject_toml(path)

    data = extract_nextver_config(load_pyproject_toml(pyproject_path))
    try:
        return NextverConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Invalid [tool.{TOOL_SECTION}] configuration in {pyproject_path}:\n{e}"
        ) from e


def parse_title_overrides(text: str | None) -> dict[str, str]:
    """Parse changelog title overrides given as a JSON object.

    Raises:
        ConfigValidationError: If ``text`` is not a JSON object of strings
    """
    if not text:
        return {}
    try:
        return _TITLES_ADAPTER.validate_python(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigValidationError(
            f"Changelog titles must be a JSON object of strings: {e}"
        ) from e
