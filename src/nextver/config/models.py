"""Configuration models for nextver.

Settings live in ``[tool.nextver]`` of ``pyproject.toml``::

    [tool.nextver]
    dry_run = false

    [tool.nextver.commits]
    major_types = ["breaking"]
    minor_types = ["feat"]

    [tool.nextver.changelog]
    titles = { feat = "New Features" }

    [tool.nextver.tags]
    suffix = ""
    latest_tag_name = "latest"
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CommitsConfig(BaseModel):
    """Mapping of commit types to version increments."""

    model_config = ConfigDict(extra="forbid")

    major_types: list[str] = Field(
        default_factory=list,
        description="Commit types that trigger a major increment",
    )
    minor_types: list[str] = Field(
        default_factory=lambda: ["feat"],
        description="Commit types that trigger a minor increment",
    )

    @field_validator("major_types", "minor_types", mode="before")
    @classmethod
    def split_types(cls, value: Any) -> Any:
        """Accept ``"feat,perf"`` as well as ``["feat", "perf"]``."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(value, list):
            return [part for part in value if part]
        return value


class ChangelogConfig(BaseModel):
    """Changelog rendering options."""

    model_config = ConfigDict(extra="forbid")

    titles: dict[str, str] = Field(
        default_factory=dict,
        description="Section titles by commit type, merged over the defaults",
    )


class TagsConfig(BaseModel):
    """Git tags applied after a release."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    suffix: str = Field(default="", description="Appended to every version tag")
    latest_tag_name: str = "latest"

    def previous_tag(self, version: str) -> str:
        """Name of the tag for an already released ``version``."""
        return f"v{version}{self.suffix}"


class NextverConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    dry_run: bool = False
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)
