"""Configuration management for nextver."""

from __future__ import annotations

from nextver.config.loader import load_config, parse_title_overrides
from nextver.config.models import (
    ChangelogConfig,
    CommitsConfig,
    NextverConfig,
    TagsConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "NextverConfig",
    "TagsConfig",
    "load_config",
    "parse_title_overrides",
]
