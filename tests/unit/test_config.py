"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from nextver.config.loader import (
    extract_nextver_config,
    find_pyproject_toml,
    load_config,
    load_pyproject_toml,
    parse_title_overrides,
)
from nextver.config.models import (
    ChangelogConfig,
    CommitsConfig,
    NextverConfig,
    TagsConfig,
)
from nextver.exceptions import ConfigNotFoundError, ConfigValidationError, VersionNotFoundError
from nextver.project.pyproject import get_project_version


class TestNextverConfig:
    """Tests for NextverConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = NextverConfig()

        assert config.dry_run is False
        assert config.commits.major_types == []
        assert config.commits.minor_types == ["feat"]
        assert config.changelog.titles == {}
        assert config.tags.enabled is True
        assert config.tags.latest_tag_name == "latest"

    def test_unknown_keys_rejected(self):
        """Typos in configuration keys are reported."""
        with pytest.raises(ValueError):
            NextverConfig.model_validate({"commit": {}})


class TestCommitsConfig:
    """Tests for CommitsConfig model."""

    def test_custom_types(self):
        """Custom commit type mappings."""
        config = CommitsConfig(major_types=["breaking"], minor_types=["feature", "feat"])

        assert config.major_types == ["breaking"]
        assert config.minor_types == ["feature", "feat"]

    def test_comma_separated(self):
        """Comma-separated strings are split and blanks dropped."""
        config = CommitsConfig.model_validate({"major_types": "breaking,,remove ", "minor_types": ""})

        assert config.major_types == ["breaking", "remove"]
        assert config.minor_types == []


class TestChangelogConfig:
    """Tests for ChangelogConfig model."""

    def test_titles(self):
        """Title overrides are a plain mapping."""
        config = ChangelogConfig(titles={"feat": "New"})
        assert config.titles == {"feat": "New"}


class TestTagsConfig:
    """Tests for TagsConfig model."""

    def test_previous_tag(self):
        """Release tags are v<version><suffix>."""
        assert TagsConfig().previous_tag("1.2.3") == "v1.2.3"
        assert TagsConfig(suffix="-beta").previous_tag("1.2.3") == "v1.2.3-beta"


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_load_valid_toml(self, temp_project: Path):
        """Load a valid pyproject.toml."""
        data = load_pyproject_toml(temp_project / "pyproject.toml")
        assert data["project"]["name"] == "test-project"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Loading nonexistent file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml(self, tmp_path: Path):
        """Broken TOML raises ConfigValidationError."""
        path = tmp_path / "pyproject.toml"
        path.write_text("[project\nname = ")
        with pytest.raises(ConfigValidationError):
            load_pyproject_toml(path)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_find_in_current_dir(self, temp_project: Path):
        """Find pyproject.toml in current directory."""
        assert find_pyproject_toml(temp_project).name == "pyproject.toml"

    def test_find_in_parent_dir(self, temp_project: Path):
        """Find pyproject.toml in parent directory."""
        subdir = temp_project / "src" / "package"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == (temp_project / "pyproject.toml").resolve()


class TestExtractNextverConfig:
    """Tests for extract_nextver_config()."""

    def test_extract_existing(self):
        """Extract the tool table."""
        assert extract_nextver_config({"tool": {"nextver": {"dry_run": True}}}) == {"dry_run": True}

    def test_extract_missing(self):
        """Missing table gives an empty dict."""
        assert extract_nextver_config({"project": {"name": "test"}}) == {}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_with_config(self, temp_project: Path):
        """Load configuration from pyproject.toml."""
        config = load_config(temp_project)

        assert config.commits.major_types == ["breaking"]
        assert config.commits.minor_types == ["feat", "perf"]

    def test_load_defaults_when_no_config(self, tmp_path: Path):
        """Defaults are used without a [tool.nextver] section."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "test"\nversion = "1.0.0"\n')

        assert load_config(tmp_path) == NextverConfig()

    def test_invalid_config(self, tmp_path: Path):
        """Invalid values raise ConfigValidationError."""
        (tmp_path / "pyproject.toml").write_text("[tool.nextver.tags]\nenabled = 'sometimes'\n")

        with pytest.raises(ConfigValidationError, match=r"\[tool.nextver\]"):
            load_config(tmp_path)


class TestParseTitleOverrides:
    """Tests for parse_title_overrides()."""

    def test_empty(self):
        """Empty input means no overrides."""
        assert parse_title_overrides("") == {}
        assert parse_title_overrides(None) == {}

    def test_json_object(self):
        """A JSON object of strings is accepted."""
        assert parse_title_overrides('{"feat": "New", "fix": "Fixed"}') == {
            "feat": "New",
            "fix": "Fixed",
        }

    @pytest.mark.parametrize("text", ["not json", '["feat"]', '{"feat": 1}'])
    def test_invalid(self, text: str):
        """Anything but an object of strings is rejected."""
        with pytest.raises(ConfigValidationError):
            parse_title_overrides(text)


class TestGetProjectVersion:
    """Tests for get_project_version()."""

    def test_pep621(self, temp_project: Path):
        """Read [project].version."""
        assert get_project_version(temp_project) == "1.0.0"

    def test_poetry(self, tmp_path: Path):
        """Read [tool.poetry].version."""
        (tmp_path / "pyproject.toml").write_text('[tool.poetry]\nname = "x"\nversion = "0.4.1"\n')
        assert get_project_version(tmp_path) == "0.4.1"

    def test_missing_version_raises(self, tmp_path: Path):
        """A manifest without version raises VersionNotFoundError."""
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'test'\n")

        with pytest.raises(VersionNotFoundError):
            get_project_version(tmp_path)
