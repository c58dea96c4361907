"""Tests for core/config.py."""

from __future__ import annotations

from pathlib import Path

from convrel.core.config import (
    DEFAULT_BRANCHES,
    ReleaseConfig,
    load_config,
    load_config_or_default,
)
from convrel.core.result import Err, Ok


class TestDefaults:
    def test_default_values(self) -> None:
        config = ReleaseConfig()
        assert config.tag_prefix == "v"
        assert config.branches == DEFAULT_BRANCHES
        assert config.changelog.path == "CHANGELOG.md"
        assert config.changelog.omit_types == ("chore",)
        assert config.check.ignore_merge_commits is True

    def test_from_empty_dict(self) -> None:
        assert ReleaseConfig.from_dict({}) == ReleaseConfig()


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "convrel.toml"
        path.write_text(
            'tag_prefix = "release-"\n'
            'branches = ["main", "stable"]\n'
            "\n"
            "[changelog]\n"
            'path = "docs/CHANGES.md"\n'
            'omit_types = ["chore", "ci"]\n'
            "\n"
            "[check]\n"
            "ignore_merge_commits = false\n",
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        config = result.value
        assert config.tag_prefix == "release-"
        assert config.branches == ("main", "stable")
        assert config.changelog.path == "docs/CHANGES.md"
        assert config.changelog.omit_types == ("chore", "ci")
        assert config.check.ignore_merge_commits is False

    def test_empty_prefix_is_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "convrel.toml"
        path.write_text('tag_prefix = ""\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.tag_prefix == ""

    def test_empty_omit_types_shows_everything(self, tmp_path: Path) -> None:
        path = tmp_path / "convrel.toml"
        path.write_text("[changelog]\nomit_types = []\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.changelog.omit_types == ()

    def test_wrong_types_fall_back_to_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "convrel.toml"
        path.write_text("branches = 3\n[check]\nignore_merge_commits = 'yes'\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.branches == DEFAULT_BRANCHES
        assert result.value.check.ignore_merge_commits is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "convrel.toml"
        path.write_text("branches = [\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message


class TestLoadConfigOrDefault:
    def test_absent_file_gives_defaults(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path)

        assert isinstance(result, Ok)
        assert result.value == ReleaseConfig()

    def test_broken_file_is_an_error(self, tmp_path: Path) -> None:
        (tmp_path / "convrel.toml").write_text("= nope", encoding="utf-8")

        result = load_config_or_default(tmp_path)

        assert isinstance(result, Err)
