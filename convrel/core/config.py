"""Typed configuration loading.

The optional ``convrel.toml`` at the repository root tunes the release
workflow. Every key has a default, so a repository without the file behaves
like this: release from ``main``/``master``, tags ``vX.Y.Z``,
changelog in ``CHANGELOG.md``.

Example::

    tag_prefix = "v"
    branches = ["main", "release"]

    [changelog]
    path = "docs/CHANGELOG.md"
    omit_types = ["chore", "ci"]

    [check]
    ignore_merge_commits = true
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BRANCHES",
    "DEFAULT_TAG_PREFIX",
    "ChangelogConfig",
    "CheckConfig",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "convrel.toml"

DEFAULT_TAG_PREFIX = "v"
DEFAULT_BRANCHES: tuple[str, ...] = ("main", "master")
DEFAULT_CHANGELOG_PATH = "CHANGELOG.md"
DEFAULT_OMIT_TYPES: tuple[str, ...] = ("chore",)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    """Where the changelog lives and which commit types it hides."""

    path: str = DEFAULT_CHANGELOG_PATH
    omit_types: tuple[str, ...] = DEFAULT_OMIT_TYPES


@dataclass(frozen=True, slots=True)
class CheckConfig:
    """History check options."""

    ignore_merge_commits: bool = True


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    tag_prefix: str = DEFAULT_TAG_PREFIX
    branches: tuple[str, ...] = DEFAULT_BRANCHES
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    check: CheckConfig = field(default_factory=CheckConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create config from a parsed TOML mapping."""
        changelog: StrDict = get_table(data, "changelog") or {}
        check: StrDict = get_table(data, "check") or {}

        tag_prefix = get_str(data, "tag_prefix")
        branches = get_str_list(data, "branches")
        omit_types = get_str_list(changelog, "omit_types")
        ignore_merges = get_bool(check, "ignore_merge_commits")

        return cls(
            tag_prefix=DEFAULT_TAG_PREFIX if tag_prefix is None else tag_prefix,
            branches=branches or DEFAULT_BRANCHES,
            changelog=ChangelogConfig(
                path=get_str(changelog, "path") or DEFAULT_CHANGELOG_PATH,
                omit_types=DEFAULT_OMIT_TYPES if omit_types is None else omit_types,
            ),
            check=CheckConfig(
                ignore_merge_commits=True if ignore_merges is None else ignore_merges,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to convrel.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load ``convrel.toml`` from the repository root, or defaults when absent.

    A file that exists but fails to parse is returned as an error, never
    replaced by defaults.
    """
    path = repo_root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
