from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from convrel.release.semver import SemVer

CommitType = Literal[
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
    "revert",
]

COMMIT_TYPES: tuple[CommitType, ...] = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
    "revert",
)


class BumpLevel(IntEnum):
    """Magnitude of a version increment, ordered NONE < PATCH < MINOR < MAJOR."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()


class BumpMode(Enum):
    """How the release level is chosen: from history, or forced by the operator."""

    AUTO = "auto"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def forced_level(self) -> BumpLevel | None:
        match self:
            case BumpMode.AUTO:
                return None
            case BumpMode.PATCH:
                return BumpLevel.PATCH
            case BumpMode.MINOR:
                return BumpLevel.MINOR
            case BumpMode.MAJOR:
                return BumpLevel.MAJOR

    @property
    def is_forced(self) -> bool:
        return self is not BumpMode.AUTO


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """One historical commit, classified.

    Messages that do not follow the conventional grammar (merges, imported
    history) are kept as ``chore`` so that classification never fails.
    """

    id: str
    raw_message: str
    type: CommitType
    scope: str | None
    description: str
    is_breaking: bool
    timestamp: datetime
    is_merge: bool = False

    @property
    def short_id(self) -> str:
        return self.id[:8]


@dataclass(frozen=True, slots=True)
class ReleaseState:
    """Repository preconditions, read fresh for every release run."""

    current_branch: str
    working_tree_clean: bool
    staged_changes_present: bool


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Outcome of the preview step: what a confirmed release would do."""

    mode: BumpMode
    level: BumpLevel
    current: SemVer | None
    next: SemVer
    tag: str
    commits: tuple[CommitRecord, ...]
    changelog: str


@dataclass(frozen=True, slots=True)
class Released:
    version: SemVer
    tag: str
    commit: str
    changelog_path: Path
