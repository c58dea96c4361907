"""Error payloads for commit validation, safety checks and releases.

Each family is a union of frozen dataclasses so callers can ``match`` on the
exact reason. Every variant exposes ``message`` and ``hint`` for the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from convrel.git.repository import GitError
from convrel.release.model import COMMIT_TYPES

_GRAMMAR_HINT = "expected 'type(scope): description', e.g. 'feat(api): add endpoint'"


# -----------------------------------------------------------------------------
# Commit message validation
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MalformedGrammar:
    header: str
    reason: str

    @property
    def message(self) -> str:
        return f"malformed commit message ({self.reason}): {self.header!r}"

    @property
    def hint(self) -> str:
        return _GRAMMAR_HINT


@dataclass(frozen=True, slots=True)
class UnknownType:
    type: str

    @property
    def message(self) -> str:
        return f"unknown commit type: {self.type!r}"

    @property
    def hint(self) -> str:
        return f"allowed types: {', '.join(COMMIT_TYPES)}"


ValidationError = MalformedGrammar | UnknownType


# -----------------------------------------------------------------------------
# Release safety gate
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WrongBranch:
    branch: str
    allowed: tuple[str, ...]

    fatal = False

    @property
    def message(self) -> str:
        return f"not on a release branch (currently on {self.branch})"

    @property
    def hint(self) -> str:
        return f"release branches: {', '.join(self.allowed)}"


@dataclass(frozen=True, slots=True)
class DirtyWorkingTree:
    unstaged: bool
    staged: bool

    fatal = True

    @property
    def message(self) -> str:
        return "you have uncommitted changes"

    @property
    def hint(self) -> str:
        return "Commit or stash them first."


SafetyViolation = WrongBranch | DirtyWorkingTree


# -----------------------------------------------------------------------------
# Release orchestration
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NothingToRelease:
    since_tag: str | None

    @property
    def message(self) -> str:
        since = self.since_tag or "the first commit"
        return f"nothing to release since {since}"

    @property
    def hint(self) -> str:
        return (
            "Only feat, fix or breaking commits trigger a release; "
            "use --patch/--minor/--major to force one."
        )


@dataclass(frozen=True, slots=True)
class UserCancelled:
    @property
    def message(self) -> str:
        return "release cancelled"

    @property
    def hint(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class Unsafe:
    violations: tuple[SafetyViolation, ...]

    @property
    def message(self) -> str:
        return "; ".join(v.message for v in self.violations)

    @property
    def hint(self) -> str | None:
        return self.violations[0].hint if self.violations else None


@dataclass(frozen=True, slots=True)
class GatewayFailure:
    error: GitError

    @property
    def message(self) -> str:
        return str(self.error)

    @property
    def hint(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class ChangelogWriteFailed:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"failed to write changelog: {self.reason}"

    @property
    def hint(self) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class PartialRelease:
    """The repository was left half-released and needs a human."""

    tag: str
    detail: str
    repair: str

    @property
    def message(self) -> str:
        return f"partial release of {self.tag}: {self.detail}"

    @property
    def hint(self) -> str:
        return self.repair


ReleaseError = (
    NothingToRelease
    | UserCancelled
    | Unsafe
    | GatewayFailure
    | ChangelogWriteFailed
    | PartialRelease
)
