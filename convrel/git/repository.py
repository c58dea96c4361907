"""Git repository abstraction.

``Repository`` wraps the handful of git commands the release workflow needs.
Every call returns a ``Result``; nothing here raises on git failure.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.status():
        case Ok(status):
            print(f"Branch: {status.branch}")
            for entry in status.staged:
                print(f"staged: {entry.path}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from convrel.core.result import Err, Ok, Result
from convrel.platform.process import ProcessError
from convrel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

# Field and record separators for `git log --format`.
_FS = "\x1f"
_RS = "\x1e"

__all__ = [
    "GitError",
    "GitStatus",
    "LogEntry",
    "Repository",
    "StatusEntry",
    "find_repo_root",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def __str__(self) -> str:
        return f"git {self.command}: {self.message}"


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_staged(self) -> bool:
        return self.xy != "??" and self.xy[0] != " "

    @property
    def is_unstaged(self) -> bool:
        return self.xy != "??" and self.xy[1] != " "


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed ``git status --porcelain=v1 -b``.

    Attributes:
        branch: Current branch name ("" when it cannot be read)
        entries: All status entries (staged, unstaged, untracked)
    """

    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def staged(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.is_staged]

    @property
    def unstaged(self) -> list[StatusEntry]:
        return [e for e in self.entries if e.is_unstaged]


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One commit as read from ``git log``.

    Attributes:
        sha: Full commit hash
        message: Raw commit message (subject and body)
        timestamp: Committer date, UTC
        parents: Parent hashes (two or more for a merge)
    """

    sha: str
    message: str
    timestamp: datetime
    parents: tuple[str, ...] = ()

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


def find_repo_root(start: Path) -> Path | None:
    """Walk up from ``start`` to the directory containing ``.git``."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


class Repository:
    """A git working copy."""

    def __init__(self, path: Path) -> None:
        """
        Args:
            path: Path to repository root (containing .git)
        """
        self.path = path

    def status(self) -> Result[GitStatus, GitError]:
        """Run `git status --porcelain=v1 -b` and parse the output."""
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(_git_error("status", e, "git status failed"))
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def current_branch(self) -> Result[str | None, GitError]:
        """Get current branch name.

        Works on an unborn branch (fresh repository). Returns Ok(None) on a
        detached HEAD.
        """
        result = self._run(["symbolic-ref", "--short", "-q", "HEAD"])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e):
                # -q: exit 1 without output means HEAD is detached
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(None)
                return Err(_git_error("symbolic-ref", e, "cannot read current branch"))

    def head(self) -> Result[str | None, GitError]:
        """Get the HEAD commit hash, Ok(None) when there are no commits yet."""
        result = self._run(["rev-parse", "--verify", "-q", "HEAD"])
        match result:
            case Ok(stdout):
                return Ok(stdout.strip() or None)
            case Err(e):
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(None)
                return Err(_git_error("rev-parse", e, "cannot resolve HEAD"))

    def tags(self, pattern: str = "*") -> Result[tuple[str, ...], GitError]:
        """List tags matching ``pattern`` that are reachable from HEAD."""
        head = self.head()
        if isinstance(head, Err):
            return head
        if head.value is None:
            return Ok(())

        result = self._run(["tag", "--list", pattern, "--merged", "HEAD"])
        match result:
            case Err(e):
                return Err(_git_error("tag --list", e, "cannot list tags"))
            case Ok(stdout):
                return Ok(tuple(line.strip() for line in stdout.splitlines() if line.strip()))

    def log(self, since: str | None = None) -> Result[tuple[LogEntry, ...], GitError]:
        """Commits reachable from HEAD and not from ``since``, oldest first."""
        head = self.head()
        if isinstance(head, Err):
            return head
        if head.value is None:
            return Ok(())

        rev = f"{since}..HEAD" if since else "HEAD"
        fmt = f"--format=%H{_FS}%P{_FS}%ct{_FS}%B{_RS}"
        result = self._run(["log", "--reverse", fmt, rev])
        match result:
            case Err(e):
                return Err(_git_error("log", e, f"cannot read history for {rev}"))
            case Ok(stdout):
                return Ok(self._parse_log(stdout))

    def stage_all(self) -> Result[None, GitError]:
        result = self._run(["add", "-A"])
        if isinstance(result, Err):
            return Err(_git_error("add -A", result.error, "cannot stage changes"))
        return Ok(None)

    def stage(self, paths: list[str]) -> Result[None, GitError]:
        result = self._run(["add", "--", *paths])
        if isinstance(result, Err):
            return Err(_git_error("add", result.error, "cannot stage files"))
        return Ok(None)

    def unstage(self, paths: list[str]) -> Result[None, GitError]:
        """Drop paths from the index, keeping the files. Works without a HEAD."""
        result = self._run(["rm", "--cached", "-q", "--ignore-unmatch", "--", *paths])
        if isinstance(result, Err):
            return Err(_git_error("rm --cached", result.error, "cannot unstage files"))
        return Ok(None)

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the index. Returns the new HEAD hash."""
        result = self._run(["commit", "-m", message])
        if isinstance(result, Err):
            return Err(_git_error("commit", result.error, "commit failed"))

        head = self.head()
        if isinstance(head, Err):
            return head
        if head.value is None:
            return Err(GitError(command="commit", message="HEAD missing after commit"))
        return Ok(head.value)

    def create_tag(self, name: str, message: str) -> Result[None, GitError]:
        """Create an annotated tag at HEAD.

        The message is kept verbatim: Markdown headings start with '#', which
        git would otherwise strip as comments.
        """
        result = self._run(["tag", "-a", "--cleanup=verbatim", "-m", message, name])
        if isinstance(result, Err):
            return Err(_git_error("tag -a", result.error, f"cannot create tag {name}"))
        return Ok(None)

    def reset_hard(self, sha: str) -> Result[None, GitError]:
        result = self._run(["reset", "--hard", sha])
        if isinstance(result, Err):
            return Err(_git_error("reset --hard", result.error, f"cannot reset to {sha}"))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    def _parse_status(self, output: str) -> GitStatus:
        lines = [ln for ln in output.splitlines() if ln.strip()]
        if not lines:
            return GitStatus(branch="")

        # First line is branch info: ## branch...upstream [ahead N, behind M]
        branch = self._parse_branch_line(lines[0])

        entries: list[StatusEntry] = []
        for line in lines[1:]:
            entry = self._parse_entry(line)
            if entry:
                entries.append(entry)

        return GitStatus(branch=branch, entries=tuple(entries))

    def _parse_branch_line(self, line: str) -> str:
        s = line.strip()
        if s.startswith("##"):
            s = s[2:].lstrip()

        s = s.split(" [", 1)[0].strip()
        # Unborn branch: "## No commits yet on main"
        s = re.sub(r"^(No commits yet on|Initial commit on)\s+", "", s)

        return s.split("...", 1)[0].strip()

    def _parse_entry(self, line: str) -> StatusEntry | None:
        if len(line) < 4:
            return None
        if line.startswith("?? "):
            return StatusEntry(xy="??", path=line[3:])
        return StatusEntry(xy=line[:2], path=line[3:])

    def _parse_log(self, output: str) -> tuple[LogEntry, ...]:
        entries: list[LogEntry] = []
        for record in output.split(_RS):
            record = record.lstrip("\n")
            if not record.strip():
                continue
            parts = record.split(_FS, 3)
            if len(parts) != 4:
                continue
            sha, parents, ctime, message = parts
            entries.append(
                LogEntry(
                    sha=sha.strip(),
                    message=message.strip(),
                    timestamp=datetime.fromtimestamp(int(ctime.strip() or 0), tz=UTC),
                    parents=tuple(parents.split()),
                )
            )
        return tuple(entries)


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )
