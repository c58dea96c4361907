"""Repository gateway used by the release engine.

The engine only sees ``RepositoryGateway``. ``GitGateway`` implements it with
``convrel.git.Repository``; tests implement it in memory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from convrel.core.result import Err, Ok, Result
from convrel.git.repository import GitError, Repository
from convrel.output.console import ConsoleProtocol, Style
from convrel.release.classifier import record_from_message
from convrel.release.model import CommitRecord
from convrel.release.semver import SemVer, latest_version


class RepositoryGateway(Protocol):
    @property
    def root(self) -> Path: ...

    def tag_name(self, version: SemVer) -> str: ...

    def current_branch(self) -> Result[str, GitError]: ...

    def is_working_tree_clean(self) -> Result[bool, GitError]: ...

    def has_staged_changes(self) -> Result[bool, GitError]: ...

    def commits_since(self, tag: str | None) -> Result[tuple[CommitRecord, ...], GitError]: ...

    def latest_release_tag(self) -> Result[SemVer | None, GitError]: ...

    def create_tag(self, version: SemVer, annotation: str) -> Result[str, GitError]: ...

    def head(self) -> Result[str | None, GitError]: ...

    def commit_paths(self, paths: list[str], message: str) -> Result[str, GitError]: ...

    def unstage(self, paths: list[str]) -> Result[None, GitError]: ...

    def reset_hard(self, sha: str) -> Result[None, GitError]: ...


DETACHED_HEAD = "HEAD"


class GitGateway:
    """RepositoryGateway backed by the git CLI.

    When ``console`` is given, every mutating git command is echoed in DIM
    style before it runs.
    """

    def __init__(
        self,
        repo: Repository,
        *,
        tag_prefix: str = "v",
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._repo = repo
        self._tag_prefix = tag_prefix
        self._console = console

    @property
    def root(self) -> Path:
        return self._repo.path

    def tag_name(self, version: SemVer) -> str:
        return version.to_tag(self._tag_prefix)

    def current_branch(self) -> Result[str, GitError]:
        result = self._repo.current_branch()
        if isinstance(result, Err):
            return result
        return Ok(result.value or DETACHED_HEAD)

    def is_working_tree_clean(self) -> Result[bool, GitError]:
        # Untracked files do not count, same as `git diff --quiet`.
        status = self._repo.status()
        if isinstance(status, Err):
            return status
        return Ok(not status.value.unstaged)

    def has_staged_changes(self) -> Result[bool, GitError]:
        status = self._repo.status()
        if isinstance(status, Err):
            return status
        return Ok(bool(status.value.staged))

    def commits_since(self, tag: str | None) -> Result[tuple[CommitRecord, ...], GitError]:
        log = self._repo.log(since=tag)
        if isinstance(log, Err):
            return log
        return Ok(
            tuple(
                record_from_message(
                    sha=entry.sha,
                    message=entry.message,
                    timestamp=entry.timestamp,
                    is_merge=entry.is_merge,
                )
                for entry in log.value
            )
        )

    def latest_release_tag(self) -> Result[SemVer | None, GitError]:
        tags = self._repo.tags(f"{self._tag_prefix}*")
        if isinstance(tags, Err):
            return tags
        return Ok(latest_version(tags.value, self._tag_prefix))

    def create_tag(self, version: SemVer, annotation: str) -> Result[str, GitError]:
        name = self.tag_name(version)
        self._echo(f"git tag -a {name}")
        result = self._repo.create_tag(name, annotation)
        if isinstance(result, Err):
            return result
        return Ok(name)

    def head(self) -> Result[str | None, GitError]:
        return self._repo.head()

    def commit_paths(self, paths: list[str], message: str) -> Result[str, GitError]:
        self._echo(f"git add -- {' '.join(paths)}")
        staged = self._repo.stage(paths)
        if isinstance(staged, Err):
            return staged
        self._echo(f"git commit -m {message!r}")
        return self._repo.commit(message)

    def unstage(self, paths: list[str]) -> Result[None, GitError]:
        self._echo(f"git rm --cached -- {' '.join(paths)}")
        return self._repo.unstage(paths)

    def reset_hard(self, sha: str) -> Result[None, GitError]:
        self._echo(f"git reset --hard {sha}")
        return self._repo.reset_hard(sha)

    def _echo(self, command: str) -> None:
        if self._console is not None:
            self._console.print(command, Style.DIM)
