"""Git operations.

Usage:
    from convrel.git import Repository

    repo = Repository(Path("/path/to/repo"))
    history = repo.log(since="v1.2.0")
"""

from convrel.git.repository import (
    GitError,
    GitStatus,
    LogEntry,
    Repository,
    StatusEntry,
    find_repo_root,
)

__all__ = [
    "GitError",
    "GitStatus",
    "LogEntry",
    "Repository",
    "StatusEntry",
    "find_repo_root",
]
