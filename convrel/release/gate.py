from __future__ import annotations

from collections.abc import Collection

from convrel.core.result import Err, Ok, Result
from convrel.git.repository import GitError
from convrel.release.errors import DirtyWorkingTree, SafetyViolation, WrongBranch
from convrel.release.gateway import RepositoryGateway
from convrel.release.model import ReleaseState


def snapshot(gateway: RepositoryGateway) -> Result[ReleaseState, GitError]:
    """Read the repository preconditions. Never cached: call once per run."""
    branch = gateway.current_branch()
    if isinstance(branch, Err):
        return branch
    clean = gateway.is_working_tree_clean()
    if isinstance(clean, Err):
        return clean
    staged = gateway.has_staged_changes()
    if isinstance(staged, Err):
        return staged

    return Ok(
        ReleaseState(
            current_branch=branch.value,
            working_tree_clean=clean.value,
            staged_changes_present=staged.value,
        )
    )


def check(
    state: ReleaseState,
    allowed_branches: Collection[str],
) -> Result[None, tuple[SafetyViolation, ...]]:
    """Evaluate every rule in order and report all violations.

    WrongBranch can be overridden by the operator; DirtyWorkingTree cannot.
    """
    violations: list[SafetyViolation] = []

    if state.current_branch not in allowed_branches:
        violations.append(
            WrongBranch(branch=state.current_branch, allowed=tuple(allowed_branches))
        )

    if not state.working_tree_clean or state.staged_changes_present:
        violations.append(
            DirtyWorkingTree(
                unstaged=not state.working_tree_clean,
                staged=state.staged_changes_present,
            )
        )

    if violations:
        return Err(tuple(violations))
    return Ok(None)


def fatal_violations(violations: tuple[SafetyViolation, ...]) -> tuple[SafetyViolation, ...]:
    return tuple(v for v in violations if v.fatal)
