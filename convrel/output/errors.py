"""Error presentation utilities.

Centralized formatting of validation and release errors for the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from convrel.output.console import Style
from convrel.release.errors import (
    ChangelogWriteFailed,
    DirtyWorkingTree,
    GatewayFailure,
    MalformedGrammar,
    NothingToRelease,
    PartialRelease,
    ReleaseError,
    UnknownType,
    Unsafe,
    UserCancelled,
    ValidationError,
    WrongBranch,
)

if TYPE_CHECKING:
    from convrel.output.console import ConsoleProtocol

__all__ = ["print_release_error", "print_validation_error"]


def print_validation_error(error: ValidationError, console: ConsoleProtocol) -> None:
    match error:
        case MalformedGrammar(header=header, reason=reason):
            console.error(f"invalid commit message: {reason}")
            if header:
                console.print(f"  {header}", Style.DIM)
        case UnknownType(type=commit_type):
            console.error(f"unknown commit type: {commit_type}")
    console.print(f"hint: {error.hint}", Style.DIM)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error. Informational aborts are not shown as errors."""
    match error:
        case NothingToRelease():
            console.warning(error.message)
            console.print(f"hint: {error.hint}", Style.DIM)
        case UserCancelled():
            console.warning("Release cancelled")
        case Unsafe(violations=violations):
            console.error("release aborted")
            for violation in violations:
                match violation:
                    case WrongBranch(allowed=allowed):
                        console.print(
                            f"  {violation.message}; expected one of: {', '.join(allowed)}",
                            Style.DIM,
                        )
                    case DirtyWorkingTree():
                        console.print(f"  {violation.message}. {violation.hint}", Style.DIM)
        case GatewayFailure(error=git_error):
            console.error(str(git_error))
        case ChangelogWriteFailed(path=path, reason=reason):
            console.error(f"cannot write {path}: {reason}")
        case PartialRelease(repair=repair):
            console.error(error.message)
            console.print("The repository needs manual repair:", Style.WARNING)
            console.print(f"  {repair}", Style.DIM)
