from __future__ import annotations

from pathlib import Path

from convrel.git.repository import GitError
from convrel.output.console import MockConsole, Style
from convrel.output.errors import print_release_error, print_validation_error
from convrel.release.errors import (
    ChangelogWriteFailed,
    DirtyWorkingTree,
    GatewayFailure,
    MalformedGrammar,
    NothingToRelease,
    PartialRelease,
    UnknownType,
    Unsafe,
    UserCancelled,
    WrongBranch,
)


def test_unknown_type_lists_allowed_types() -> None:
    console = MockConsole()
    print_validation_error(UnknownType(type="feature"), console)

    assert console.has_error()
    assert "feature" in console.text
    assert "feat, fix" in console.text


def test_malformed_grammar_shows_header() -> None:
    console = MockConsole()
    print_validation_error(MalformedGrammar(header="oops", reason="missing ':' separator"), console)

    assert "missing ':' separator" in console.text
    assert console.find("oops")


def test_nothing_to_release_is_a_warning() -> None:
    console = MockConsole()
    print_release_error(NothingToRelease(since_tag="v1.0.0"), console)

    assert not console.has_error()
    assert console.has_warning()
    assert "v1.0.0" in console.text


def test_cancelled_is_a_warning() -> None:
    console = MockConsole()
    print_release_error(UserCancelled(), console)

    assert not console.has_error()
    assert "cancelled" in console.text


def test_unsafe_lists_every_violation() -> None:
    console = MockConsole()
    error = Unsafe(
        violations=(
            WrongBranch(branch="feature", allowed=("main", "master")),
            DirtyWorkingTree(unstaged=True, staged=False),
        )
    )
    print_release_error(error, console)

    assert console.has_error()
    assert console.find("feature")
    assert console.find("uncommitted changes")


def test_gateway_failure_includes_command() -> None:
    console = MockConsole()
    print_release_error(GatewayFailure(GitError(command="tag -a", message="tag exists")), console)

    assert "git tag -a: tag exists" in console.text


def test_changelog_write_failure() -> None:
    console = MockConsole()
    print_release_error(ChangelogWriteFailed(path=Path("CHANGELOG.md"), reason="read-only"), console)

    assert "read-only" in console.text


def test_partial_release_prints_repair() -> None:
    console = MockConsole()
    error = PartialRelease(tag="v1.0.0", detail="tag missing", repair="git tag -a v1.0.0")
    print_release_error(error, console)

    assert console.has_error()
    repair = console.find("git tag -a v1.0.0")
    assert repair and repair[0].style == Style.DIM
