"""Commit command - create a conventional commit from its parts."""

from __future__ import annotations

import typer

from convrel.cli.commands._helpers import exit_on_error, exit_with_code
from convrel.cli.context import build_context
from convrel.core.errors import ErrorCode
from convrel.core.result import Err
from convrel.output.errors import print_validation_error
from convrel.release.errors import MalformedGrammar
from convrel.release.validator import build_message, validate


def commit(
    commit_type: str = typer.Argument(..., metavar="TYPE", help="Commit type (feat, fix, ...)"),
    message: str = typer.Argument(..., help="Short description"),
    scope: str | None = typer.Argument(None, help="Optional scope", show_default=False),
) -> None:
    """Validate and create a conventional commit.

    Stages every change first when nothing is staged.
    """
    ctx = build_context()

    text = build_message(commit_type, message, scope)
    parsed = validate(text)
    if isinstance(parsed, Err):
        print_validation_error(parsed.error, ctx.console)
        exit_with_code(ErrorCode.FAILURE)
    if parsed.value.exempt:
        # fixup!/squash!/amend! are accepted from `git commit --fixup` only.
        print_validation_error(
            MalformedGrammar(header=text, reason="autosquash prefixes are not a commit type"),
            ctx.console,
        )
        exit_with_code(ErrorCode.FAILURE)

    status = exit_on_error(ctx.repo.status(), ctx)
    if not status.staged:
        exit_on_error(ctx.repo.stage_all(), ctx)

    sha = exit_on_error(ctx.repo.commit(text), ctx)
    ctx.console.success(f"[{sha[:8]}] {text}")
