"""Verify command - validate one commit message (also the commit-msg hook)."""

from __future__ import annotations

from pathlib import Path

import typer

from convrel.cli.commands._helpers import exit_with_code
from convrel.core.errors import ErrorCode
from convrel.core.result import Err, Ok
from convrel.output.console import ConsoleProtocol, RichConsole
from convrel.output.errors import print_validation_error
from convrel.release.validator import strip_comments, validate


def make_console() -> ConsoleProtocol:
    return RichConsole(stderr=True)


def verify(
    message: str | None = typer.Argument(None, help="Commit message to check", show_default=False),
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Read the message from a file (commit-msg hook: pass $1)",
        show_default=False,
    ),
) -> None:
    """Check that a commit message follows the conventional format.

    Install as a hook with: echo 'convrel verify --file "$1"' > .git/hooks/commit-msg
    """
    console = make_console()

    if (message is None) == (file is None):
        console.error("give exactly one of MESSAGE or --file")
        exit_with_code(ErrorCode.FAILURE)

    if file is not None:
        try:
            text = strip_comments(file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            console.error(f"cannot read {file}: {e}")
            exit_with_code(ErrorCode.FAILURE)
    else:
        text = message or ""

    match validate(text):
        case Ok(parsed) if parsed.exempt:
            console.info("fixup/squash commit, not checked")
        case Ok(parsed):
            breaking = " (breaking)" if parsed.is_breaking else ""
            console.success(f"valid {parsed.type} commit{breaking}")
        case Err(error):
            print_validation_error(error, console)
            exit_with_code(ErrorCode.FAILURE)
