"""Release command - bump, changelog, commit and tag."""

from __future__ import annotations

import typer

from convrel.cli.commands._helpers import exit_with_code
from convrel.cli.context import CLIContext, build_context
from convrel.core.errors import ErrorCode
from convrel.core.result import Err, Ok
from convrel.output.console import Style
from convrel.output.errors import print_release_error
from convrel.release.errors import ReleaseError
from convrel.release.gateway import GitGateway
from convrel.release.model import BumpMode
from convrel.release.orchestrator import Confirm, ReleaseOrchestrator


def release(
    patch: bool = typer.Option(False, "--patch", help="Force a patch release"),
    minor: bool = typer.Option(False, "--minor", help="Force a minor release"),
    major: bool = typer.Option(False, "--major", help="Force a major release"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview only, change nothing"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to every prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo git commands"),
) -> None:
    """Release the commits since the last tag.

    Without a flag the bump level comes from the commit types.
    """
    ctx = build_context()

    mode = _bump_mode(ctx, patch=patch, minor=minor, major=major)
    gateway = GitGateway(
        ctx.repo,
        tag_prefix=ctx.config.tag_prefix,
        console=ctx.console if verbose else None,
    )
    orchestrator = ReleaseOrchestrator(
        gateway=gateway,
        console=ctx.console,
        confirm=_confirm(yes),
        config=ctx.config,
    )

    if dry_run:
        match orchestrator.plan(mode):
            case Ok(plan):
                ctx.console.print(f"dry-run: {plan.tag} not created", Style.DIM)
            case Err(error):
                _fail(ctx, error)
        return

    match orchestrator.release(mode):
        case Ok(_):
            return
        case Err(error):
            _fail(ctx, error)


def _bump_mode(ctx: CLIContext, *, patch: bool, minor: bool, major: bool) -> BumpMode:
    selected = [
        mode
        for mode, flag in ((BumpMode.PATCH, patch), (BumpMode.MINOR, minor), (BumpMode.MAJOR, major))
        if flag
    ]
    if len(selected) > 1:
        ctx.console.error("--patch, --minor and --major are mutually exclusive")
        exit_with_code(ErrorCode.FAILURE)
    return selected[0] if selected else BumpMode.AUTO


def _confirm(yes: bool) -> Confirm:
    if yes:
        return lambda _msg: True
    return lambda msg: typer.confirm(msg, default=False)


def _fail(ctx: CLIContext, error: ReleaseError) -> None:
    print_release_error(error, ctx.console)
    exit_with_code(ErrorCode.FAILURE)
