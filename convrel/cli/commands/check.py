from __future__ import annotations

from convrel.cli.commands._helpers import exit_on_error, exit_with_code
from convrel.cli.context import build_context
from convrel.core.errors import ErrorCode
from convrel.output.console import Style
from convrel.release.gateway import GitGateway
from convrel.release.validator import check_history, split_message


def check() -> None:
    """Validate every commit message in the history of HEAD."""
    ctx = build_context()

    gateway = GitGateway(ctx.repo, tag_prefix=ctx.config.tag_prefix)
    commits = exit_on_error(gateway.commits_since(None), ctx)

    violations = check_history(commits, ignore_merges=ctx.config.check.ignore_merge_commits)
    if not violations:
        ctx.console.success(f"{len(commits)} commit(s) checked, no errors")
        return

    for v in violations:
        header, _ = split_message(v.commit.raw_message)
        ctx.console.error(f"{v.commit.short_id}: {v.error.message}")
        if header:
            ctx.console.print(f"  {header}", Style.DIM)

    ctx.console.newline()
    ctx.console.print(f"{len(violations)} of {len(commits)} commit(s) invalid", Style.WARNING)
    exit_with_code(ErrorCode.FAILURE)
