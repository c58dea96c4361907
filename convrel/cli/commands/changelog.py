from __future__ import annotations

from convrel.cli.commands._helpers import exit_on_error
from convrel.cli.context import build_context
from convrel.release.changelog import render
from convrel.release.gateway import GitGateway

UNRELEASED_HEADING = "## Unreleased"


def changelog() -> None:
    """Print the changelog of commits since the last release. Writes nothing."""
    ctx = build_context()

    gateway = GitGateway(ctx.repo, tag_prefix=ctx.config.tag_prefix)
    current = exit_on_error(gateway.latest_release_tag(), ctx)
    since = gateway.tag_name(current) if current is not None else None
    commits = exit_on_error(gateway.commits_since(since), ctx)

    document = render(
        commits,
        heading=UNRELEASED_HEADING,
        omit_types=ctx.config.changelog.omit_types,
    )
    if document.is_empty:
        ctx.console.info(f"no unreleased changes since {since or 'the first commit'}")
        return

    ctx.console.print(document.text.rstrip("\n"))
