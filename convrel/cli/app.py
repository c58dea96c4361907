from __future__ import annotations

import os
from pathlib import Path

import typer

from convrel import __version__
from convrel.cli.commands.changelog import changelog
from convrel.cli.commands.check import check
from convrel.cli.commands.commit import commit
from convrel.cli.commands.release import release
from convrel.cli.commands.verify import verify
from convrel.cli.context import REPO_ENV_VAR
from convrel.core.errors import ErrorCode

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(commit)
app.command()(verify)
app.command()(check)
app.command()(changelog)
app.command()(release)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.FAILURE))

        if not (root / ".git").exists():
            typer.echo(f"error: --repo '{root}' is not a git repository", err=True)
            raise typer.Exit(code=int(ErrorCode.FAILURE))

        os.environ[REPO_ENV_VAR] = str(root)


def main() -> None:
    app()
