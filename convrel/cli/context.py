from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from convrel.core.config import ReleaseConfig, load_config_or_default
from convrel.core.errors import ErrorCode
from convrel.core.result import Err
from convrel.git.repository import Repository, find_repo_root
from convrel.output.console import ConsoleProtocol, RichConsole

REPO_ENV_VAR = "CONVREL_REPO"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo: Repository
    config: ReleaseConfig
    console: ConsoleProtocol


def detect_repo_root() -> Path | None:
    """Repository root from ``CONVREL_REPO``, else the first ancestor of cwd with ``.git``."""
    env = os.environ.get(REPO_ENV_VAR)
    if env:
        root = Path(env).expanduser().resolve()
        return root if (root / ".git").exists() else None
    return find_repo_root(Path.cwd())


def build_context() -> CLIContext:
    root = detect_repo_root()
    if root is None:
        typer.echo("error: not inside a git repository", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    config_result = load_config_or_default(root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))

    return CLIContext(
        repo=Repository(root),
        config=config_result.value,
        console=RichConsole(),
    )
