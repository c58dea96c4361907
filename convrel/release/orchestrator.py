"""Release orchestration.

One run walks through::

    guard -> classify -> preview -> confirm -> commit -> report

and ends either in ``Ok(Released)`` or in an ``Err`` naming why it stopped.
Nothing is written to the repository before the commit step, and the commit
step either lands both the changelog commit and the tag, rolls back, or
reports ``PartialRelease``. No git call is ever retried.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

from convrel.core.config import ReleaseConfig
from convrel.core.result import Err, Ok, Result
from convrel.output.console import ConsoleProtocol, Style
from convrel.release.changelog import prepend, release_heading, render
from convrel.release.classifier import classify
from convrel.release.errors import (
    ChangelogWriteFailed,
    GatewayFailure,
    NothingToRelease,
    PartialRelease,
    ReleaseError,
    Unsafe,
    UserCancelled,
    WrongBranch,
)
from convrel.release.gate import check, fatal_violations, snapshot
from convrel.release.gateway import RepositoryGateway
from convrel.release.model import BumpLevel, BumpMode, ReleasePlan, Released
from convrel.release.semver import INITIAL_VERSION

Confirm = Callable[[str], bool]

RELEASE_COMMIT_TEMPLATE = "chore(version): {tag}"


class ReleaseOrchestrator:
    def __init__(
        self,
        *,
        gateway: RepositoryGateway,
        console: ConsoleProtocol,
        confirm: Confirm,
        config: ReleaseConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._gateway = gateway
        self._console = console
        self._confirm = confirm
        self._config = config or ReleaseConfig()
        self._today = today

    def plan(self, mode: BumpMode) -> Result[ReleasePlan, ReleaseError]:
        """Guard, classify and preview. Does not touch the repository."""
        guarded = self._guard()
        if isinstance(guarded, Err):
            return guarded

        # Current version is re-read on every run.
        current_r = self._gateway.latest_release_tag()
        if isinstance(current_r, Err):
            return Err(GatewayFailure(current_r.error))
        current = current_r.value
        since = self._gateway.tag_name(current) if current is not None else None

        commits_r = self._gateway.commits_since(since)
        if isinstance(commits_r, Err):
            return Err(GatewayFailure(commits_r.error))

        forced = mode.forced_level
        if forced is None:
            level, commits = classify(commits_r.value)
            if level == BumpLevel.NONE:
                return Err(NothingToRelease(since_tag=since))
        else:
            level, commits = forced, commits_r.value

        next_version = (current or INITIAL_VERSION).bump(level)
        tag = self._gateway.tag_name(next_version)
        document = render(
            commits,
            heading=release_heading(tag, self._today().isoformat()),
            omit_types=self._config.changelog.omit_types,
        )

        plan = ReleasePlan(
            mode=mode,
            level=level,
            current=current,
            next=next_version,
            tag=tag,
            commits=commits,
            changelog=document.text,
        )
        self._print_preview(plan)
        return Ok(plan)

    def release(self, mode: BumpMode) -> Result[Released, ReleaseError]:
        planned = self.plan(mode)
        if isinstance(planned, Err):
            return planned
        plan = planned.value

        # Forced bumps are explicit operator intent and skip this prompt.
        if not mode.is_forced and not self._confirm(f"Create release {plan.tag}?"):
            return Err(UserCancelled())

        released = self._commit(plan)
        if isinstance(released, Err):
            return released

        self._console.success(f"Released {released.value.tag}")
        return released

    def _guard(self) -> Result[None, ReleaseError]:
        state = snapshot(self._gateway)
        if isinstance(state, Err):
            return Err(GatewayFailure(state.error))

        checked = check(state.value, self._config.branches)
        if isinstance(checked, Ok):
            return Ok(None)

        violations = checked.error
        # Fatal aborts are reported by the caller.
        if fatal_violations(violations):
            return Err(Unsafe(violations))

        for violation in violations:
            self._console.warning(violation.message)
            if isinstance(violation, WrongBranch) and not self._confirm("Continue anyway?"):
                return Err(Unsafe(violations))

        return Ok(None)

    def _print_preview(self, plan: ReleasePlan) -> None:
        self._console.header("Changes to be released")
        if plan.changelog:
            self._console.print(plan.changelog.rstrip("\n"))
        current = str(plan.current) if plan.current is not None else "none"
        self._console.newline()
        self._console.info(f"{current} -> {plan.next} ({plan.level} bump, {plan.mode.value})")
        self._console.print(f"{len(plan.commits)} commit(s) since last release", Style.DIM)

    def _commit(self, plan: ReleasePlan) -> Result[Released, ReleaseError]:
        rel_path = self._config.changelog.path
        path = self._gateway.root / rel_path

        before_r = self._gateway.head()
        if isinstance(before_r, Err):
            return Err(GatewayFailure(before_r.error))
        before = before_r.value

        try:
            previous = path.read_text(encoding="utf-8") if path.exists() else None
        except OSError as e:
            return Err(ChangelogWriteFailed(path=path, reason=str(e)))

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(prepend(plan.changelog, previous), encoding="utf-8")
        except OSError as e:
            restored = _restore_file(path, previous)
            if isinstance(restored, Err):
                return Err(
                    PartialRelease(
                        tag=plan.tag,
                        detail=f"changelog write failed and could not be restored: {e}",
                        repair=f"Run `git checkout -- {rel_path}` to restore it.",
                    )
                )
            return Err(ChangelogWriteFailed(path=path, reason=str(e)))

        message = RELEASE_COMMIT_TEMPLATE.format(tag=plan.tag)
        committed = self._gateway.commit_paths([rel_path], message)
        if isinstance(committed, Err):
            undone = self._rollback(before, rel_path, previous, committed=False)
            if isinstance(undone, Err):
                return Err(
                    PartialRelease(
                        tag=plan.tag,
                        detail=f"changelog written but not committed ({undone.error})",
                        repair=f"Inspect `git status` and restore {rel_path}.",
                    )
                )
            return Err(GatewayFailure(committed.error))
        commit_sha = committed.value

        tagged = self._gateway.create_tag(plan.next, plan.changelog or plan.tag)
        if isinstance(tagged, Err):
            undone = self._rollback(before, rel_path, previous, committed=True)
            if isinstance(undone, Err):
                return Err(
                    PartialRelease(
                        tag=plan.tag,
                        detail=(
                            f"changelog committed as {commit_sha[:8]} but tag was not "
                            f"created: {tagged.error.message}"
                        ),
                        repair=(
                            f"Create the tag with `git tag -a {plan.tag} {commit_sha}` "
                            "or drop the release commit."
                        ),
                    )
                )
            return Err(GatewayFailure(tagged.error))

        return Ok(
            Released(
                version=plan.next,
                tag=tagged.value,
                commit=commit_sha,
                changelog_path=path,
            )
        )

    def _rollback(
        self,
        before: str | None,
        rel_path: str,
        previous: str | None,
        *,
        committed: bool,
    ) -> Result[None, str]:
        """Return the repository to the state it had before the commit step."""
        path = self._gateway.root / rel_path
        if before is None:
            if committed:
                return Err("no commit to reset to")
            # Unborn branch: the changelog only reached the index.
            self._console.warning(f"unstaging {rel_path}")
            unstaged = self._gateway.unstage([rel_path])
            if isinstance(unstaged, Err):
                return Err(str(unstaged.error))
            return _restore_file(path, previous)

        self._console.warning(f"rolling back to {before[:8]}")
        reset = self._gateway.reset_hard(before)
        if isinstance(reset, Err):
            return Err(str(reset.error))

        # The reset leaves an untracked changelog alone.
        return _restore_file(path, previous)


def _restore_file(path: Path, previous: str | None) -> Result[None, str]:
    try:
        if previous is None:
            path.unlink(missing_ok=True)
        else:
            path.write_text(previous, encoding="utf-8")
    except OSError as e:
        return Err(str(e))
    return Ok(None)
