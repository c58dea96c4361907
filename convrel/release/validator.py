"""Conventional commit message validation.

Grammar of the header (first line)::

    type(scope)!: description

``(scope)`` and ``!`` are optional; a scope, when present, must not be empty.
A ``BREAKING CHANGE:`` (or ``BREAKING-CHANGE:``) footer in the body also
marks the commit as breaking. Messages created by ``git commit --fixup``,
``--squash`` and ``--amend`` style rewrites are accepted as-is.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import cast

from convrel.core.result import Err, Ok, Result
from convrel.release.errors import MalformedGrammar, UnknownType, ValidationError
from convrel.release.model import COMMIT_TYPES, CommitRecord, CommitType

EXEMPT_PREFIXES: tuple[str, ...] = ("fixup!", "squash!", "amend!")

_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z][A-Za-z0-9-]*)"
    r"(?:\((?P<scope>[^()]*)\))?"
    r"(?P<bang>!)?"
    r": (?P<description>.*)$"
)
_BREAKING_FOOTER_RE = re.compile(r"^BREAKING[ -]CHANGE: ", re.MULTILINE)
_SCISSORS = "------------------------ >8 ------------------------"


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    type: CommitType
    scope: str | None
    description: str
    is_breaking: bool
    exempt: bool = False


@dataclass(frozen=True, slots=True)
class HistoryViolation:
    commit: CommitRecord
    error: ValidationError


def split_message(message: str) -> tuple[str, str]:
    """Split a commit message into its header (first non-blank line) and body."""
    lines = message.strip().splitlines()
    for i, line in enumerate(lines):
        if line.strip():
            return line.strip(), "\n".join(lines[i + 1 :]).strip()
    return "", ""


def validate(message: str) -> Result[ParsedCommit, ValidationError]:
    """Parse a commit message, or report why it is not a conventional commit."""
    header, body = split_message(message)

    if header.startswith(EXEMPT_PREFIXES):
        return Ok(
            ParsedCommit(
                type="chore",
                scope=None,
                description=header,
                is_breaking=False,
                exempt=True,
            )
        )

    if not header:
        return Err(MalformedGrammar(header=header, reason="empty message"))

    m = _HEADER_RE.match(header)
    if m is None:
        reason = "missing ':' separator" if ":" not in header else "expected 'type: '"
        return Err(MalformedGrammar(header=header, reason=reason))

    commit_type = m.group("type")
    scope = m.group("scope")
    description = m.group("description").strip()

    if scope is not None and not scope.strip():
        return Err(MalformedGrammar(header=header, reason="empty scope"))
    if not description:
        return Err(MalformedGrammar(header=header, reason="empty description"))
    if commit_type not in COMMIT_TYPES:
        return Err(UnknownType(type=commit_type))

    is_breaking = m.group("bang") is not None or _BREAKING_FOOTER_RE.search(body) is not None

    return Ok(
        ParsedCommit(
            type=cast(CommitType, commit_type),
            scope=scope.strip() if scope is not None else None,
            description=description,
            is_breaking=is_breaking,
        )
    )


def build_message(commit_type: str, description: str, scope: str | None = None) -> str:
    """Assemble ``type(scope): description`` from command-line parts."""
    scope = (scope or "").strip()
    prefix = f"{commit_type}({scope})" if scope else commit_type
    return f"{prefix}: {description.strip()}"


def strip_comments(text: str, comment_char: str = "#") -> str:
    """Drop comment lines and everything below the scissors line.

    Mirrors what git itself removes from COMMIT_EDITMSG before committing.
    """
    kept: list[str] = []
    for line in text.splitlines():
        if line.startswith(comment_char) and _SCISSORS in line:
            break
        if line.startswith(comment_char):
            continue
        kept.append(line)
    return "\n".join(kept).strip()


def check_history(
    commits: Iterable[CommitRecord],
    *,
    ignore_merges: bool = True,
) -> tuple[HistoryViolation, ...]:
    """Validate every commit; returns all violations, in history order."""
    violations: list[HistoryViolation] = []
    for commit in commits:
        if ignore_merges and commit.is_merge:
            continue
        result = validate(commit.raw_message)
        if isinstance(result, Err):
            violations.append(HistoryViolation(commit=commit, error=result.error))
    return tuple(violations)
