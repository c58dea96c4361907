"""Changelog rendering.

``render`` is a pure function of its input: the same commits, heading and
omitted types always produce byte-identical Markdown, so committed changelogs
diff cleanly from one release to the next.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from convrel.release.model import CommitRecord

BREAKING_KEY = "breaking"
CHANGELOG_HEADER = "# Changelog"

# Presentation order. Breaking changes come first, then the release drivers.
GROUP_ORDER: tuple[tuple[str, str], ...] = (
    (BREAKING_KEY, "Breaking Changes"),
    ("feat", "Features"),
    ("fix", "Bug Fixes"),
    ("perf", "Performance Improvements"),
    ("refactor", "Refactoring"),
    ("revert", "Reverts"),
    ("docs", "Documentation"),
    ("style", "Style"),
    ("test", "Tests"),
    ("build", "Build System"),
    ("ci", "Continuous Integration"),
    ("chore", "Miscellaneous Chores"),
)

DEFAULT_OMIT_TYPES: tuple[str, ...] = ("chore",)


@dataclass(frozen=True, slots=True)
class ChangelogGroup:
    key: str
    title: str
    entries: tuple[tuple[str | None, str], ...]


@dataclass(frozen=True, slots=True)
class ChangelogDocument:
    groups: tuple[ChangelogGroup, ...]
    text: str

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(g.key for g in self.groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups


def _group_key(commit: CommitRecord) -> str:
    return BREAKING_KEY if commit.is_breaking else commit.type


def _format_entry(scope: str | None, description: str) -> str:
    if scope:
        return f"- **{scope}:** {description}"
    return f"- {description}"


def render(
    commits: Iterable[CommitRecord],
    *,
    heading: str | None = None,
    omit_types: Sequence[str] = DEFAULT_OMIT_TYPES,
) -> ChangelogDocument:
    """Group commits by type and render them as Markdown.

    Args:
        commits: Commits in history order (order is kept inside each group)
        heading: Optional section heading, e.g. "## v1.2.0 - 2024-05-01"
        omit_types: Commit types left out of the document. Breaking
            commits are always listed.
    """
    buckets: dict[str, list[tuple[str | None, str]]] = {}
    for commit in commits:
        key = _group_key(commit)
        if key != BREAKING_KEY and key in omit_types:
            continue
        buckets.setdefault(key, []).append((commit.scope, commit.description))

    groups = tuple(
        ChangelogGroup(key=key, title=title, entries=tuple(buckets[key]))
        for key, title in GROUP_ORDER
        if buckets.get(key)
    )

    lines: list[str] = []
    if heading:
        lines.append(heading)
    for group in groups:
        if lines:
            lines.append("")
        lines.append(f"#### {group.title}")
        lines.extend(_format_entry(scope, desc) for scope, desc in group.entries)

    text = "\n".join(lines) + "\n" if lines else ""
    return ChangelogDocument(groups=groups, text=text)


def release_heading(tag: str, date: str) -> str:
    return f"## {tag} - {date}"


def prepend(section: str, existing: str | None) -> str:
    """New changelog file contents with ``section`` as the newest entry."""
    section = section.rstrip("\n") + "\n"
    if not existing or not existing.strip():
        return f"{CHANGELOG_HEADER}\n\n{section}"

    if existing.startswith(CHANGELOG_HEADER):
        rest = existing[len(CHANGELOG_HEADER) :].lstrip("\n")
        if not rest:
            return f"{CHANGELOG_HEADER}\n\n{section}"
        return f"{CHANGELOG_HEADER}\n\n{section}\n{rest}"

    return f"{CHANGELOG_HEADER}\n\n{section}\n{existing}"
