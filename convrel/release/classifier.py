from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from convrel.core.result import Ok
from convrel.release.model import BumpLevel, CommitRecord, CommitType
from convrel.release.validator import split_message, validate

_TYPE_LEVELS: dict[CommitType, BumpLevel] = {
    "feat": BumpLevel.MINOR,
    "fix": BumpLevel.PATCH,
}


def record_from_message(
    *,
    sha: str,
    message: str,
    timestamp: datetime,
    is_merge: bool = False,
) -> CommitRecord:
    """Build a CommitRecord; never fails.

    A message outside the grammar becomes a non-breaking ``chore`` whose
    description is its first line.
    """
    parsed = validate(message)
    if isinstance(parsed, Ok) and not parsed.value.exempt:
        return CommitRecord(
            id=sha,
            raw_message=message,
            type=parsed.value.type,
            scope=parsed.value.scope,
            description=parsed.value.description,
            is_breaking=parsed.value.is_breaking,
            timestamp=timestamp,
            is_merge=is_merge,
        )

    header, _ = split_message(message)
    return CommitRecord(
        id=sha,
        raw_message=message,
        type="chore",
        scope=None,
        description=header,
        is_breaking=False,
        timestamp=timestamp,
        is_merge=is_merge,
    )


def level_of(commit: CommitRecord) -> BumpLevel:
    if commit.is_breaking:
        return BumpLevel.MAJOR
    return _TYPE_LEVELS.get(commit.type, BumpLevel.NONE)


def classify(commits: Iterable[CommitRecord]) -> tuple[BumpLevel, tuple[CommitRecord, ...]]:
    """Required bump for a set of commits: the highest level any one implies."""
    records = tuple(commits)
    level = max((level_of(c) for c in records), default=BumpLevel.NONE)
    return (level, records)
