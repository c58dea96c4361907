"""Tests for release/classifier.py."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime

from convrel.release.classifier import classify, level_of, record_from_message
from convrel.release.model import BumpLevel, CommitRecord

_TS = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _rec(message: str, sha: str = "a" * 40) -> CommitRecord:
    return record_from_message(sha=sha, message=message, timestamp=_TS)


class TestRecordFromMessage:
    def test_conventional_message(self) -> None:
        record = _rec("feat(api): add endpoint\n\nlonger body")

        assert record.type == "feat"
        assert record.scope == "api"
        assert record.description == "add endpoint"
        assert record.raw_message == "feat(api): add endpoint\n\nlonger body"
        assert record.timestamp == _TS
        assert record.short_id == "a" * 8

    def test_invalid_message_becomes_chore(self) -> None:
        record = _rec("Merge pull request #12 from topic\n\nstuff")

        assert record.type == "chore"
        assert record.scope is None
        assert record.description == "Merge pull request #12 from topic"
        assert record.is_breaking is False

    def test_unknown_type_becomes_chore(self) -> None:
        record = _rec("feature!: big thing")

        assert record.type == "chore"
        assert record.is_breaking is False

    def test_fixup_becomes_chore(self) -> None:
        record = _rec("fixup! feat: add endpoint")

        assert record.type == "chore"
        assert record.description == "fixup! feat: add endpoint"


class TestLevels:
    def test_level_of(self) -> None:
        assert level_of(_rec("feat: x")) == BumpLevel.MINOR
        assert level_of(_rec("fix: x")) == BumpLevel.PATCH
        assert level_of(_rec("docs: x")) == BumpLevel.NONE
        assert level_of(_rec("chore!: x")) == BumpLevel.MAJOR
        assert level_of(_rec("fix: x\n\nBREAKING CHANGE: y")) == BumpLevel.MAJOR

    def test_empty_history(self) -> None:
        assert classify([]) == (BumpLevel.NONE, ())

    def test_highest_level_wins(self) -> None:
        commits = [_rec("fix: a"), _rec("feat: b"), _rec("docs: c")]

        level, records = classify(commits)

        assert level == BumpLevel.MINOR
        assert records == tuple(commits)

    def test_breaking_wins_over_everything(self) -> None:
        level, _ = classify([_rec("feat: a"), _rec("perf!: b"), _rec("fix: c")])

        assert level == BumpLevel.MAJOR

    def test_only_non_release_types(self) -> None:
        level, _ = classify([_rec("docs: a"), _rec("ci: b"), _rec("not conventional")])

        assert level == BumpLevel.NONE

    def test_levels_are_ordered(self) -> None:
        assert BumpLevel.NONE < BumpLevel.PATCH < BumpLevel.MINOR < BumpLevel.MAJOR
        assert str(BumpLevel.MINOR) == "minor"

    def test_order_does_not_change_level(self) -> None:
        commits = [_rec("docs: a"), _rec("fix: b"), _rec("feat: c"), _rec("chore: d")]

        levels = {classify(p)[0] for p in itertools.permutations(commits)}

        assert levels == {BumpLevel.MINOR}
