"""Tests for release/validator.py."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from convrel.core.result import Err, Ok
from convrel.release.errors import MalformedGrammar, UnknownType
from convrel.release.model import COMMIT_TYPES, CommitRecord
from convrel.release.validator import (
    build_message,
    check_history,
    split_message,
    strip_comments,
    validate,
)


class TestValidate:
    @pytest.mark.parametrize("commit_type", COMMIT_TYPES)
    def test_every_type_is_accepted(self, commit_type: str) -> None:
        result = validate(f"{commit_type}: something")

        assert isinstance(result, Ok)
        assert result.value.type == commit_type

    def test_scope_and_description(self) -> None:
        result = validate("feat(parser): add arrays")

        assert isinstance(result, Ok)
        parsed = result.value
        assert parsed.scope == "parser"
        assert parsed.description == "add arrays"
        assert parsed.is_breaking is False

    def test_bang_marks_breaking(self) -> None:
        parsed = validate("feat!: drop python 3.11").unwrap()
        assert parsed.is_breaking is True
        assert parsed.scope is None

    def test_scoped_bang(self) -> None:
        parsed = validate("refactor(core)!: rename Result").unwrap()
        assert parsed.is_breaking is True
        assert parsed.scope == "core"

    def test_breaking_footer(self) -> None:
        parsed = validate("fix: tighten parsing\n\nBREAKING CHANGE: rejects tabs").unwrap()
        assert parsed.is_breaking is True

    def test_breaking_footer_with_hyphen(self) -> None:
        parsed = validate("fix: x\n\nBREAKING-CHANGE: y").unwrap()
        assert parsed.is_breaking is True

    def test_breaking_words_in_description_do_not_count(self) -> None:
        parsed = validate("docs: explain BREAKING CHANGE: footers").unwrap()
        assert parsed.is_breaking is False

    def test_unknown_type(self) -> None:
        result = validate("feature: add thing")
        assert result == Err(UnknownType(type="feature"))

    def test_type_is_case_sensitive(self) -> None:
        result = validate("Feat: add thing")
        assert isinstance(result, Err)
        assert isinstance(result.error, UnknownType)

    @pytest.mark.parametrize(
        ("message", "reason"),
        [
            ("", "empty message"),
            ("   \n\n", "empty message"),
            ("add a thing", "missing ':' separator"),
            ("feat:no space", "expected 'type: '"),
            ("feat(): add", "empty scope"),
            ("feat(api: add", "expected 'type: '"),
        ],
    )
    def test_malformed(self, message: str, reason: str) -> None:
        result = validate(message)

        assert isinstance(result, Err)
        assert isinstance(result.error, MalformedGrammar)
        assert result.error.reason == reason

    @pytest.mark.parametrize("prefix", ["fixup!", "squash!", "amend!"])
    def test_autosquash_commits_are_exempt(self, prefix: str) -> None:
        result = validate(f"{prefix} feat: add thing")

        assert isinstance(result, Ok)
        assert result.value.exempt is True


def test_split_message_skips_leading_blank_lines() -> None:
    assert split_message("\n\nfeat: x\n\nbody\nmore\n") == ("feat: x", "body\nmore")


def test_build_message() -> None:
    assert build_message("feat", "add arrays", "parser") == "feat(parser): add arrays"
    assert build_message("fix", " trim ", None) == "fix: trim"
    assert build_message("fix", "trim", "  ") == "fix: trim"


def test_strip_comments() -> None:
    text = (
        "feat: add thing\n"
        "\n"
        "# Please enter the commit message for your changes.\n"
        "body line\n"
        "# ------------------------ >8 ------------------------\n"
        "diff --git a/x b/x\n"
    )

    assert strip_comments(text) == "feat: add thing\n\nbody line"


def _record(message: str, *, is_merge: bool = False) -> CommitRecord:
    return CommitRecord(
        id="0" * 40,
        raw_message=message,
        type="chore",
        scope=None,
        description=message,
        is_breaking=False,
        timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        is_merge=is_merge,
    )


class TestCheckHistory:
    def test_reports_every_violation_in_order(self) -> None:
        commits = [
            _record("feat: good"),
            _record("bad one"),
            _record("feature: also bad"),
        ]

        violations = check_history(commits)

        assert [v.commit.raw_message for v in violations] == ["bad one", "feature: also bad"]
        assert isinstance(violations[0].error, MalformedGrammar)
        assert isinstance(violations[1].error, UnknownType)

    def test_merge_commits_skipped_by_default(self) -> None:
        commits = [_record("Merge branch 'topic'", is_merge=True)]

        assert check_history(commits) == ()

    def test_merge_commits_checked_when_asked(self) -> None:
        commits = [_record("Merge branch 'topic'", is_merge=True)]

        assert len(check_history(commits, ignore_merges=False)) == 1
