"""Tests for release/semver.py."""

from __future__ import annotations

import pytest

from convrel.release.model import BumpLevel
from convrel.release.semver import (
    INITIAL_VERSION,
    SemVer,
    latest_version,
    parse_tag,
    parse_version,
)


class TestBump:
    def test_patch(self) -> None:
        assert SemVer(1, 2, 3).bump(BumpLevel.PATCH) == SemVer(1, 2, 4)

    def test_minor_resets_patch(self) -> None:
        assert SemVer(1, 2, 3).bump(BumpLevel.MINOR) == SemVer(1, 3, 0)

    def test_major_resets_minor_and_patch(self) -> None:
        assert SemVer(1, 2, 3).bump(BumpLevel.MAJOR) == SemVer(2, 0, 0)

    def test_from_initial(self) -> None:
        assert INITIAL_VERSION.bump(BumpLevel.MINOR) == SemVer(0, 1, 0)
        assert INITIAL_VERSION.bump(BumpLevel.MAJOR) == SemVer(1, 0, 0)

    def test_none_is_rejected(self) -> None:
        with pytest.raises(AssertionError):
            SemVer(1, 0, 0).bump(BumpLevel.NONE)


def test_str_and_tag() -> None:
    version = SemVer(1, 10, 0)
    assert str(version) == "1.10.0"
    assert version.to_tag() == "v1.10.0"
    assert version.to_tag("") == "1.10.0"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1.2.3", SemVer(1, 2, 3)),
        (" 0.0.1 ", SemVer(0, 0, 1)),
        ("1.2", None),
        ("01.2.3", None),
        ("1.2.3-rc.1", None),
        ("v1.2.3", None),
    ],
)
def test_parse_version(text: str, expected: SemVer | None) -> None:
    assert parse_version(text) == expected


def test_parse_tag_prefix() -> None:
    assert parse_tag("v1.0.0") == SemVer(1, 0, 0)
    assert parse_tag("1.0.0") is None
    assert parse_tag("release-2.0.0", "release-") == SemVer(2, 0, 0)


def test_latest_version_is_numeric_max() -> None:
    tags = ["v1.9.0", "v1.10.0", "v1.2.0", "vnext", "v2.0.0-beta.1"]

    assert latest_version(tags) == SemVer(1, 10, 0)


def test_latest_version_none() -> None:
    assert latest_version([]) is None
    assert latest_version(["nightly"]) is None
