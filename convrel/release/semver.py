from __future__ import annotations

import re
from dataclasses import dataclass

from convrel.release.model import BumpLevel


_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self}"

    def bump(self, level: BumpLevel) -> SemVer:
        match level:
            case BumpLevel.MAJOR:
                return SemVer(self.major + 1, 0, 0)
            case BumpLevel.MINOR:
                return SemVer(self.major, self.minor + 1, 0)
            case BumpLevel.PATCH:
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump level: {level}")


INITIAL_VERSION = SemVer(0, 0, 0)


def parse_version(text: str) -> SemVer | None:
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def parse_tag(tag: str, prefix: str = "v") -> SemVer | None:
    """Parse ``<prefix>X.Y.Z``; pre-release or build suffixes are not release tags."""
    if not tag.startswith(prefix):
        return None
    return parse_version(tag[len(prefix) :])


def latest_version(tags: tuple[str, ...] | list[str], prefix: str = "v") -> SemVer | None:
    versions = [v for v in (parse_tag(t, prefix) for t in tags) if v is not None]
    return max(versions, default=None)
