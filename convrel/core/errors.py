"""Process exit codes.

The release tooling keeps the contract of the shell scripts it replaces:
0 when the command did what was asked, 1 for every failure or abort
(invalid message, unsafe repository, nothing to release, cancelled,
git failure, partial release).
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are stable."""

    OK = 0
    FAILURE = 1
