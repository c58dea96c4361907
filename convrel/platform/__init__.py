"""Operating-system boundary (subprocess execution)."""

from convrel.platform.process import ProcessError, run

__all__ = ["ProcessError", "run"]
