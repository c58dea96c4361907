"""convrel - conventional commits to tagged releases."""

__version__ = "0.1.0"
