"""Commit validation, version bumping, changelog rendering and the release workflow."""
