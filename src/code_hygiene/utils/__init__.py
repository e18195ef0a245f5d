"""Shared helpers: canonical JSON output and the exit-code contract."""
