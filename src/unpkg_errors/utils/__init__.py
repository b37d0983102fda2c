"""Shared utilities (console and logging setup)."""
