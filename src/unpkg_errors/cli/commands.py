"""
CLI Command Handlers Facade.

This module re-exports handlers from `unpkg_errors.cli.handlers` so the
dispatcher (and tests patching it) has a single import point.
"""

from unpkg_errors.cli.handlers.audit import handle_audit
from unpkg_errors.cli.handlers.convert import handle_convert

__all__ = [
  "handle_audit",
  "handle_convert",
]
