"""
Enumerations for unpkg-errors.

This module defines the closed sets of values the rewrite engine dispatches on:
the kind of a legacy call site, the outcome of a fix attempt, and the output
policy for files that could only be partially fixed.
"""

from enum import Enum
from typing import Dict


class CallKind(str, Enum):
  """
  Classification of a call into the legacy error package, resolved once per call site.
  """

  EQUIVALENT = "equivalent"  # Same behaviour in the standard errors package
  FORMATTED_CONSTRUCTOR = "formatted_constructor"  # errors.Errorf -> fmt.Errorf
  WRAP = "wrap"
  WRAPF = "wrapf"
  UNRECOGNIZED = "unrecognized"

  @classmethod
  def for_member(cls, member: str) -> "CallKind":
    """
    Resolves the member name of a legacy call (e.g. ``Wrapf``) to its kind.

    Args:
        member (str): The selector name after the package qualifier.

    Returns:
        CallKind: The matching kind, ``UNRECOGNIZED`` for anything unknown.
    """
    return _MEMBER_KINDS.get(member, cls.UNRECOGNIZED)

  @property
  def is_wrap(self) -> bool:
    return self in (CallKind.WRAP, CallKind.WRAPF)


_MEMBER_KINDS: Dict[str, CallKind] = {
  "As": CallKind.EQUIVALENT,
  "Is": CallKind.EQUIVALENT,
  "New": CallKind.EQUIVALENT,
  "Unwrap": CallKind.EQUIVALENT,
  "Errorf": CallKind.FORMATTED_CONSTRUCTOR,
  "Wrap": CallKind.WRAP,
  "Wrapf": CallKind.WRAPF,
}


class OutcomeStatus(str, Enum):
  """Verdict for a single call site."""

  FIXED = "fixed"
  SKIPPED = "skipped"
  FAILED = "failed"


class FailurePolicy(str, Enum):
  """
  Output policy for a file in which at least one call site could not be fixed.

  Imports are never touched for such a file. The policy only decides whether
  the call sites that *were* fixed appear in the emitted text.
  """

  PARTIAL = "partial"  # Emit the fixed call sites, keep the import set as is
  UNCHANGED = "unchanged"  # Emit the original text byte for byte
