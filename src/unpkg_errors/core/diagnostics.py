"""
Fix Outcomes and Run Diagnostics.

Every legacy call site visited during the walk yields exactly one
:class:`FixOutcome`. The :class:`DiagnosticsAggregator` consumes them in
discovery order, remembers which standard library imports the fixes rely on
and finally decides whether the file's imports may be reconciled.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field

from unpkg_errors.enums import OutcomeStatus


@dataclass(frozen=True)
class FixOutcome:
  """
  Verdict for one call site: fixed, skipped (not applicable) or failed with a reason.
  """

  status: OutcomeStatus
  reason: Optional[str] = None

  @classmethod
  def fixed(cls) -> "FixOutcome":
    return cls(OutcomeStatus.FIXED)

  @classmethod
  def skipped(cls) -> "FixOutcome":
    return cls(OutcomeStatus.SKIPPED)

  @classmethod
  def failed(cls, reason: str) -> "FixOutcome":
    return cls(OutcomeStatus.FAILED, reason)

  @property
  def is_fixed(self) -> bool:
    return self.status is OutcomeStatus.FIXED

  @property
  def is_failed(self) -> bool:
    return self.status is OutcomeStatus.FAILED


class RunDiagnostics(BaseModel):
  """
  Aggregate result of the walk over one file.
  """

  fixed: int = Field(default=0, description="Number of call sites rewritten (or already equivalent).")
  failures: List[str] = Field(default_factory=list, description="Failure reasons in discovery order.")

  @property
  def failed(self) -> int:
    return len(self.failures)

  @property
  def all_fixed(self) -> bool:
    """True if no call site failed."""
    return not self.failures


class DiagnosticsAggregator:
  """
  Collects outcomes during the walk.

  Attributes:
      required_imports (List[str]): Standard library import paths the fixed
          call sites rely on, in the order they were first needed.
  """

  def __init__(self) -> None:
    self._fixed = 0
    self._failures: List[str] = []
    self.required_imports: List[str] = []

  def record(self, outcome: FixOutcome) -> None:
    if outcome.is_fixed:
      self._fixed += 1
    elif outcome.is_failed:
      self._failures.append(outcome.reason or "unknown failure")

  def require(self, import_path: str) -> None:
    if import_path not in self.required_imports:
      self.required_imports.append(import_path)

  @property
  def should_reconcile_imports(self) -> bool:
    """Imports are only touched when every legacy call site was fixed."""
    return not self._failures

  def diagnostics(self) -> RunDiagnostics:
    return RunDiagnostics(fixed=self._fixed, failures=list(self._failures))
