"""
Rewrite Trace Logger.

Records the step-by-step decisions of one processing run:

1. Lifecycle phases (parse, walk, reconcile, render).
2. Classification of every legacy call site.
3. Mutations of call sites (before and after text).
4. Failures and import actions.

A ``TraceLogger`` is passed explicitly into
:meth:`unpkg_errors.core.processor.UnitProcessor.process`; there is no
process-wide instance, so concurrent runs and tests never share trace state.
The output is a list of plain dictionaries suitable for JSON serialization.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  CLASSIFICATION = "classification"
  AST_MUTATION = "ast_mutation"
  FIX_FAILED = "fix_failed"
  IMPORT_ACTION = "import_action"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Collects trace events for a single file.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []  # Stack of phase IDs

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g. 'Walk'). Returns the phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None

    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    """Ends the current active phase."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_classification(self, call: str, kind: str) -> None:
    """Logs how a legacy call site was classified."""
    self._log_simple(TraceEventType.CLASSIFICATION, f"Classified {call}", {"call": call, "kind": kind})

  def log_mutation(self, node_type: str, before: str, after: str) -> None:
    """Logs a rewrite of a node."""
    self._log_simple(TraceEventType.AST_MUTATION, f"Transformed {node_type}", {"before": before, "after": after})

  def log_failure(self, call: str, reason: str) -> None:
    self._log_simple(TraceEventType.FIX_FAILED, reason, {"call": call})

  def log_import(self, action: str, path: str) -> None:
    """Logs an import added or removed by the reconciler."""
    self._log_simple(TraceEventType.IMPORT_ACTION, f"{action} import {path}", {"action": action, "path": path})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
