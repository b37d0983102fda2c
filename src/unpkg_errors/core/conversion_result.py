"""
Data structures representing the output of processing one Go file.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the rewritten code, the run diagnostics and the execution trace.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from unpkg_errors.core.diagnostics import RunDiagnostics


class ConversionResult(BaseModel):
  """
  Container for the result of a single file run.
  """

  filename: str = Field(default="<unit>", description="Name of the processed file.")
  code: str = Field(default="", description="The re-serialized source code.")
  diagnostics: RunDiagnostics = Field(default_factory=RunDiagnostics, description="Fix count and failure reasons.")
  changed: bool = Field(default=False, description="True if the code differs from the input.")
  imports_reconciled: bool = Field(default=False, description="True if the import set was updated.")
  import_actions: List[str] = Field(default_factory=list, description="Imports removed (-path) and added (+path).")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_failures(self) -> bool:
    """
    Check if any call site could not be fixed.

    Returns:
        True if one or more failure reasons are present.
    """
    return len(self.diagnostics.failures) > 0
