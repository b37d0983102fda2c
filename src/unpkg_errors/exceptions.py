"""
Exception hierarchy for unpkg-errors.

Only structural problems are raised as exceptions. Call sites that cannot be
translated are reported as plain strings in
:class:`unpkg_errors.core.diagnostics.RunDiagnostics` instead.
"""


class UnpkgErrorsError(Exception):
  """Base class for all errors raised by this package."""


class ConfigError(UnpkgErrorsError):
  """Raised when the runtime configuration is invalid."""


class UnitError(UnpkgErrorsError):
  """
  A structural failure affecting a single source file.

  Attributes:
      filename (str): The file (or pseudo file name) being processed.
      reason (str): Human readable cause.
  """

  def __init__(self, filename: str, reason: str):
    super().__init__(f"{filename}: {reason}")
    self.filename = filename
    self.reason = reason


class GoSyntaxError(UnitError):
  """Raised when the input is not syntactically valid Go."""

  def __init__(self, filename: str, reason: str, line: int = 0, column: int = 0):
    super().__init__(filename, reason)
    self.line = line
    self.column = column


class UnreadableFileError(UnitError):
  """Raised when a file cannot be read or is not valid UTF-8."""
