"""
Unit Processor.

This module provides the :class:`UnitProcessor`, the driver that migrates one
Go file away from ``github.com/pkg/errors``. It is the only component that
touches raw text.

The pipeline consists of:

1.  **Parsing**: UTF-8 text -> :class:`SyntaxTree` (tree-sitter Go grammar).
    Invalid syntax raises :class:`GoSyntaxError`.
2.  **Short circuit**: a file that does not import the legacy package is
    returned unchanged without walking it.
3.  **Walk**: :class:`LegacyCallClassifier` visits every call expression,
    rewrites what it can and records one outcome per legacy call site.
4.  **Reconciliation**: only if no call site failed, the legacy import is
    removed and the needed standard imports are added.
5.  **Rendering**: the tree is serialized. Text outside rewritten spans is
    reproduced byte for byte. For files with failures the configured
    :class:`FailurePolicy` decides between emitting the partially rewritten
    tree and the original text.

Verbosity is not global state: callers pass a :class:`TraceLogger` to collect
structured events and configure logging handlers themselves.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from unpkg_errors.config import RuntimeConfig
from unpkg_errors.core.classifier import LegacyCallClassifier
from unpkg_errors.core.conversion_result import ConversionResult
from unpkg_errors.core.diagnostics import DiagnosticsAggregator, FixOutcome, RunDiagnostics
from unpkg_errors.core.import_set import ImportSet, PackageNames
from unpkg_errors.core.imports import ImportReconciler
from unpkg_errors.core.parser import GoParser
from unpkg_errors.core.tracer import TraceLogger
from unpkg_errors.enums import FailurePolicy
from unpkg_errors.exceptions import UnreadableFileError

logger = logging.getLogger(__name__)


class UnitProcessor:
  """
  Migrates single Go files.

  Each call to :meth:`process` creates, mutates and discards its own syntax
  tree; a processor holds no per-file state between calls. It does hold a
  tree-sitter parser, so use one processor per thread.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    """
    Args:
        config (RuntimeConfig, optional): Runtime settings. Defaults are used if None.
    """
    self.config = config or RuntimeConfig()
    self.parser = GoParser()

  def process(self, code: str, filename: str = "<unit>", tracer: Optional[TraceLogger] = None) -> ConversionResult:
    """
    Runs the full pipeline on one file.

    Args:
        code (str): Go source text.
        filename (str): Name used in logs and errors.
        tracer (TraceLogger, optional): Sink for structured trace events.

    Returns:
        ConversionResult: The rewritten code and its diagnostics.

    Raises:
        GoSyntaxError: If ``code`` is not valid Go.
    """
    tracer = tracer or TraceLogger()
    legacy_path = self.config.legacy_package
    tracer.start_phase("Unit", filename)

    tracer.start_phase("Parse", "Go source -> syntax tree")
    try:
      tree = self.parser.parse(code, filename)
    finally:
      tracer.end_phase()

    imports = ImportSet(tree)
    legacy = imports.find(legacy_path)
    if legacy is None:
      logger.debug("%s: Does not contain %s", filename, legacy_path)
      tracer.end_phase()
      return ConversionResult(filename=filename, code=code, trace_events=tracer.export())

    aggregator = DiagnosticsAggregator()
    names: Optional[PackageNames] = None
    if legacy.alias == ".":
      aggregator.record(FixOutcome.failed(f"dot import of {legacy_path} is not supported"))
    else:
      names = PackageNames.resolve(imports, legacy)
      tracer.start_phase("Walk", f"Rewriting calls qualified by '{names.legacy}'")
      tree.walk(LegacyCallClassifier(tree, names, aggregator, tracer))
      tracer.end_phase()

    diagnostics = aggregator.diagnostics()
    if not aggregator.should_reconcile_imports:
      return self._report_failures(code, tree.render(), filename, diagnostics, tracer)

    tracer.start_phase("Reconcile", "Updating imports")
    actions = ImportReconciler(imports, tracer).reconcile(legacy_path, aggregator.required_imports, names)
    tracer.end_phase()

    new_code = tree.render()
    logger.info("%s: Fixed %d references to %s", filename, diagnostics.fixed, legacy_path)
    tracer.end_phase()
    return ConversionResult(
      filename=filename,
      code=new_code,
      diagnostics=diagnostics,
      changed=new_code != code,
      imports_reconciled=True,
      import_actions=actions,
      trace_events=tracer.export(),
    )

  def _report_failures(
    self,
    code: str,
    rendered: str,
    filename: str,
    diagnostics: RunDiagnostics,
    tracer: TraceLogger,
  ) -> ConversionResult:
    logger.info("%s: Fixed %d, failed to fix %d", filename, diagnostics.fixed, diagnostics.failed)
    for reason in diagnostics.failures:
      logger.info("%s: %s", filename, reason)

    new_code = rendered if self.config.failure_policy is FailurePolicy.PARTIAL else code
    tracer.end_phase()
    return ConversionResult(
      filename=filename,
      code=new_code,
      diagnostics=diagnostics,
      changed=new_code != code,
      trace_events=tracer.export(),
    )

  def process_file(self, path: Union[str, Path], tracer: Optional[TraceLogger] = None) -> ConversionResult:
    """
    Reads ``path`` as UTF-8 and processes it.

    Raises:
        UnreadableFileError: If the file cannot be read or decoded.
        GoSyntaxError: If the file is not valid Go.
    """
    path = Path(path)
    try:
      # Bytes, not read_text(): newline translation would alter CRLF files.
      code = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
      raise UnreadableFileError(str(path), f"failed to read file: {e}") from e
    return self.process(code, str(path), tracer)


def process_source(code: str, filename: str = "<unit>", config: Optional[RuntimeConfig] = None) -> ConversionResult:
  """
  Convenience wrapper processing one source string with a fresh processor.
  """
  return UnitProcessor(config).process(code, filename)
