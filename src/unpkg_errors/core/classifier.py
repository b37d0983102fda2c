"""
Legacy Call Classifier.

A :class:`GoVisitor` that finds every call of the form ``<legacy>.Member(...)``
where ``<legacy>`` is the local name of the ``github.com/pkg/errors`` import,
resolves the member to a :class:`CallKind` and applies the matching rewrite:

- ``EQUIVALENT`` (``As``, ``Is``, ``New``, ``Unwrap``): identical in the standard
  ``errors`` package; only the qualifier changes when the names differ.
- ``FORMATTED_CONSTRUCTOR`` (``Errorf``): the qualifier becomes ``fmt``.
- ``WRAP`` / ``WRAPF``: delegated to :class:`WrapTransformer`.
- ``UNRECOGNIZED``: reported as a failure, the call is left alone.

The walk always continues into the children of a call, so legacy calls nested
inside arguments (even inside rewritten ones) are found too.
"""

import logging
from typing import Optional

from unpkg_errors.core.diagnostics import DiagnosticsAggregator, FixOutcome
from unpkg_errors.core.import_set import ERRORS_PATH, FMT_PATH, PackageNames
from unpkg_errors.core.nodes import CallExpr, GoVisitor, Identifier, SelectorExpr, SyntaxTree
from unpkg_errors.core.tracer import TraceLogger
from unpkg_errors.core.wrap import WrapTransformer
from unpkg_errors.enums import CallKind

logger = logging.getLogger(__name__)


class LegacyCallClassifier(GoVisitor):
  """
  Classifies and rewrites legacy call sites during a tree walk.
  """

  def __init__(
    self,
    tree: SyntaxTree,
    names: PackageNames,
    aggregator: DiagnosticsAggregator,
    tracer: Optional[TraceLogger] = None,
  ):
    """
    Args:
        tree (SyntaxTree): The tree being walked (used for text snapshots).
        names (PackageNames): Qualifiers of the legacy and standard packages.
        aggregator (DiagnosticsAggregator): Receives one outcome per legacy call.
        tracer (TraceLogger, optional): Receives structured trace events.
    """
    self.tree = tree
    self.names = names
    self.aggregator = aggregator
    self.tracer = tracer or TraceLogger()
    self.wrapper = WrapTransformer(names.fmt)

  def classify(self, call: CallExpr) -> Optional[CallKind]:
    """
    Returns the kind of a legacy call, or None if ``call`` does not target the legacy package.
    """
    selector = call.selector
    if selector is None or selector.qualifier != self.names.legacy or selector.member is None:
      return None
    return CallKind.for_member(selector.member)

  def visit_CallExpr(self, call: CallExpr) -> bool:
    kind = self.classify(call)
    if kind is None:
      return True

    selector = call.selector
    member = selector.member
    label = f"{self.names.legacy}.{member}"
    before = self.tree.text(call)
    self.tracer.log_classification(label, kind.value)

    outcome = self._apply(kind, call, selector, member)
    self.aggregator.record(outcome)

    if outcome.is_failed:
      logger.debug("%s: cannot fix %s: %s", self.tree.filename, label, outcome.reason)
      self.tracer.log_failure(label, outcome.reason)
    else:
      after = self.tree.text(call)
      if after != before:
        logger.debug("%s: %s -> %s", self.tree.filename, before, after)
        self.tracer.log_mutation("CallExpr", before, after)
    return True

  def _apply(self, kind: CallKind, call: CallExpr, selector: SelectorExpr, member: str) -> FixOutcome:
    if kind is CallKind.EQUIVALENT:
      logger.debug("%s.%s is the same in %s and the standard library", self.names.legacy, member, ERRORS_PATH)
      if self.names.errors != self.names.legacy:
        selector.operand = Identifier(self.names.errors)
      self.aggregator.require(ERRORS_PATH)
      return FixOutcome.fixed()

    if kind is CallKind.FORMATTED_CONSTRUCTOR:
      logger.debug("%s.Errorf can be replaced with %s.Errorf", self.names.legacy, self.names.fmt)
      selector.operand = Identifier(self.names.fmt)
      self.aggregator.require(FMT_PATH)
      return FixOutcome.fixed()

    if kind.is_wrap:
      outcome = self.wrapper.transform(call)
      if outcome.is_fixed:
        self.aggregator.require(FMT_PATH)
      return outcome

    return FixOutcome.failed(f"no translation available for `{member}`")
