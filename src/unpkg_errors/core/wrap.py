"""
Wrap Call Transformer.

Rewrites ``errors.Wrap``/``errors.Wrapf`` calls into the ``fmt.Errorf`` shape::

    errors.Wrap(err, "doing X")                    -> fmt.Errorf("doing X: %w", err)
    errors.Wrapf(err, "doing %s", name)            -> fmt.Errorf("doing %s: %w", name, err)
    errors.Wrapf(err, fmt.Sprintf("count=%d", n))  -> fmt.Errorf("count=%d: %w", n, err)

The wrapped error moves to the end of the argument list. That is only safe
for a plain identifier, so any other first argument is rejected rather than
risking a change in evaluation order. All checks run before the first
mutation: a rejected call is left exactly as it was.
"""

import logging
from typing import List, Optional, Tuple

from unpkg_errors.core.diagnostics import FixOutcome
from unpkg_errors.core.nodes import CallExpr, GoNode, Identifier, StringLiteral

logger = logging.getLogger(__name__)

ERRORF = "Errorf"
SPRINTF = "Sprintf"
WRAP_VERB = ": %w"

REASON_TOO_FEW_ARGS = "wrap call must have at least two args"
REASON_NOT_IDENTIFIER = "first argument to wrap is not a simple identifier"
REASON_NOT_LITERAL = "second argument to wrap is not a string literal or a foldable formatted-string call"
REASON_VARIADIC = "cannot append the wrapped error after a variadic argument"


class WrapTransformer:
  """
  Restructures the arguments of a single wrap call.

  Attributes:
      fmt_name (str): Qualifier under which the file refers to ``fmt``.
  """

  def __init__(self, fmt_name: str = "fmt"):
    self.fmt_name = fmt_name

  def transform(self, call: CallExpr) -> FixOutcome:
    """
    Rewrites ``call`` in place.

    Args:
        call (CallExpr): A call whose callee is ``<legacy>.Wrap`` or ``<legacy>.Wrapf``.

    Returns:
        FixOutcome: ``fixed`` on success, ``failed(reason)`` otherwise.
    """
    selector = call.selector
    args = call.arguments
    if selector is None or len(args) < 2:
      return FixOutcome.failed(REASON_TOO_FEW_ARGS)

    err_value = args[0]
    if not isinstance(err_value, Identifier):
      return FixOutcome.failed(REASON_NOT_IDENTIFIER)

    shape = self.split_format_args(args[1:])
    if shape is None:
      return FixOutcome.failed(REASON_NOT_LITERAL)
    fmt_literal, extra_args = shape

    if any(arg.kind == "variadic_argument" for arg in extra_args):
      return FixOutcome.failed(REASON_VARIADIC)

    # fmt.Errorf(format, extra..., err)
    fmt_literal.insert_before_closing_quote(WRAP_VERB)
    call.arguments = [fmt_literal, *extra_args, err_value]
    selector.operand = Identifier(self.fmt_name)
    selector.field = Identifier(ERRORF, kind="field_identifier")
    return FixOutcome.fixed()

  def split_format_args(self, rest: List[GoNode]) -> Optional[Tuple[StringLiteral, List[GoNode]]]:
    """
    Finds the format literal among the arguments that follow the wrapped error.

    Either the first of them is a double-quoted literal (everything after it
    is carried through), or the only one is a ``fmt.Sprintf`` call with a
    double-quoted literal as its format, which gets folded in.

    Returns:
        The literal and the extra arguments, or None if the shape is unsupported.
    """
    first = rest[0]
    if isinstance(first, StringLiteral):
      if first.is_interpreted:
        return first, list(rest[1:])
      logger.debug("Raw string literal %s is not rewritten", first.value)
      return None
    return self._fold_sprintf(rest)

  def _fold_sprintf(self, rest: List[GoNode]) -> Optional[Tuple[StringLiteral, List[GoNode]]]:
    if len(rest) != 1 or not isinstance(rest[0], CallExpr):
      return None
    inner = rest[0]
    selector = inner.selector
    if selector is None or selector.qualifier != self.fmt_name or selector.member != SPRINTF:
      return None

    inner_args = inner.arguments
    if not inner_args:
      return None
    fmt_literal = inner_args[0]
    if not isinstance(fmt_literal, StringLiteral) or not fmt_literal.is_interpreted:
      return None

    # rest is exactly [fmt.Sprintf("...", args...)]: fold its arguments into the outer call
    return fmt_literal, list(inner_args[1:])
