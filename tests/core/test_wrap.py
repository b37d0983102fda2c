"""
Tests for the Wrap/Wrapf transformer.
"""

import pytest

from unpkg_errors.core.nodes import CallExpr
from unpkg_errors.core.wrap import (
  REASON_NOT_IDENTIFIER,
  REASON_NOT_LITERAL,
  REASON_TOO_FEW_ARGS,
  REASON_VARIADIC,
  WrapTransformer,
)


def _outer_call(tree, nodes_of) -> CallExpr:
  return nodes_of(tree, CallExpr)[0]


def _transform(parse, nodes_of, expr: str, fmt_name: str = "fmt"):
  code = f"package demo\n\nvar e = {expr}\n"
  tree = parse(code)
  outcome = WrapTransformer(fmt_name).transform(_outer_call(tree, nodes_of))
  body = tree.render()[len("package demo\n\nvar e = ") : -1]
  return outcome, body


@pytest.mark.parametrize(
  "before, after",
  [
    ('errors.Wrap(err, "doing X")', 'fmt.Errorf("doing X: %w", err)'),
    ('errors.Wrapf(err, "doing %s", name)', 'fmt.Errorf("doing %s: %w", name, err)'),
    ('errors.Wrapf(err, "%s/%d", a, b)', 'fmt.Errorf("%s/%d: %w", a, b, err)'),
    ('errors.Wrapf(err, fmt.Sprintf("count=%d", n))', 'fmt.Errorf("count=%d: %w", n, err)'),
    ('errors.Wrap(err, fmt.Sprintf("plain"))', 'fmt.Errorf("plain: %w", err)'),
    ('errors.Wrap(err, "")', 'fmt.Errorf(": %w", err)'),
  ],
)
def test_rewrites(parse, nodes_of, before, after):
  outcome, body = _transform(parse, nodes_of, before)
  assert outcome.is_fixed
  assert body == after


def test_uses_fmt_alias(parse, nodes_of):
  outcome, body = _transform(parse, nodes_of, 'errors.Wrapf(err, f.Sprintf("n=%d", n))', fmt_name="f")
  assert outcome.is_fixed
  assert body == 'f.Errorf("n=%d: %w", n, err)'


@pytest.mark.parametrize(
  "expr, reason",
  [
    ("errors.Wrap(err)", REASON_TOO_FEW_ARGS),
    ("errors.Wrap()", REASON_TOO_FEW_ARGS),
    ('errors.Wrap(computeErr(), "msg")', REASON_NOT_IDENTIFIER),
    ('errors.Wrap(s.err, "msg")', REASON_NOT_IDENTIFIER),
    ('errors.Wrap(nil, "msg")', REASON_NOT_IDENTIFIER),
    ("errors.Wrap(err, msg)", REASON_NOT_LITERAL),
    ("errors.Wrap(err, `raw`)", REASON_NOT_LITERAL),
    ('errors.Wrapf(err, fmt.Sprintf("%d", n), extra)', REASON_NOT_LITERAL),
    ("errors.Wrapf(err, fmt.Sprintf(format, n))", REASON_NOT_LITERAL),
    ('errors.Wrapf(err, other.Sprintf("%d", n))', REASON_NOT_LITERAL),
    ('errors.Wrapf(err, "%v %v", args...)', REASON_VARIADIC),
    ('errors.Wrapf(err, fmt.Sprintf("%v", args...))', REASON_VARIADIC),
  ],
)
def test_rejections_leave_call_untouched(parse, nodes_of, expr, reason):
  outcome, body = _transform(parse, nodes_of, expr)
  assert outcome.is_failed
  assert outcome.reason == reason
  assert body == expr
