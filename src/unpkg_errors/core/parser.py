"""
Go Source Parser.

Parses Go source text with the tree-sitter Go grammar (shipped by
``tree-sitter-language-pack``) and copies the result into the mutable node
model of :mod:`unpkg_errors.core.nodes`.

Only the node types the rewrite engine inspects get a dedicated class; every
other grammar rule becomes a generic :class:`GoNode` that simply re-emits its
original text.
"""

import logging
from typing import Any, List, Optional

from tree_sitter_language_pack import get_parser

from unpkg_errors.core.nodes import (
  CallExpr,
  GoNode,
  Identifier,
  ImportDecl,
  ImportSpec,
  SelectorExpr,
  SourceFile,
  StringLiteral,
  SyntaxTree,
)
from unpkg_errors.exceptions import GoSyntaxError

logger = logging.getLogger(__name__)

IDENTIFIER_KINDS = {"identifier", "package_identifier", "field_identifier"}
STRING_KINDS = {"interpreted_string_literal", "raw_string_literal"}


class GoParser:
  """
  Builds :class:`SyntaxTree` objects from Go source.

  A parser instance holds one tree-sitter parser and is not meant to be
  shared between threads; create one per worker.
  """

  def __init__(self) -> None:
    self._parser = get_parser("go")

  def parse(self, code: str, filename: str = "<unit>") -> SyntaxTree:
    """
    Parses one Go file.

    Args:
        code (str): The source text.
        filename (str): Name used in error messages.

    Returns:
        SyntaxTree: The mutable tree.

    Raises:
        GoSyntaxError: If the source contains syntax errors.
    """
    source = code.encode("utf-8")
    ts_tree = self._parser.parse(source)
    ts_root = ts_tree.root_node

    if ts_root.has_error:
      bad = _first_error(ts_root)
      line, column = bad.start_point[0] + 1, bad.start_point[1] + 1
      if bad.is_missing:
        reason = f"failed to parse file: missing {bad.type!r} at line {line}, column {column}"
      else:
        reason = f"failed to parse file: syntax error at line {line}, column {column}"
      raise GoSyntaxError(filename, reason, line=line, column=column)

    root = _convert(ts_root, source)
    if not isinstance(root, SourceFile):
      raise GoSyntaxError(filename, f"failed to parse file: unexpected root node {ts_root.type!r}")
    logger.debug("%s: parsed %d top-level nodes", filename, len(root.children))
    return SyntaxTree(source, root, filename)


def _text(ts_node: Any, source: bytes) -> str:
  return source[ts_node.start_byte : ts_node.end_byte].decode("utf-8")


def _first_error(ts_node: Any) -> Any:
  """Depth-first search for the first ERROR or MISSING node."""
  if ts_node.is_error or ts_node.is_missing:
    return ts_node
  for child in ts_node.children:
    if child.has_error or child.is_missing:
      return _first_error(child)
  return ts_node


def _field_index(ts_node: Any, field: str) -> int:
  """Position of the child bound to a grammar field (e.g. ``arguments``)."""
  target = ts_node.child_by_field_name(field)
  if target is None:
    raise ValueError(f"{ts_node.type} has no {field!r} child")
  for i, child in enumerate(ts_node.children):
    if child.type == target.type and child.start_byte == target.start_byte and child.end_byte == target.end_byte:
      return i
  raise ValueError(f"{ts_node.type} lost track of its {field!r} child")


def _convert(ts_node: Any, source: bytes) -> GoNode:
  kind = ts_node.type
  start, end = ts_node.start_byte, ts_node.end_byte
  row, end_row = ts_node.start_point[0], ts_node.end_point[0]

  if kind in IDENTIFIER_KINDS:
    return Identifier(_text(ts_node, source), kind, start, end, row)
  if kind in STRING_KINDS:
    return StringLiteral(_text(ts_node, source), kind, start, end, row, end_row)

  children: List[GoNode] = [_convert(c, source) for c in ts_node.children]
  meta = {"row": row, "end_row": end_row, "is_named": ts_node.is_named}

  if kind == "selector_expression":
    return SelectorExpr(
      kind, start, end, children, _field_index(ts_node, "operand"), _field_index(ts_node, "field"), **meta
    )
  if kind == "call_expression":
    return CallExpr(
      kind, start, end, children, _field_index(ts_node, "function"), _field_index(ts_node, "arguments"), **meta
    )
  if kind == "import_spec":
    name_node = ts_node.child_by_field_name("name")
    path_node = ts_node.child_by_field_name("path")
    alias: Optional[str] = _text(name_node, source) if name_node is not None else None
    path = _text(path_node, source)[1:-1] if path_node is not None else ""
    return ImportSpec(kind, start, end, children, alias, path, **meta)
  if kind == "import_declaration":
    return ImportDecl(kind, start, end, children, **meta)
  if kind == "source_file":
    return SourceFile(kind, start, end, children, **meta)
  return GoNode(kind, start, end, children, **meta)
