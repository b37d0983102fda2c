"""
Concrete Syntax Tree for Go Source Files.

The tree produced by tree-sitter is read-only, so the parser copies it into the
small mutable node model defined here. Every node keeps the byte span it was
parsed from. Rendering a node reproduces the original bytes between and around
its children, so only the nodes that were actually mutated change in the
output; comments, spacing and alignment everywhere else survive untouched.

Node classes:

- :class:`GoNode`: generic node for every grammar rule without a dedicated class.
- :class:`Identifier`: identifiers (``identifier``, ``package_identifier``, ...).
- :class:`StringLiteral`: interpreted (``"..."``) and raw (`````...`````) literals.
- :class:`SelectorExpr`: ``operand.field``.
- :class:`CallExpr`: ``function(arguments...)``.
- :class:`ImportSpec` / :class:`ImportDecl`: import declarations.
- :class:`SourceFile`: the root node, supports removing and inserting declarations.
- :class:`SyntaxTree`: owner of the source bytes and the root of one file.

Usage:
    tree = GoParser().parse(code)
    tree.walk(visitor)
    new_code = tree.render()
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

# Node kinds the grammar uses for statement terminators at file level.
TERMINATOR_KINDS = {"\n", ";"}


def _decode(chunk: bytes) -> str:
  return chunk.decode("utf-8")


class GoNode:
  """
  A node of the concrete syntax tree.

  Attributes:
      kind (str): The tree-sitter node type (e.g. ``binary_expression`` or ``(``).
      start (int): Start byte offset in the source, ``-1`` for synthesized nodes.
      end (int): End byte offset in the source, ``-1`` for synthesized nodes.
      row (int): Zero-based line of the first byte.
      end_row (int): Zero-based line of the last byte.
      is_named (bool): False for punctuation and keywords.
      children (List[GoNode]): Current children. Replacing an entry keeps the
          original span of the slot so the surrounding text is still emitted.
  """

  def __init__(
    self,
    kind: str,
    start: int = -1,
    end: int = -1,
    children: Optional[List["GoNode"]] = None,
    row: int = 0,
    end_row: int = 0,
    is_named: bool = True,
  ):
    self.kind = kind
    self.start = start
    self.end = end
    self.row = row
    self.end_row = end_row
    self.is_named = is_named
    self.children: List[GoNode] = list(children or [])
    self._slots: List[Tuple[int, int]] = [(c.start, c.end) for c in self.children]

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.kind!r}, {self.start}:{self.end})"

  @property
  def is_synthetic(self) -> bool:
    """True if the node was created by a rewrite rather than parsed."""
    return self.start < 0

  def original_text(self, source: bytes) -> str:
    """
    Returns the text this node was parsed from, ignoring any mutation.

    Args:
        source (bytes): The source buffer of the owning tree.
    """
    if self.is_synthetic:
      return self.render(source)
    return _decode(source[self.start : self.end])

  def iter_children(self) -> Iterator["GoNode"]:
    """Yields the current children in source order."""
    return iter(self.children)

  def named_children(self) -> List["GoNode"]:
    """Returns the named children, excluding comments."""
    return [c for c in self.children if c.is_named and c.kind != "comment"]

  def render(self, source: bytes) -> str:
    """
    Serializes the node, including mutations applied to its descendants.

    Args:
        source (bytes): The source buffer of the owning tree.

    Returns:
        str: Go source text.
    """
    if self.is_synthetic:
      return "".join(c.render(source) for c in self.children)

    pieces: List[str] = []
    cursor = self.start
    for (slot_start, slot_end), child in zip(self._slots, self.children):
      pieces.append(_decode(source[cursor:slot_start]))
      pieces.append(self._render_child(child, source))
      cursor = slot_end
    pieces.append(_decode(source[cursor : self.end]))
    return "".join(pieces)

  def _render_child(self, child: "GoNode", source: bytes) -> str:
    return child.render(source)


class Identifier(GoNode):
  """
  A bare name: variable, package qualifier or selected field.
  """

  def __init__(self, name: str, kind: str = "identifier", start: int = -1, end: int = -1, row: int = 0):
    super().__init__(kind, start, end, row=row, end_row=row)
    self.name = name

  def render(self, source: bytes) -> str:
    return self.name


class StringLiteral(GoNode):
  """
  A string literal. ``value`` holds the raw text including delimiters.
  """

  def __init__(self, value: str, kind: str, start: int = -1, end: int = -1, row: int = 0, end_row: int = 0):
    super().__init__(kind, start, end, row=row, end_row=end_row)
    self.value = value

  @property
  def is_interpreted(self) -> bool:
    """True for a double-quoted literal (the only kind that may be rewritten)."""
    return len(self.value) >= 2 and self.value[0] == '"' and self.value[-1] == '"'

  @property
  def content(self) -> str:
    """The literal without its delimiters, escape sequences left as written."""
    return self.value[1:-1]

  def insert_before_closing_quote(self, suffix: str) -> None:
    """
    Appends text inside the literal, e.g. ``"msg"`` -> ``"msg: %w"``.

    Raises:
        ValueError: For raw (backtick) literals, which are never mutated.
    """
    if not self.is_interpreted:
      raise ValueError(f"cannot extend non double-quoted literal {self.value}")
    self.value = self.value[:-1] + suffix + '"'

  def render(self, source: bytes) -> str:
    return self.value


class SelectorExpr(GoNode):
  """
  ``operand.field``. For package qualified calls the operand is an :class:`Identifier`.
  """

  def __init__(self, kind: str, start: int, end: int, children: List[GoNode], operand_index: int, field_index: int, **kw):
    super().__init__(kind, start, end, children, **kw)
    self._operand_index = operand_index
    self._field_index = field_index

  @property
  def operand(self) -> GoNode:
    return self.children[self._operand_index]

  @operand.setter
  def operand(self, node: GoNode) -> None:
    self.children[self._operand_index] = node

  @property
  def field(self) -> GoNode:
    return self.children[self._field_index]

  @field.setter
  def field(self, node: GoNode) -> None:
    self.children[self._field_index] = node

  @property
  def qualifier(self) -> Optional[str]:
    """The operand name if the operand is a plain identifier."""
    operand = self.operand
    return operand.name if isinstance(operand, Identifier) else None

  @property
  def member(self) -> Optional[str]:
    field = self.field
    return field.name if isinstance(field, Identifier) else None


class CallExpr(GoNode):
  """
  ``function(arguments...)``.

  Assigning :attr:`arguments` replaces the whole argument list; it is then
  rendered as ``(a, b, c)`` from the new nodes. Comments that were inside the
  original parentheses do not survive such a replacement.
  """

  def __init__(self, kind: str, start: int, end: int, children: List[GoNode], function_index: int, arguments_index: int, **kw):
    super().__init__(kind, start, end, children, **kw)
    self._function_index = function_index
    self._arguments_index = arguments_index
    self._arguments: Optional[List[GoNode]] = None

  @property
  def function(self) -> GoNode:
    return self.children[self._function_index]

  @function.setter
  def function(self, node: GoNode) -> None:
    self.children[self._function_index] = node

  @property
  def argument_list(self) -> GoNode:
    return self.children[self._arguments_index]

  @property
  def arguments(self) -> List[GoNode]:
    """Ordered argument expressions (a variadic ``xs...`` is one ``variadic_argument``)."""
    if self._arguments is not None:
      return list(self._arguments)
    return self.argument_list.named_children()

  @arguments.setter
  def arguments(self, nodes: List[GoNode]) -> None:
    self._arguments = list(nodes)

  @property
  def selector(self) -> Optional[SelectorExpr]:
    function = self.function
    return function if isinstance(function, SelectorExpr) else None

  def iter_children(self) -> Iterator[GoNode]:
    if self._arguments is None:
      yield from self.children
      return
    for i, child in enumerate(self.children):
      if i == self._arguments_index:
        yield from self._arguments
      else:
        yield child

  def _render_child(self, child: GoNode, source: bytes) -> str:
    if self._arguments is not None and child is self.argument_list:
      return "(" + ", ".join(arg.render(source) for arg in self._arguments) + ")"
    return child.render(source)


class ImportSpec(GoNode):
  """
  One imported package: ``"fmt"``, ``stderrors "errors"``, ``_ "embed"``.
  """

  def __init__(self, kind: str, start: int, end: int, children: List[GoNode], alias: Optional[str], path: str, **kw):
    super().__init__(kind, start, end, children, **kw)
    self.alias = alias
    self.path = path

  @property
  def local_name(self) -> str:
    """
    The name the file uses to refer to the package.

    This is the explicit alias when present (including ``.`` and ``_``),
    otherwise the last element of the import path.
    """
    if self.alias:
      return self.alias
    return self.path.rsplit("/", 1)[-1]


class ImportDecl(GoNode):
  """
  ``import "x"`` or a parenthesized ``import ( ... )`` group.

  Attributes:
      replacement (Optional[str]): When set, rendered instead of the original text.
  """

  def __init__(self, kind: str, start: int, end: int, children: List[GoNode], **kw):
    super().__init__(kind, start, end, children, **kw)
    self.replacement: Optional[str] = None

  @property
  def spec_list(self) -> Optional[GoNode]:
    for child in self.children:
      if child.kind == "import_spec_list":
        return child
    return None

  @property
  def is_grouped(self) -> bool:
    return self.spec_list is not None

  @property
  def specs(self) -> List[ImportSpec]:
    container = self.spec_list or self
    return [c for c in container.children if isinstance(c, ImportSpec)]

  def render(self, source: bytes) -> str:
    if self.replacement is not None:
      return self.replacement
    return super().render(source)


class SourceFile(GoNode):
  """
  Root node of a Go file.

  Besides the generic rendering it supports removing whole top-level
  declarations (together with their line) and inserting new text after a
  top-level node.
  """

  def __init__(self, kind: str, start: int, end: int, children: List[GoNode], **kw):
    super().__init__(kind, start, end, children, **kw)
    self._removed: Set[int] = set()
    self._insertions: Dict[int, str] = {}
    self._dropped: Set[int] = set()

  @property
  def package_clause(self) -> Optional[GoNode]:
    for child in self.children:
      if child.kind == "package_clause":
        return child
    return None

  @property
  def import_declarations(self) -> List[ImportDecl]:
    return [c for c in self.children if isinstance(c, ImportDecl) and id(c) not in self._removed]

  def remove_declaration(self, decl: GoNode) -> None:
    """
    Drops a top-level declaration, its trailing same-line comments and its terminator.

    Raises:
        ValueError: If ``decl`` is not a direct child.
    """
    index = self._index_of(decl)
    self._removed.add(id(decl))
    for follower in self.children[index + 1 :]:
      if follower.row != decl.end_row:
        break
      if follower.kind == "comment":
        self._removed.add(id(follower))
        continue
      if follower.kind in TERMINATOR_KINDS:
        self._removed.add(id(follower))
      break

  def drop_trailing_comments(self, decl: GoNode) -> None:
    """
    Drops the comments that follow ``decl`` on its last line, keeping the declaration.

    Raises:
        ValueError: If ``decl`` is not a direct child.
    """
    index = self._index_of(decl)
    for follower in self.children[index + 1 :]:
      if follower.row != decl.end_row or follower.kind != "comment":
        break
      self._dropped.add(id(follower))

  def insert_after(self, anchor: GoNode, text: str) -> None:
    """Emits ``text`` right after ``anchor`` (a direct child)."""
    self._insertions[id(anchor)] = self._insertions.get(id(anchor), "") + text

  def _index_of(self, decl: GoNode) -> int:
    index = next((i for i, c in enumerate(self.children) if c is decl), None)
    if index is None:
      raise ValueError(f"{decl!r} is not a top-level declaration")
    return index

  def render(self, source: bytes) -> str:
    pieces: List[str] = []
    cursor = self.start
    in_removal = False
    line_break_pending = False

    for (slot_start, slot_end), child in zip(self._slots, self.children):
      gap = _decode(source[cursor:slot_start])
      cursor = slot_end
      if id(child) in self._dropped:
        # The spacing before a dropped comment goes with it, a CR it swallowed does not.
        if child.original_text(source).endswith("\r"):
          pieces.append("\r")
        continue
      if id(child) in self._removed:
        if not in_removal:
          pieces.append(gap)
          line_break_pending = True
        in_removal = True
        if child.kind == "\n":
          line_break_pending = False
        continue
      if in_removal:
        gap = self._close_removal(pieces, gap, line_break_pending)
        in_removal = False
      pieces.append(gap)
      pieces.append(child.render(source))
      pieces.append(self._insertions.get(id(child), ""))

    tail = _decode(source[cursor : self.end])
    if in_removal:
      tail = self._close_removal(pieces, tail, line_break_pending)
    pieces.append(tail)
    return "".join(pieces)

  @staticmethod
  def _close_removal(pieces: List[str], gap: str, line_break_pending: bool) -> str:
    """Consumes the removed line's break and collapses a doubled blank line (LF or CRLF)."""
    if line_break_pending:
      gap = _strip_line_break(gap)
    tail = ""
    for piece in reversed(pieces):
      tail = piece + tail
      if len(tail.replace("\r", "")) >= 2:
        break
    if tail.replace("\r", "").endswith("\n\n"):
      gap = _strip_line_break(gap)
    return gap


def _strip_line_break(text: str) -> str:
  for brk in ("\r\n", "\n"):
    if text.startswith(brk):
      return text[len(brk) :]
  return text


class SyntaxTree:
  """
  A parsed Go file: source bytes plus the root node.

  A tree is owned by exactly one processing call; nodes are mutated in place
  and the tree is discarded after :meth:`render`.
  """

  def __init__(self, source: bytes, root: SourceFile, filename: str = "<unit>"):
    self.source = source
    self.root = root
    self.filename = filename

  def walk(self, visitor: "GoVisitor") -> None:
    """
    Pre-order traversal. Children are read after the visitor has seen their
    parent, so arguments installed by a rewrite are visited as well.
    """
    stack: List[GoNode] = [self.root]
    while stack:
      node = stack.pop()
      if visitor.on_visit(node) is False:
        continue
      stack.extend(reversed(list(node.iter_children())))

  def render(self) -> str:
    # The root span may exclude leading and trailing whitespace.
    head = _decode(self.source[: self.root.start])
    tail = _decode(self.source[self.root.end :])
    return head + self.root.render(self.source) + tail

  def text(self, node: GoNode) -> str:
    """Current text of ``node`` with mutations applied."""
    return node.render(self.source)


class GoVisitor:
  """
  Base class for tree walkers.

  Subclasses implement ``visit_<ClassName>`` methods (e.g. ``visit_CallExpr``).
  Returning ``False`` from a visit method prunes the subtree.
  """

  def on_visit(self, node: GoNode) -> Optional[bool]:
    method = getattr(self, f"visit_{type(node).__name__}", None)
    if method is None:
      return True
    return method(node)
