"""
Import Declarations of a Go File.

This module provides :class:`ImportSet`, an editable view over the import
declarations of a :class:`SyntaxTree`. It supports listing, adding and
removing import specs by path; :meth:`ImportSet.apply` then writes the edits
back into the tree.

Layout rules applied when editing:

1.  **Untouched declarations** are emitted byte for byte.
2.  **Removal** drops the spec's line together with its trailing comment. A
    declaration left without specs is deleted together with its line.
3.  **Injection** prefers an existing parenthesized group and places the new
    spec, in sorted position, into the first paragraph (run of specs without
    blank lines) holding standard library paths. Without such a paragraph a
    new one is opened at the top of the group.
4.  Without any group, a single-spec declaration (possibly the one emptied by
    a removal) is reused. With no import declaration at all, a new one is
    added after the package clause.
5.  Rewritten declarations use the file's own line terminator.

Local names are unique within a file: blank (``_``) and dot (``.``) imports
bind no name, every other spec binds its alias or the last path element.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from unpkg_errors.core.nodes import GoNode, ImportDecl, ImportSpec, SyntaxTree

ERRORS_PATH = "errors"
FMT_PATH = "fmt"

# Aliases that make an import bind no package name.
UNNAMED_ALIASES = ("_", ".")


def is_standard_library(path: str) -> bool:
  """
  Standard library import paths have no dot in their first element.

  >>> is_standard_library("net/http"), is_standard_library("github.com/pkg/errors")
  (True, False)
  """
  return "." not in path.split("/", 1)[0]


def default_name(path: str) -> str:
  return path.rsplit("/", 1)[-1]


@dataclass
class _Entry:
  """One line inside an import declaration: a spec (possibly with trailing comment) or a comment."""

  text: str
  path: Optional[str] = None
  spec: Optional[ImportSpec] = None
  blank_before: bool = False
  alias: Optional[str] = None

  @property
  def local_name(self) -> Optional[str]:
    """The bound package name, None for comments and blank or dot imports."""
    if self.path is None or self.alias in UNNAMED_ALIASES:
      return None
    return self.alias or default_name(self.path)


@dataclass
class _EditableDecl:
  decl: Optional[ImportDecl]
  entries: List[_Entry] = field(default_factory=list)
  grouped: bool = False
  indent: str = "\t"
  dirty: bool = False
  # A spec of an ungrouped declaration was removed; its same-line comment is stale.
  lost_spec: bool = False

  def spec_entries(self) -> List[_Entry]:
    return [e for e in self.entries if e.path is not None]


class ImportSet:
  """
  Ordered, editable set of import specs of one file.

  Attributes:
      newline (str): Line terminator used when rendering edited declarations.
  """

  def __init__(self, tree: SyntaxTree):
    self.tree = tree
    self.newline = "\r\n" if b"\r\n" in tree.source else "\n"
    self._decls: List[_EditableDecl] = [self._load(d) for d in tree.root.import_declarations]
    self._new: Optional[_EditableDecl] = None

  # --- Queries ---

  def paths(self) -> List[str]:
    """Current import paths in declaration order (including pending additions)."""
    return [e.path for ed in self._editables() for e in ed.spec_entries()]

  def specs(self) -> List[ImportSpec]:
    """Parsed specs that are still present."""
    return [e.spec for ed in self._editables() for e in ed.spec_entries() if e.spec is not None]

  def find(self, path: str) -> Optional[ImportSpec]:
    """Returns the parsed spec importing ``path``, if any."""
    for spec in self.specs():
      if spec.path == path:
        return spec
    return None

  def contains(self, path: str) -> bool:
    return path in self.paths()

  def name_of(self, path: str) -> Optional[str]:
    """The name under which ``path`` is usable, None if no spec binds one."""
    for ed in self._editables():
      for entry in ed.spec_entries():
        if entry.path == path and entry.local_name is not None:
          return entry.local_name
    return None

  def local_names(self, exclude: Optional[ImportSpec] = None) -> Set[str]:
    """Package names bound by the current specs, optionally ignoring one parsed spec."""
    return {
      e.local_name
      for ed in self._editables()
      for e in ed.spec_entries()
      if e.local_name is not None and (exclude is None or e.spec is not exclude)
    }

  # --- Edits ---

  def remove(self, path: str) -> bool:
    """
    Removes the spec importing ``path``.

    Returns:
        bool: True if a spec was removed.
    """
    for ed in self._editables():
      for i, entry in enumerate(ed.entries):
        if entry.path != path:
          continue
        del ed.entries[i]
        if i < len(ed.entries):
          follower = ed.entries[i]
          follower.blank_before = follower.blank_before or entry.blank_before
        ed.dirty = True
        ed.lost_spec = ed.lost_spec or not ed.grouped
        return True
    return False

  def add(self, path: str, alias: Optional[str] = None) -> bool:
    """
    Imports ``path`` unless a spec already makes it usable by name.

    A blank or dot import of ``path`` does not count: a named spec is added
    next to it.

    Args:
        path (str): Import path.
        alias (str, optional): Explicit package name for the new spec.

    Returns:
        bool: True if a spec was added.
    """
    if self.name_of(path) is not None:
      return False
    text = f'{alias} "{path}"' if alias else f'"{path}"'
    target = self._choose_target(path)
    self._insert(target, _Entry(text=text, path=path, alias=alias))
    target.dirty = True
    return True

  def apply(self) -> None:
    """Writes pending edits into the tree. Safe to call more than once."""
    root = self.tree.root
    for ed in self._decls:
      if not ed.dirty or ed.decl is None:
        continue
      if not ed.spec_entries():
        root.remove_declaration(ed.decl)
      else:
        ed.decl.replacement = self._render(ed)
        if ed.lost_spec:
          root.drop_trailing_comments(ed.decl)
      ed.dirty = False

    if self._new is not None and self._new.dirty and self._new.spec_entries():
      anchor = root.package_clause
      if anchor is None:
        raise ValueError(f"{self.tree.filename}: cannot add imports to a file without package clause")
      root.insert_after(anchor, self.newline * 2 + self._render(self._new))
      self._new.dirty = False

  # --- Internals ---

  def _editables(self) -> List[_EditableDecl]:
    return self._decls + ([self._new] if self._new is not None else [])

  def _load(self, decl: ImportDecl) -> _EditableDecl:
    source = self.tree.source
    spec_list = decl.spec_list
    items: List[GoNode]
    if spec_list is not None:
      items = [c for c in spec_list.children if isinstance(c, ImportSpec) or c.kind == "comment"]
    else:
      items = list(decl.specs)

    entries: List[_Entry] = []
    previous: Optional[Tuple[_Entry, GoNode]] = None
    for item in items:
      if previous is not None:
        prev_entry, prev_node = previous
        # Trailing comment on a spec line stays attached to that spec.
        if item.kind == "comment" and prev_entry.path is not None and item.row == prev_node.end_row:
          prev_entry.text = source[prev_node.start : item.end].decode("utf-8").rstrip("\r")
          continue
      blank = previous is not None and item.row - previous[1].end_row > 1
      text = item.original_text(source).rstrip("\r")
      if isinstance(item, ImportSpec):
        entry = _Entry(text=text, path=item.path, spec=item, blank_before=blank, alias=item.alias)
      else:
        entry = _Entry(text=text, blank_before=blank)
      entries.append(entry)
      previous = (entry, item)

    return _EditableDecl(
      decl=decl,
      entries=entries,
      grouped=spec_list is not None,
      indent=self._indent_of(items[0]) if spec_list is not None and items else "\t",
    )

  def _indent_of(self, node: GoNode) -> str:
    source = self.tree.source
    line_start = source.rfind(b"\n", 0, node.start) + 1
    prefix = source[line_start : node.start].decode("utf-8")
    if prefix and not prefix.strip():
      return prefix
    return "\t"

  def _choose_target(self, path: str) -> _EditableDecl:
    groups = [ed for ed in self._decls if ed.grouped and ed.spec_entries()]
    for ed in groups:
      if self._paragraph_for(ed, path) is not None:
        return ed
    if groups:
      return groups[0]

    emptied = [ed for ed in self._decls if not ed.spec_entries()]
    if emptied:
      return emptied[0]
    if self._decls:
      return self._decls[0]

    if self._new is None:
      self._new = _EditableDecl(decl=None)
    return self._new

  @staticmethod
  def _paragraphs(ed: _EditableDecl) -> List[Tuple[int, int]]:
    """Index ranges ``[start, end)`` of blank-line separated runs."""
    bounds: List[Tuple[int, int]] = []
    start = 0
    for i, entry in enumerate(ed.entries):
      if i > 0 and entry.blank_before:
        bounds.append((start, i))
        start = i
    if ed.entries:
      bounds.append((start, len(ed.entries)))
    return bounds

  def _paragraph_for(self, ed: _EditableDecl, path: str) -> Optional[Tuple[int, int]]:
    wanted = is_standard_library(path)
    for start, end in self._paragraphs(ed):
      if any(e.path is not None and is_standard_library(e.path) == wanted for e in ed.entries[start:end]):
        return start, end
    return None

  def _insert(self, ed: _EditableDecl, entry: _Entry) -> None:
    paragraph = self._paragraph_for(ed, entry.path or "")
    if paragraph is None:
      if not ed.entries:
        ed.entries.append(entry)
      elif is_standard_library(entry.path or ""):
        ed.entries[0].blank_before = True
        ed.entries.insert(0, entry)
      else:
        entry.blank_before = True
        ed.entries.append(entry)
      return

    start, end = paragraph
    last_spec = start
    for i in range(start, end):
      current = ed.entries[i]
      if current.path is None:
        continue
      if current.path > (entry.path or ""):
        if i == start:
          entry.blank_before, current.blank_before = current.blank_before, False
        ed.entries.insert(i, entry)
        return
      last_spec = i
    ed.entries.insert(last_spec + 1, entry)

  def _render(self, ed: _EditableDecl) -> str:
    if not ed.grouped and len(ed.entries) == 1 and ed.entries[0].path is not None:
      return "import " + ed.entries[0].text

    lines = ["import ("]
    for i, entry in enumerate(ed.entries):
      if entry.blank_before and i > 0:
        lines.append("")
      lines.append(ed.indent + entry.text)
    lines.append(")")
    return self.newline.join(lines)


@dataclass(frozen=True)
class PackageNames:
  """
  Local names under which a file refers to the packages involved in a rewrite.

  Attributes:
      legacy (str): Qualifier of the legacy package (its alias, or ``errors``).
      errors (str): Qualifier to use for the standard ``errors`` package.
      fmt (str): Qualifier to use for the standard ``fmt`` package.
  """

  legacy: str
  errors: str = ERRORS_PATH
  fmt: str = FMT_PATH

  @classmethod
  def resolve(cls, imports: ImportSet, legacy: ImportSpec) -> "PackageNames":
    """
    Derives the qualifiers from the file's import set.

    A standard package already imported under a name keeps that name.
    Otherwise the default name is used, unless another import (other than
    the legacy one, which is going away) binds it; then ``std<name>``,
    ``std<name>2``, ... is picked.
    """
    taken = imports.local_names(exclude=legacy)
    errors = imports.name_of(ERRORS_PATH) or _free_name(ERRORS_PATH, taken)
    taken.add(errors)
    fmt = imports.name_of(FMT_PATH) or _free_name(FMT_PATH, taken)
    return cls(legacy=legacy.local_name, errors=errors, fmt=fmt)

  def alias_for(self, path: str) -> Optional[str]:
    """The explicit alias a new import of ``path`` needs, None for the default name."""
    name = {ERRORS_PATH: self.errors, FMT_PATH: self.fmt}.get(path)
    if name is None or name == default_name(path):
      return None
    return name


def _free_name(path: str, taken: Set[str]) -> str:
  name = default_name(path)
  if name not in taken:
    return name
  candidate = f"std{name}"
  suffix = 2
  while candidate in taken:
    candidate = f"std{name}{suffix}"
    suffix += 1
  return candidate
