"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Shared parser and processor fixtures.
"""

import sys
from pathlib import Path
from typing import Callable, Iterator, List, Type, TypeVar

import pytest

# Add src to path so we can import 'unpkg_errors' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from unpkg_errors.config import RuntimeConfig
from unpkg_errors.core.nodes import GoNode, SyntaxTree
from unpkg_errors.core.parser import GoParser
from unpkg_errors.core.processor import UnitProcessor

N = TypeVar("N", bound=GoNode)


def iter_nodes(node: GoNode) -> Iterator[GoNode]:
  """Pre-order iteration over the current children."""
  yield node
  for child in node.iter_children():
    yield from iter_nodes(child)


def find_all(tree: SyntaxTree, node_type: Type[N]) -> List[N]:
  return [n for n in iter_nodes(tree.root) if isinstance(n, node_type)]


@pytest.fixture
def parse() -> Callable[[str], SyntaxTree]:
  """Parses Go source into a SyntaxTree."""
  parser = GoParser()
  return lambda code: parser.parse(code, "test.go")


@pytest.fixture
def processor() -> UnitProcessor:
  return UnitProcessor(RuntimeConfig())


@pytest.fixture
def nodes_of() -> Callable[[SyntaxTree, Type[N]], List[N]]:
  """Returns a helper collecting every node of a given class."""
  return find_all
