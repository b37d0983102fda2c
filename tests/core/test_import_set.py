"""
Tests for import editing and reconciliation.

Verifies:
1. Removal from groups and single declarations.
2. Sorted injection into the standard library paragraph.
3. Reuse of an emptied declaration, creation of a new one.
4. Alias resolution for the legacy and standard packages.
5. ImportReconciler actions.
"""

import textwrap

from unpkg_errors.core.import_set import ImportSet, PackageNames, is_standard_library
from unpkg_errors.core.imports import ImportReconciler
from unpkg_errors.core.tracer import TraceEventType, TraceLogger

LEGACY = "github.com/pkg/errors"


def _go(text: str) -> str:
  return textwrap.dedent(text).lstrip("\n")


def _edit(parse, code: str, remove=(), add=()):
  tree = parse(code)
  imports = ImportSet(tree)
  for path in remove:
    imports.remove(path)
  for path in add:
    imports.add(path)
  imports.apply()
  return tree.render()


def test_is_standard_library():
  assert is_standard_library("fmt")
  assert is_standard_library("net/http")
  assert not is_standard_library(LEGACY)
  assert not is_standard_library("golang.org/x/sync/errgroup")


def test_queries(parse):
  tree = parse(_go(
    """
    package demo

    import (
    \t"fmt"
    \tpkgerrors "github.com/pkg/errors"
    )
    """
  ))
  imports = ImportSet(tree)
  assert imports.paths() == ["fmt", LEGACY]
  assert imports.contains("fmt")
  assert imports.find(LEGACY).alias == "pkgerrors"
  assert imports.find("os") is None


def test_untouched_file_is_identical(parse):
  code = _go(
    """
    package demo

    import (
    \t"fmt" // printing

    \t"github.com/pkg/errors"
    )
    """
  )
  assert _edit(parse, code) == code


def test_swap_in_group_with_paragraphs(parse):
  code = _go(
    """
    package demo

    import (
    \t"fmt"
    \t"os"

    \t"github.com/pkg/errors" // legacy
    \t"golang.org/x/sync/errgroup"
    )

    var x = 1
    """
  )
  expected = _go(
    """
    package demo

    import (
    \t"errors"
    \t"fmt"
    \t"os"

    \t"golang.org/x/sync/errgroup"
    )

    var x = 1
    """
  )
  assert _edit(parse, code, remove=[LEGACY], add=["errors", "fmt"]) == expected


def test_blank_line_before_removed_spec_moves_to_follower(parse):
  code = _go(
    """
    package demo

    import (
    \t"fmt"

    \t"github.com/pkg/errors"
    \t"github.com/stretchr/testify/assert"
    )
    """
  )
  expected = _go(
    """
    package demo

    import (
    \t"fmt"

    \t"github.com/stretchr/testify/assert"
    )
    """
  )
  assert _edit(parse, code, remove=[LEGACY]) == expected


def test_new_stdlib_paragraph_opened_at_top(parse):
  code = _go(
    """
    package demo

    import (
    \t"github.com/pkg/errors"
    \t"github.com/stretchr/testify/assert"
    )
    """
  )
  expected = _go(
    """
    package demo

    import (
    \t"fmt"

    \t"github.com/stretchr/testify/assert"
    )
    """
  )
  assert _edit(parse, code, remove=[LEGACY], add=["fmt"]) == expected


def test_single_declaration_is_reused(parse):
  code = 'package demo\n\nimport pkgerrors "github.com/pkg/errors"\n\nvar x = 1\n'
  expected = 'package demo\n\nimport "errors"\n\nvar x = 1\n'
  assert _edit(parse, code, remove=[LEGACY], add=["errors"]) == expected


def test_single_declaration_grows_into_group(parse):
  code = 'package demo\n\nimport "github.com/pkg/errors"\n\nvar x = 1\n'
  expected = 'package demo\n\nimport (\n\t"errors"\n\t"fmt"\n)\n\nvar x = 1\n'
  assert _edit(parse, code, remove=[LEGACY], add=["errors", "fmt"]) == expected


def test_emptied_declaration_is_deleted(parse):
  code = 'package demo\n\nimport "fmt"\nimport "github.com/pkg/errors"\n\nvar x = 1\n'
  expected = 'package demo\n\nimport "fmt"\n\nvar x = 1\n'
  assert _edit(parse, code, remove=[LEGACY], add=["fmt"]) == expected


def test_emptied_group_is_deleted(parse):
  code = 'package demo\n\nimport (\n\t"github.com/pkg/errors"\n)\n\nvar x = 1\n'
  expected = "package demo\n\nvar x = 1\n"
  assert _edit(parse, code, remove=[LEGACY]) == expected


def test_group_preferred_over_single_declaration(parse):
  code = 'package demo\n\nimport "os"\n\nimport (\n\t"strings"\n)\n'
  expected = 'package demo\n\nimport "os"\n\nimport (\n\t"fmt"\n\t"strings"\n)\n'
  assert _edit(parse, code, add=["fmt"]) == expected


def test_new_declaration_after_package_clause(parse):
  code = "package demo\n\nvar x = 1\n"
  expected = 'package demo\n\nimport "fmt"\n\nvar x = 1\n'
  assert _edit(parse, code, add=["fmt"]) == expected


def test_add_existing_path_is_noop(parse):
  tree = parse('package demo\n\nimport "fmt"\n')
  imports = ImportSet(tree)
  assert not imports.add("fmt")
  assert not imports.remove("os")


def test_standalone_comment_survives(parse):
  code = _go(
    """
    package demo

    import (
    \t// standard
    \t"github.com/pkg/errors"
    \t"os"
    )
    """
  )
  expected = _go(
    """
    package demo

    import (
    \t// standard
    \t"fmt"
    \t"os"
    )
    """
  )
  assert _edit(parse, code, remove=[LEGACY], add=["fmt"]) == expected


def test_package_names_resolution(parse):
  tree = parse(_go(
    """
    package demo

    import (
    \tf "fmt"
    \t_ "errors"
    \tpe "github.com/pkg/errors"
    )
    """
  ))
  imports = ImportSet(tree)
  names = PackageNames.resolve(imports, imports.find(LEGACY))
  assert names == PackageNames(legacy="pe", errors="errors", fmt="f")


def test_reconciler_actions_and_trace(parse):
  tree = parse('package demo\n\nimport (\n\t"fmt"\n\t"github.com/pkg/errors"\n)\n')
  tracer = TraceLogger()
  actions = ImportReconciler(ImportSet(tree), tracer).reconcile(LEGACY, ["fmt", "errors"])

  assert actions == [f"-{LEGACY}", "+errors"]
  assert tree.render() == 'package demo\n\nimport (\n\t"errors"\n\t"fmt"\n)\n'
  imports = [e for e in tracer.export() if e["type"] == TraceEventType.IMPORT_ACTION]
  assert [e["metadata"]["action"] for e in imports] == ["removed", "added"]


def test_standard_name_taken_by_other_import_gets_free_alias(parse):
  tree = parse(_go(
    """
    package demo

    import (
    \t"example.com/errors"
    \tstderrors "example.com/other"
    \tpkgerrors "github.com/pkg/errors"
    )
    """
  ))
  imports = ImportSet(tree)
  names = PackageNames.resolve(imports, imports.find(LEGACY))
  assert names == PackageNames(legacy="pkgerrors", errors="stderrors2", fmt="fmt")
  assert names.alias_for("errors") == "stderrors2"
  assert names.alias_for("fmt") is None


def test_legacy_default_name_is_free_for_errors(parse):
  tree = parse('package demo\n\nimport "github.com/pkg/errors"\n')
  imports = ImportSet(tree)
  names = PackageNames.resolve(imports, imports.find(LEGACY))
  assert names == PackageNames(legacy="errors")
  assert imports.local_names() == {"errors"}
  assert imports.local_names(exclude=imports.find(LEGACY)) == set()


def test_blank_import_does_not_provide_name(parse):
  code = 'package demo\n\nimport (\n\t_ "fmt"\n\t. "strings"\n)\n'
  tree = parse(code)
  imports = ImportSet(tree)
  assert imports.name_of("fmt") is None
  assert imports.local_names() == set()
  assert imports.add("fmt")
  imports.apply()
  assert tree.render() == 'package demo\n\nimport (\n\t_ "fmt"\n\t"fmt"\n\t. "strings"\n)\n'


def test_add_with_alias(parse):
  code = 'package demo\n\nimport "example.com/errors"\n'
  tree = parse(code)
  imports = ImportSet(tree)
  assert imports.add("errors", "stderrors")
  assert imports.name_of("errors") == "stderrors"
  imports.apply()
  assert tree.render() == 'package demo\n\nimport (\n\tstderrors "errors"\n\n\t"example.com/errors"\n)\n'


def test_removed_single_spec_takes_its_comment_along(parse):
  code = 'package demo\n\nimport "github.com/pkg/errors" // legacy\n\nvar x = 1\n'
  expected = 'package demo\n\nimport "fmt"\n\nvar x = 1\n'
  assert _edit(parse, code, remove=[LEGACY], add=["fmt"]) == expected


def test_crlf_file_keeps_its_line_terminator(parse):
  code = 'package demo\r\n\r\nimport (\r\n\t"github.com/pkg/errors" // legacy\r\n\t"os"\r\n)\r\n\r\nvar x = 1\r\n'
  expected = 'package demo\r\n\r\nimport (\r\n\t"errors"\r\n\t"fmt"\r\n\t"os"\r\n)\r\n\r\nvar x = 1\r\n'
  assert _edit(parse, code, remove=[LEGACY], add=["errors", "fmt"]) == expected


def test_crlf_file_new_declaration(parse):
  code = "package demo\r\n\r\nvar x = 1\r\n"
  assert _edit(parse, code, add=["errors", "fmt"]) == 'package demo\r\n\r\nimport (\r\n\t"errors"\r\n\t"fmt"\r\n)\r\n\r\nvar x = 1\r\n'


def test_reconciler_uses_resolved_alias(parse):
  tree = parse('package demo\n\nimport (\n\t"example.com/errors"\n\tpkgerrors "github.com/pkg/errors"\n)\n')
  imports = ImportSet(tree)
  names = PackageNames.resolve(imports, imports.find(LEGACY))
  actions = ImportReconciler(imports).reconcile(LEGACY, ["errors"], names)

  assert actions == [f"-{LEGACY}", "+errors"]
  assert tree.render() == 'package demo\n\nimport (\n\tstderrors "errors"\n\n\t"example.com/errors"\n)\n'
