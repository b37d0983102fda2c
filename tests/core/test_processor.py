"""
Tests for the Unit Processor pipeline.

Verifies:
1. No-op on files that do not import the legacy package.
2. Full migration, import reconciliation and idempotence.
3. Partial fixes keep the legacy import; the failure policy decides the output.
4. Dot imports, syntax errors and unreadable files.
5. Logging of per-file summaries.
"""

import logging
import textwrap

import pytest

from unpkg_errors import convert
from unpkg_errors.config import RuntimeConfig
from unpkg_errors.core.processor import UnitProcessor, process_source
from unpkg_errors.core.tracer import TraceEventType, TraceLogger
from unpkg_errors.enums import FailurePolicy
from unpkg_errors.exceptions import GoSyntaxError, UnreadableFileError

LEGACY = "github.com/pkg/errors"


def _go(text: str) -> str:
  return textwrap.dedent(text).lstrip("\n")


FULL = _go(
  """
  package store

  import (
  \t"fmt"

  \t"github.com/pkg/errors"
  )

  var ErrMissing = errors.New("missing")

  func Load(name string) error {
  \terr := open(name)
  \tif err != nil {
  \t\treturn errors.Wrapf(err, "loading %s", name)
  \t}
  \tif errors.Is(err, ErrMissing) {
  \t\treturn errors.Errorf("no %s", name)
  \t}
  \tfmt.Println(name)
  \treturn errors.Wrap(err, "load")
  }
  """
)

FULL_AFTER = _go(
  """
  package store

  import (
  \t"errors"
  \t"fmt"
  )

  var ErrMissing = errors.New("missing")

  func Load(name string) error {
  \terr := open(name)
  \tif err != nil {
  \t\treturn fmt.Errorf("loading %s: %w", name, err)
  \t}
  \tif errors.Is(err, ErrMissing) {
  \t\treturn fmt.Errorf("no %s", name)
  \t}
  \tfmt.Println(name)
  \treturn fmt.Errorf("load: %w", err)
  }
  """
)

MIXED = _go(
  """
  package store

  import "github.com/pkg/errors"

  func Load(err error) error {
  \tif err != nil {
  \t\treturn errors.Wrap(err, "load")
  \t}
  \treturn errors.Wrap(computeErr(), "msg")
  }
  """
)


def test_noop_without_legacy_import(processor):
  code = 'package main\n\nimport "errors"\n\nvar e = errors.New("x") // same\n'
  result = processor.process(code, "main.go")
  assert result.code == code
  assert not result.changed
  assert result.diagnostics.fixed == 0
  assert result.diagnostics.failures == []
  assert not result.imports_reconciled


def test_other_package_named_errors_is_ignored(processor):
  code = 'package main\n\nimport "example.com/errors"\n\nvar e = errors.Wrap(err, "x")\n'
  assert processor.process(code).code == code


def test_full_migration(processor):
  result = processor.process(FULL, "store.go")
  assert result.code == FULL_AFTER
  assert result.changed
  assert result.imports_reconciled
  assert result.diagnostics.fixed == 5
  assert result.diagnostics.all_fixed
  assert result.import_actions == [f"-{LEGACY}", "+errors"]


def test_idempotent(processor):
  once = processor.process(FULL).code
  again = processor.process(once)
  assert again.code == once
  assert not again.changed


def test_partial_keeps_import_and_fixed_calls(processor):
  result = processor.process(MIXED, "mixed.go")
  assert result.diagnostics.fixed == 1
  assert result.diagnostics.failures == ["first argument to wrap is not a simple identifier"]
  assert not result.imports_reconciled
  assert 'import "github.com/pkg/errors"' in result.code
  assert 'return fmt.Errorf("load: %w", err)' in result.code
  assert 'return errors.Wrap(computeErr(), "msg")' in result.code


def test_unchanged_policy_returns_original():
  config = RuntimeConfig(failure_policy=FailurePolicy.UNCHANGED)
  result = UnitProcessor(config).process(MIXED, "mixed.go")
  assert result.code == MIXED
  assert not result.changed
  assert result.diagnostics.fixed == 1
  assert result.has_failures


def test_unrecognized_member_keeps_import(processor):
  code = 'package main\n\nimport "github.com/pkg/errors"\n\nvar e = errors.Cause(err)\n'
  result = processor.process(code)
  assert result.code == code
  assert result.diagnostics.failures == ["no translation available for `Cause`"]


def test_aliased_legacy_import(processor):
  code = 'package main\n\nimport pkgerrors "github.com/pkg/errors"\n\nvar e = pkgerrors.New("x")\n'
  result = processor.process(code)
  assert result.code == 'package main\n\nimport "errors"\n\nvar e = errors.New("x")\n'


def test_errors_name_taken_by_other_import(processor):
  code = _go(
    """
    package main

    import (
    \t"example.com/errors"
    \tpkgerrors "github.com/pkg/errors"
    )

    var e = pkgerrors.New("x")
    var c = errors.Code(e)
    """
  )
  expected = _go(
    """
    package main

    import (
    \tstderrors "errors"

    \t"example.com/errors"
    )

    var e = stderrors.New("x")
    var c = errors.Code(e)
    """
  )
  result = processor.process(code)
  assert result.code == expected
  assert result.import_actions == [f"-{LEGACY}", "+errors"]
  assert processor.process(result.code).code == expected


def test_blank_fmt_import_gets_named_companion(processor):
  code = 'package main\n\nimport (\n\t_ "fmt"\n\t"github.com/pkg/errors"\n)\n\nvar e = errors.Errorf("x")\n'
  result = processor.process(code)
  assert result.code == 'package main\n\nimport (\n\t_ "fmt"\n\t"fmt"\n)\n\nvar e = fmt.Errorf("x")\n'


def test_trailing_comment_of_removed_import_is_dropped(processor):
  code = 'package main\n\nimport "github.com/pkg/errors" // legacy\n\nvar e = errors.Errorf("x")\n'
  result = processor.process(code)
  assert result.code == 'package main\n\nimport "fmt"\n\nvar e = fmt.Errorf("x")\n'


def test_crlf_file_stays_crlf(processor):
  code = (
    'package main\r\n\r\nimport "github.com/pkg/errors"\r\n\r\n'
    'var e = errors.Wrap(err, "x")\r\nvar f = errors.New("y")\r\n'
  )
  result = processor.process(code)
  assert result.code == (
    'package main\r\n\r\nimport (\r\n\t"errors"\r\n\t"fmt"\r\n)\r\n\r\n'
    'var e = fmt.Errorf("x: %w", err)\r\nvar f = errors.New("y")\r\n'
  )
  assert "\n" not in result.code.replace("\r\n", "")


def test_import_without_calls_is_removed(processor):
  code = 'package main\n\nimport (\n\t"fmt"\n\t"github.com/pkg/errors"\n)\n\nvar _ = fmt.Sprint()\n'
  result = processor.process(code)
  assert result.code == 'package main\n\nimport (\n\t"fmt"\n)\n\nvar _ = fmt.Sprint()\n'
  assert result.diagnostics.fixed == 0
  assert result.imports_reconciled


def test_dot_import_is_a_failure(processor):
  code = 'package main\n\nimport . "github.com/pkg/errors"\n\nvar e = New("x")\n'
  result = processor.process(code)
  assert result.code == code
  assert result.diagnostics.failures == [f"dot import of {LEGACY} is not supported"]


def test_custom_legacy_package():
  config = RuntimeConfig(legacy_package="example.com/errs")
  code = 'package main\n\nimport "example.com/errs"\n\nvar e = errs.Errorf("x")\n'
  result = UnitProcessor(config).process(code)
  assert result.code == 'package main\n\nimport "fmt"\n\nvar e = fmt.Errorf("x")\n'


def test_syntax_error_raises(processor):
  with pytest.raises(GoSyntaxError):
    processor.process("package main\n\nfunc (\n", "bad.go")


def test_trace_events(processor):
  tracer = TraceLogger()
  processor.process(FULL, "store.go", tracer)
  events = tracer.export()
  phases = [e["description"] for e in events if e["type"] == TraceEventType.PHASE_START]
  assert phases == ["Unit", "Parse", "Walk", "Reconcile"]
  starts = sum(1 for e in events if e["type"] == TraceEventType.PHASE_START)
  ends = sum(1 for e in events if e["type"] == TraceEventType.PHASE_END)
  assert starts == ends


def test_logs_summary(processor, caplog):
  with caplog.at_level(logging.INFO, logger="unpkg_errors"):
    processor.process(MIXED, "mixed.go")
  assert "mixed.go: Fixed 1, failed to fix 1" in caplog.text
  assert "mixed.go: first argument to wrap is not a simple identifier" in caplog.text

  caplog.clear()
  with caplog.at_level(logging.INFO, logger="unpkg_errors"):
    processor.process(FULL, "store.go")
  assert f"store.go: Fixed 5 references to {LEGACY}" in caplog.text


def test_process_file(tmp_path, processor):
  path = tmp_path / "store.go"
  path.write_bytes(FULL.encode("utf-8"))
  result = processor.process_file(path)
  assert result.filename == str(path)
  assert result.code == FULL_AFTER


def test_process_file_errors(tmp_path, processor):
  with pytest.raises(UnreadableFileError):
    processor.process_file(tmp_path / "missing.go")

  bad = tmp_path / "latin1.go"
  bad.write_bytes(b"package main\n\nvar s = \"\xe9\"\n")
  with pytest.raises(UnreadableFileError) as excinfo:
    processor.process_file(bad)
  assert excinfo.value.filename == str(bad)


def test_convenience_functions():
  assert convert(FULL) == FULL_AFTER
  assert process_source(MIXED).has_failures
