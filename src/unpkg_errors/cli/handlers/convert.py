"""
Convert Command Handler.

This module implements the logic for the `unpkg-errors convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. File discovery.
3. Rewriting each file via the Unit Processor.
4. Output (stdout or in-place write back) and trace logging.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.table import Table

from unpkg_errors.config import RuntimeConfig
from unpkg_errors.core.conversion_result import ConversionResult
from unpkg_errors.core.discovery import gather_files
from unpkg_errors.core.processor import UnitProcessor
from unpkg_errors.core.tracer import TraceLogger
from unpkg_errors.exceptions import ConfigError, UnitError
from unpkg_errors.utils.console import console, log_error, log_info, log_success, log_warning


def handle_convert(
  paths: List[Path],
  write: bool = False,
  recursive: bool = False,
  verbose: bool = False,
  policy: Optional[str] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      paths: Files and/or directories to migrate.
      write: If True, changed files are written back in place. Otherwise the
          rewritten text of every file is printed to stdout.
      recursive: Descend into sub directories.
      verbose: Log each file name as it is processed.
      policy: Override for the failure policy ('partial' or 'unchanged').
      json_trace_path: Optional path to dump the execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 if any file failed structurally).
  """
  try:
    config = RuntimeConfig.load(failure_policy=policy, search_path=_search_root(paths))
    files = gather_files(paths, recursive=recursive, config=config)
  except (ConfigError, UnitError) as e:
    log_error(str(e))
    return 1

  if not files:
    log_warning("No source files found in " + ", ".join(str(p) for p in paths))
    return 0

  processor = UnitProcessor(config)
  results: Dict[str, ConversionResult] = {}
  errors: Dict[str, str] = {}
  traces: Dict[str, List[Dict[str, Any]]] = {}

  for path in files:
    if verbose:
      log_info(f"Processing [path]{path}[/path]")
    tracer = TraceLogger()
    try:
      result = processor.process_file(path, tracer)
    except UnitError as e:
      log_error(str(e))
      errors[str(path)] = e.reason
      continue
    finally:
      traces[str(path)] = tracer.export()

    results[str(path)] = result
    if write:
      _write_back(path, result)
    else:
      sys.stdout.write(result.code)

  if json_trace_path:
    _dump_trace(json_trace_path, traces)

  _print_batch_summary(results, errors)
  return 1 if errors else 0


def _search_root(paths: List[Path]) -> Path:
  first = Path(paths[0]) if paths else Path.cwd()
  return first if first.is_dir() else first.parent


def _write_back(path: Path, result: ConversionResult) -> None:
  if not result.changed:
    return
  # Bytes, so line endings are written exactly as rendered.
  path.write_bytes(result.code.encode("utf-8"))
  log_success(f"Rewrote [path]{path}[/path]")


def _dump_trace(json_trace_path: Path, traces: Dict[str, List[Dict[str, Any]]]) -> None:
  try:
    json_trace_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_trace_path, "wt", encoding="utf-8") as f:
      json.dump(traces, f, indent=2)
    log_info(f"Trace saved to [path]{json_trace_path}[/path]")
  except OSError as e:
    log_error(f"Failed to write trace: {e}")


def _print_batch_summary(results: Dict[str, ConversionResult], errors: Dict[str, str]) -> None:
  """
  Renders a summary table of files that were not fully migrated.

  Args:
      results: Processed files mapped to their results.
      errors: Files that failed structurally mapped to the cause.
  """
  total = len(results) + len(errors)
  clean = sum(1 for r in results.values() if not r.has_failures)
  fixed = sum(r.diagnostics.fixed for r in results.values())

  if clean == total:
    log_success(f"Batch Complete: {total} files checked, {fixed} call sites fixed.")
    return

  table = Table(title="Migration Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if not res.has_failures:
      continue
    table.add_row(filename, f"{res.diagnostics.fixed} fixed", "; ".join(res.diagnostics.failures))
  for filename, reason in errors.items():
    table.add_row(filename, "error", reason)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {clean} clean, {total - clean} with issues.")
