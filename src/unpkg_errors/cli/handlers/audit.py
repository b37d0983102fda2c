"""
Audit Command Handler.

Runs the Unit Processor over source files without writing anything and
reports, per file, how many legacy call sites would be fixed and why the
others cannot be.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from rich.table import Table

from unpkg_errors.config import RuntimeConfig
from unpkg_errors.core.discovery import gather_files
from unpkg_errors.core.processor import UnitProcessor
from unpkg_errors.exceptions import ConfigError, UnitError
from unpkg_errors.utils.console import console, log_error, log_info, log_success, log_warning


def handle_audit(paths: List[Path], recursive: bool = False, json_mode: bool = False) -> int:
  """
  Scans files and reports which legacy call sites can be migrated.

  Args:
      paths: Files and/or directories to scan.
      recursive: Descend into sub directories.
      json_mode: If True, output JSON to stdout instead of a table.

  Returns:
      int: Exit code (0 if every call site can be fixed, 1 otherwise or on
           any structural error).
  """
  try:
    first = Path(paths[0]) if paths else Path.cwd()
    config = RuntimeConfig.load(search_path=first if first.is_dir() else first.parent)
    files = gather_files(paths, recursive=recursive, config=config)
  except (ConfigError, UnitError) as e:
    log_error(str(e))
    return 1

  if not files and not json_mode:
    log_warning("No source files found in " + ", ".join(str(p) for p in paths))
    return 0

  if not json_mode:
    log_info(f"Auditing {len(files)} files for {config.legacy_package}...")

  processor = UnitProcessor(config)
  report: List[Dict[str, Any]] = []

  for path in files:
    try:
      result = processor.process_file(path)
    except UnitError as e:
      # Structural errors are logged even in JSON mode; they go to stderr.
      log_error(str(e))
      report.append({"file": str(path), "fixed": 0, "failures": [], "error": e.reason})
      continue
    if not result.imports_reconciled and not result.has_failures:
      continue
    report.append(
      {
        "file": str(path),
        "fixed": result.diagnostics.fixed,
        "failures": list(result.diagnostics.failures),
        "error": None,
      }
    )

  blocked = [item for item in report if item["failures"] or item["error"]]

  if json_mode:
    print(json.dumps(report, indent=2))
    return 1 if blocked else 0

  if not blocked:
    fixed = sum(item["fixed"] for item in report)
    log_success(f"All {fixed} call sites in {len(report)} files can be migrated.")
    return 0

  table = Table(title="Migration Audit")
  table.add_column("File", style="cyan")
  table.add_column("Fixable", justify="right", style="green")
  table.add_column("Blocked", justify="right", style="red")
  table.add_column("Reasons")

  for item in blocked:
    reasons = item["failures"] or [item["error"]]
    table.add_row(item["file"], str(item["fixed"]), str(len(reasons)), "\n".join(reasons))

  console.print(table)
  return 1
