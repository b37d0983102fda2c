"""
Main Entry Point for the unpkg-errors CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `unpkg_errors.cli.commands`.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from unpkg_errors import __version__
from unpkg_errors.cli import commands
from unpkg_errors.enums import FailurePolicy
from unpkg_errors.utils.console import setup_logging


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(
    prog="unpkg-errors",
    description="unpkg-errors: migrate Go code from github.com/pkg/errors to the standard library",
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Rewrite Go files to use errors and fmt")
  cmd_conv.add_argument("paths", nargs="*", type=Path, default=[Path(".")], help="Files or directories (default: .)")
  cmd_conv.add_argument("-w", "--write", action="store_true", help="Write changed files back instead of printing")
  cmd_conv.add_argument("-r", "--recursive", action="store_true", help="Recurse into sub directories")
  cmd_conv.add_argument("-v", "--verbose", action="store_true", help="Log each file as it is processed")
  cmd_conv.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
  cmd_conv.add_argument(
    "--policy",
    choices=[p.value for p in FailurePolicy],
    default=None,
    help="Output for files with unfixable call sites (default: from toml, else partial)",
  )
  cmd_conv.add_argument("--json-trace", type=Path, default=None, help="Dump the execution trace to a JSON file.")

  # --- Command: AUDIT ---
  cmd_audit = subparsers.add_parser("audit", help="Report call sites that cannot be migrated")
  cmd_audit.add_argument("paths", nargs="*", type=Path, default=[Path(".")], help="Files or directories (default: .)")
  cmd_audit.add_argument("-r", "--recursive", action="store_true", help="Recurse into sub directories")
  cmd_audit.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
  cmd_audit.add_argument("--json", dest="json_mode", action="store_true", help="Print the report as JSON")

  args = parser.parse_args(argv)

  if args.debug:
    setup_logging(logging.DEBUG)
  elif args.command == "audit" and args.json_mode:
    setup_logging(logging.WARNING)
  else:
    setup_logging(logging.INFO)

  if args.command == "convert":
    return commands.handle_convert(
      args.paths, args.write, args.recursive, args.verbose, args.policy, args.json_trace
    )

  elif args.command == "audit":
    return commands.handle_audit(args.paths, args.recursive, args.json_mode)

  return 1
