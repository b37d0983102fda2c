"""
Source File Discovery.

Expands the paths given on the command line into the list of Go files to
process:

- an explicit file is kept if its extension matches;
- a directory contributes its top-level matching files, or, when recursing,
  every matching file below it (directories named in
  ``RuntimeConfig.exclude_dirs`` are skipped).

Results are deduplicated and each directory's files are sorted, so runs are
deterministic.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Set

from unpkg_errors.config import RuntimeConfig
from unpkg_errors.exceptions import UnreadableFileError

logger = logging.getLogger(__name__)


def gather_files(
  paths: Iterable[Path],
  recursive: bool = False,
  config: Optional[RuntimeConfig] = None,
) -> List[Path]:
  """
  Collects the files to process.

  Args:
      paths: Files and/or directories.
      recursive: Descend into sub directories.
      config: Supplies extensions and excluded directory names.

  Returns:
      List[Path]: Files in discovery order.

  Raises:
      UnreadableFileError: If a path does not exist or a directory cannot be listed.
  """
  config = config or RuntimeConfig()
  extensions = set(config.extensions)
  excluded = set(config.exclude_dirs)

  files: List[Path] = []
  seen: Set[Path] = set()

  def _add(candidate: Path) -> None:
    key = candidate.resolve()
    if key not in seen:
      seen.add(key)
      files.append(candidate)

  for path in paths:
    path = Path(path)
    if not path.exists():
      raise UnreadableFileError(str(path), "no such file or directory")

    if path.is_file():
      if path.suffix in extensions:
        _add(path)
      else:
        logger.debug("Skipping %s: extension not in %s", path, sorted(extensions))
      continue

    if recursive:
      for match in _walk(path, extensions, excluded):
        _add(match)
      continue

    try:
      entries = sorted(path.iterdir())
    except OSError as e:
      raise UnreadableFileError(str(path), f"reading directory: {e}") from e
    for entry in entries:
      if entry.is_file() and entry.suffix in extensions:
        _add(entry)

  return files


def _walk(root: Path, extensions: Set[str], excluded: Set[str]) -> List[Path]:
  found: List[Path] = []

  def _on_error(err: OSError) -> None:
    raise UnreadableFileError(str(err.filename or root), f"walking directory: {err.strerror}") from err

  for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
    dirnames[:] = sorted(d for d in dirnames if d not in excluded)
    for name in sorted(filenames):
      if Path(name).suffix in extensions:
        found.append(Path(dirpath) / name)
  return found
