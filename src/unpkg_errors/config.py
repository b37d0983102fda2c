"""
Runtime Configuration Store.

Settings are read from ``[tool.unpkg_errors]`` in the nearest ``pyproject.toml``
(searching the start directory and its parents) and overridden by explicit
arguments, usually coming from the CLI.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from unpkg_errors.enums import FailurePolicy
from unpkg_errors.exceptions import ConfigError

logger = logging.getLogger(__name__)

LEGACY_PACKAGE = "github.com/pkg/errors"
TOOL_SECTION = "unpkg_errors"


class RuntimeConfig(BaseModel):
  """
  Configuration container for the rewrite engine and the file discovery shell.
  """

  legacy_package: str = Field(LEGACY_PACKAGE, description="Import path of the package being migrated away from.")
  failure_policy: FailurePolicy = Field(
    FailurePolicy.PARTIAL,
    description="Output for files with unfixable call sites: 'partial' keeps fixed call sites, 'unchanged' keeps the file as is.",
  )
  extensions: List[str] = Field(default_factory=lambda: [".go"], description="File extensions collected by discovery.")
  exclude_dirs: List[str] = Field(
    default_factory=lambda: ["vendor", "testdata", ".git"],
    description="Directory names skipped when recursing.",
  )

  @field_validator("legacy_package")
  @classmethod
  def validate_legacy_package(cls, v: str) -> str:
    """
    Strips quotes and whitespace from the import path.

    Raises:
        ValueError: If the path is empty.
    """
    v_clean = v.strip().strip('"')
    if not v_clean:
      raise ValueError("legacy_package must not be empty")
    return v_clean

  @field_validator("extensions")
  @classmethod
  def validate_extensions(cls, v: List[str]) -> List[str]:
    """Normalizes extensions to the ``.ext`` form."""
    return [ext if ext.startswith(".") else f".{ext}" for ext in (e.strip() for e in v) if ext]

  @classmethod
  def load(
    cls,
    legacy_package: Optional[str] = None,
    failure_policy: Optional[str] = None,
    extensions: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        legacy_package (Optional[str]): Override for the legacy import path.
        failure_policy (Optional[str]): Override for the failure policy ('partial' or 'unchanged').
        extensions (Optional[List[str]]): Override for discovered file extensions.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.

    Raises:
        ConfigError: If a setting has an invalid value.
    """
    toml_config, toml_dir = _load_toml_settings(search_path or Path.cwd())
    if toml_dir:
      logger.debug("Loaded [tool.%s] from %s", TOOL_SECTION, toml_dir / "pyproject.toml")

    values: Dict[str, Any] = dict(toml_config)
    overrides = {
      "legacy_package": legacy_package,
      "failure_policy": failure_policy,
      "extensions": extensions,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
      return cls(**values)
    except ValidationError as e:
      raise ConfigError(f"Invalid configuration: {e}") from e


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml' and extracts the tool section.

  Args:
      start_path (Path): Directory (or file) to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()
  if current.is_file():
    current = current.parent

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", toml_path, e)
        return {}, None

      section = data.get("tool", {}).get(TOOL_SECTION, {})
      if not isinstance(section, dict):
        raise ConfigError(f"[tool.{TOOL_SECTION}] in {toml_path} must be a table")
      return section, parent

  return {}, None
