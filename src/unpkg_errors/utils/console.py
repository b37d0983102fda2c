"""
Central Logging and Console Utilities.

This module unifies the command line output using the Python standard
`logging` library, backed by `rich` for formatting.

1.  **Standard Logging Integration**: ``setup_logging`` attaches a
    ``RichHandler`` to the root logger. Library modules only ever call
    ``logging.getLogger(__name__)``; handlers are installed by the CLI.
2.  **Console Proxy**: the module level ``console`` forwards to a swappable
    Rich Console, so tests can capture output with ``set_console``.

Attributes:
    console (_ConsoleProxy): A stable reference to the active Rich Console.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Between INFO and WARNING.
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  All printing operations are forwarded to the backend. When the backend
  changes and logging has been set up, the handler is re-bound so log records
  follow the new destination.

  Attributes:
      _backend (Console): The active Rich Console instance.
      _level (Optional[int]): Root level chosen by ``setup_logging``, None until then.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME, stderr=True)
    self._level: Optional[int] = None

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    if self._level is not None:
      self.configure_logging(self._level)

  @property
  def backend(self) -> Console:
    return self._backend

  def configure_logging(self, level: int) -> None:
    """
    Points the root logger at the current backend console.

    Args:
        level (int): Root logger level.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=False,
      rich_tracebacks=True,
    )
    root_logger.setLevel(level)
    root_logger.addHandler(rich_handler)
    self._level = level

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def setup_logging(level: int = logging.INFO) -> None:
  """
  Installs the rich log handler on the root logger.

  Args:
      level (int): Root logger level, e.g. ``logging.DEBUG`` for ``--debug``.
  """
  console.configure_logging(level)


def set_console(new_console: Console) -> None:
  """
  Injects a specific console instance (e.g. one recording to a buffer).

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def log_info(msg: str) -> None:
  """
  Logs an informational message via standard logging.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logging.info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  logging.log(SUCCESS_LEVEL_NUM, msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  logging.warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  logging.error(msg, extra={"markup": True})
