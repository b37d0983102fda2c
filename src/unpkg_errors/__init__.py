"""
unpkg-errors Package.

A source-to-source rewriter that migrates Go code from
``github.com/pkg/errors`` to the standard library ``errors`` and ``fmt``
packages.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import unpkg_errors
    code = unpkg_errors.convert(go_source)

Advanced Usage
^^^^^^^^^^^^^^

.. code-block:: python

    from unpkg_errors import RuntimeConfig, UnitProcessor

    processor = UnitProcessor(RuntimeConfig(failure_policy="unchanged"))
    res = processor.process(go_source, "main.go")

    if res.has_failures:
        print(res.diagnostics.failures)
"""

from typing import Optional

from unpkg_errors.config import RuntimeConfig
from unpkg_errors.core.conversion_result import ConversionResult
from unpkg_errors.core.diagnostics import RunDiagnostics
from unpkg_errors.core.processor import UnitProcessor, process_source
from unpkg_errors.enums import FailurePolicy
from unpkg_errors.exceptions import ConfigError, GoSyntaxError, UnitError, UnpkgErrorsError, UnreadableFileError

__version__ = "0.1.0"


def convert(code: str, filename: str = "<unit>", config: Optional[RuntimeConfig] = None) -> str:
  """
  Rewrites one Go source string and returns the new text.

  Args:
      code: Go source code.
      filename: Name used in log lines and errors.
      config: Runtime settings. Defaults are used if None.

  Returns:
      str: The migrated source code.

  Raises:
      GoSyntaxError: If ``code`` is not valid Go.
  """
  return process_source(code, filename, config).code


__all__ = [
  "ConfigError",
  "ConversionResult",
  "FailurePolicy",
  "GoSyntaxError",
  "RunDiagnostics",
  "RuntimeConfig",
  "UnitError",
  "UnitProcessor",
  "UnpkgErrorsError",
  "UnreadableFileError",
  "convert",
  "process_source",
  "__version__",
]
