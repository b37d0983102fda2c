"""
Import Reconciler.

Applies the import changes a fully fixed file needs: the legacy import is
removed and every standard library package the rewritten call sites rely on
is added, under the name the call sites were rewritten to use. A package that
is already imported under that name is left as is. The reconciler is only
invoked when the diagnostics verdict allows it.
"""

import logging
from typing import Iterable, List, Optional

from unpkg_errors.core.import_set import ImportSet, PackageNames
from unpkg_errors.core.tracer import TraceLogger

logger = logging.getLogger(__name__)


class ImportReconciler:
  """
  Edits the :class:`ImportSet` of one file.
  """

  def __init__(self, imports: ImportSet, tracer: Optional[TraceLogger] = None):
    self.imports = imports
    self.tracer = tracer or TraceLogger()

  def reconcile(self, legacy_path: str, required: Iterable[str], names: Optional[PackageNames] = None) -> List[str]:
    """
    Removes ``legacy_path`` and adds the ``required`` imports.

    Args:
        legacy_path (str): Import path of the legacy package.
        required (Iterable[str]): Standard library paths needed by the fixes.
        names (PackageNames, optional): Qualifiers used by the rewritten call
            sites; a qualifier other than the default name becomes an alias.

    Returns:
        List[str]: Human readable actions, e.g. ``["-github.com/pkg/errors", "+fmt"]``.
    """
    actions: List[str] = []
    filename = self.imports.tree.filename

    if self.imports.remove(legacy_path):
      logger.debug("%s: removed import %s", filename, legacy_path)
      self.tracer.log_import("removed", legacy_path)
      actions.append(f"-{legacy_path}")

    for path in sorted(set(required)):
      alias = names.alias_for(path) if names else None
      if self.imports.add(path, alias):
        label = f"{alias} {path}" if alias else path
        logger.debug("%s: added import %s", filename, label)
        self.tracer.log_import("added", label)
        actions.append(f"+{path}")

    self.imports.apply()
    return actions
