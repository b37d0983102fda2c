from .audit import handle_audit
from .convert import handle_convert, _print_batch_summary

__all__ = [
  "_print_batch_summary",
  "handle_audit",
  "handle_convert",
]
