"""
Core Package.

Contains the rewrite engine:
- Node model and tree-sitter parser
- Call classification and the Wrap transformer
- Import reconciliation and diagnostics
- The Unit Processor and file discovery
"""
