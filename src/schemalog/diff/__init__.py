"""
Diff input package for schemalog.

This package provides:
- The classification of objects into missing, unexpected and changed
- The output control shared by generators during a run
- Loading of YAML diff documents
"""

from .loader import DiffDocument, DiffDocumentLoader, Snapshot, load_diff
from .output import DiffOutputControl
from .result import Difference, DiffKind, DiffResult, ObjectDifferences

__all__ = [
    "Difference",
    "DiffDocument",
    "DiffDocumentLoader",
    "DiffKind",
    "DiffOutputControl",
    "DiffResult",
    "ObjectDifferences",
    "Snapshot",
    "load_diff",
]
