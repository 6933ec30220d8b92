"""Core components of treels.

This package contains the entry model, the ordering policy, the walker
adapter, the selection and aggregation pass and the traversal controller.
"""

from .node import Entry, EntryInfo, ROOT_LEVEL
from .compare import MasterComparator, select_comparator, sort_entries
from .collector import DisplayCollector, DisplayDescriptor, EntryAnnotation
from .adapter import TreeWalkerAdapter
from .traverser import TraversalController, RunState

__all__ = [
    "Entry",
    "EntryInfo",
    "ROOT_LEVEL",
    "MasterComparator",
    "select_comparator",
    "sort_entries",
    "DisplayCollector",
    "DisplayDescriptor",
    "EntryAnnotation",
    "TreeWalkerAdapter",
    "TraversalController",
    "RunState",
]
