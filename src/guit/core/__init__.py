# src/guit/core/__init__.py
"""Public facade for guit.core: re-export the state building blocks from CamelCase modules.

Keeps Java-like file names (SelectableList.py, PaneRegistry.py, ...),
but provides flat imports for convenience and stability. ApplicationState
and Guit are imported from their own modules, since they depend on
guit.integrations, which itself imports guit.core.Records.
"""

# Re-export classes/symbols from CamelCase modules
from .PaneRegistry import Pane, PaneKind, PaneRegistry  # noqa: F401
from .Records import BranchKind, BranchRecord, CommitRecord, StatusRecord  # noqa: F401
from .SelectableList import SelectableList  # noqa: F401


__all__ = [
    "Pane",
    "PaneKind",
    "PaneRegistry",
    "BranchKind",
    "BranchRecord",
    "CommitRecord",
    "StatusRecord",
    "SelectableList",
]
