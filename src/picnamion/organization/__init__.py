"""Rename planning and execution."""

from .executor import RenameExecutor
from .models import AmbiguityReport, RenameEvent, RenameOperation, RenameOption
from .planner import RenamePlanner

__all__ = [
    "AmbiguityReport",
    "RenameEvent",
    "RenameExecutor",
    "RenameOperation",
    "RenameOption",
    "RenamePlanner",
]
