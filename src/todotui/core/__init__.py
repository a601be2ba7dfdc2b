"""Functional core - pure business logic with no I/O."""

from .task import Task, TodoError, ParseError
from .store import (
    CategoryEntry,
    CategoryIndex,
    Dimension,
    TaskIndexError,
    TaskListKind,
    TaskStore,
)
from .navigator import ListNavigator, NavEvent

__all__ = [
    # Tasks
    "Task",
    "TodoError",
    "ParseError",
    # Store
    "TaskStore",
    "TaskListKind",
    "TaskIndexError",
    "Dimension",
    "CategoryEntry",
    "CategoryIndex",
    # Navigation
    "ListNavigator",
    "NavEvent",
]
