"""Task source interface."""

from typing import Protocol, Sequence

from todotui.core.task import Task


class TaskSource(Protocol):
    """Interface for loading and persisting task lists."""

    def load(self) -> list[Task]:
        """Load all tasks, pending and finished."""
        ...

    def save(self, pending: Sequence[Task], done: Sequence[Task]) -> None:
        """Persist both task lists."""
        ...
