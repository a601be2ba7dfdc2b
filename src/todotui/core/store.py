"""In-memory task store with tag filtering - no I/O."""

import logging
from datetime import date
from enum import Enum
from typing import Iterable, NamedTuple

from .task import ParseError, Task, TodoError

logger = logging.getLogger(__name__)


class Dimension(Enum):
    """Tag category a task can be filtered on."""

    PROJECT = "project"
    CONTEXT = "context"
    HASHTAG = "hashtag"

    def values(self, task: Task) -> list[str]:
        """The task's tags for this dimension."""
        match self:
            case Dimension.PROJECT:
                return task.projects
            case Dimension.CONTEXT:
                return task.contexts
            case Dimension.HASHTAG:
                return task.hashtags

    @property
    def sigil(self) -> str:
        match self:
            case Dimension.PROJECT:
                return "+"
            case Dimension.CONTEXT:
                return "@"
            case Dimension.HASHTAG:
                return "#"


class TaskListKind(Enum):
    """Which of the two task lists an operation addresses."""

    PENDING = "pending"
    DONE = "done"


class TaskIndexError(TodoError, IndexError):
    """Index outside of a task list."""

    def __init__(self, kind: TaskListKind, index: int, length: int):
        super().__init__(f"No {kind.value} task at index {index} (list has {length})")
        self.kind = kind
        self.index = index
        self.length = length


class CategoryEntry(NamedTuple):
    """A tag name and whether it is an active filter."""

    name: str
    selected: bool

    def __str__(self) -> str:
        return f"{'*' if self.selected else ' '} {self.name}"


class CategoryIndex(list[CategoryEntry]):
    """Sorted, deduplicated tag names of one dimension."""

    def names(self) -> list[str]:
        return [entry.name for entry in self]

    def selected(self) -> list[str]:
        return [entry.name for entry in self if entry.selected]

    def get_name(self, index: int) -> str:
        return self[index].name


class TaskStore:
    """
    Owns the pending and done task lists and the active tag filters.

    List order is the user's manual ranking and is never sorted here.
    Filtered views keep the original list index of each task so callers
    can mutate through a filtered view.
    """

    def __init__(self, include_done: bool = False):
        self.pending: list[Task] = []
        self.done: list[Task] = []
        self.include_done = include_done
        self._filters: dict[Dimension, set[str]] = {d: set() for d in Dimension}

    def _list(self, kind: TaskListKind) -> list[Task]:
        match kind:
            case TaskListKind.PENDING:
                return self.pending
            case TaskListKind.DONE:
                return self.done

    def _check_index(self, kind: TaskListKind, index: int) -> None:
        length = len(self._list(kind))
        if not 0 <= index < length:
            raise TaskIndexError(kind, index, length)

    def _scanned_lists(self) -> list[list[Task]]:
        if self.include_done:
            return [self.pending, self.done]
        return [self.pending]

    # ============== Mutation ==============

    def add(self, task: Task) -> None:
        """Append to done if the task is finished, otherwise to pending."""
        if task.finished:
            self.done.append(task)
        else:
            self.pending.append(task)

    def add_all(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            self.add(task)

    def new_task(self, text: str) -> Task:
        """Parse a line and add it. Raises ParseError, leaving the store unchanged."""
        try:
            task = Task.parse(text)
        except ParseError:
            logger.info(f"Rejected new task {text!r}")
            raise
        self.add(task)
        logger.info(f"Added task: {task.subject}")
        return task

    def remove(self, kind: TaskListKind, index: int) -> Task:
        """Remove and return the task at index. Raises TaskIndexError."""
        self._check_index(kind, index)
        task = self._list(kind).pop(index)
        logger.info(f"Removed {kind.value} task {index}: {task.subject}")
        return task

    def move_task(
        self,
        source: TaskListKind,
        target: TaskListKind,
        index: int,
        as_of: date | None = None,
    ) -> Task | None:
        """
        Move the task at index to the end of the target list.

        A task moved to done is marked finished on ``as_of`` (today by
        default); one moved back to pending loses its completion date.
        An out-of-range index is ignored and returns None.
        """
        from_list = self._list(source)
        if index < 0 or index >= len(from_list):
            logger.debug(f"Ignoring move of {source.value} task {index} (list has {len(from_list)})")
            return None
        task = from_list.pop(index)
        match target:
            case TaskListKind.DONE:
                task.finished = True
                task.finish_date = task.finish_date or as_of or date.today()
            case TaskListKind.PENDING:
                task.finished = False
                task.finish_date = None
        self._list(target).append(task)
        logger.info(f"Moved task {index} from {source.value} to {target.value}")
        return task

    def move_pending_task(self, index: int, as_of: date | None = None) -> Task | None:
        return self.move_task(TaskListKind.PENDING, TaskListKind.DONE, index, as_of)

    def move_done_task(self, index: int) -> Task | None:
        return self.move_task(TaskListKind.DONE, TaskListKind.PENDING, index)

    def finish_task(self, index: int, as_of: date | None = None) -> Task:
        """Move a pending task to done. Raises TaskIndexError."""
        self._check_index(TaskListKind.PENDING, index)
        return self.move_pending_task(index, as_of)

    def swap(self, kind: TaskListKind, i: int, j: int) -> None:
        """Swap two tasks in one list. Raises TaskIndexError."""
        self._check_index(kind, i)
        self._check_index(kind, j)
        tasks = self._list(kind)
        tasks[i], tasks[j] = tasks[j], tasks[i]
        logger.info(f"Swapped {kind.value} tasks {i} and {j}")

    # ============== Filters ==============

    def toggle_filter(self, dimension: Dimension, name: str) -> bool:
        """Add name to the dimension's filters if absent, remove it if present.

        Returns True when the filter is active afterwards.
        """
        filters = self._filters[dimension]
        if name in filters:
            filters.remove(name)
            active = False
        else:
            filters.add(name)
            active = True
        logger.info(f"Filter {dimension.sigil}{name} {'on' if active else 'off'}")
        return active

    def filters(self, dimension: Dimension) -> frozenset[str]:
        return frozenset(self._filters[dimension])

    def clear_filters(self) -> None:
        for filters in self._filters.values():
            filters.clear()

    def matches(self, task: Task) -> bool:
        """True if the task carries every active filter of every dimension."""
        return all(
            filters.issubset(dimension.values(task))
            for dimension, filters in self._filters.items()
            if filters
        )

    # ============== Queries ==============

    def tasks(self, kind: TaskListKind) -> tuple[Task, ...]:
        return tuple(self._list(kind))

    def get_all(self, kind: TaskListKind) -> list[tuple[int, Task]]:
        return list(enumerate(self._list(kind)))

    def get_filtered(self, kind: TaskListKind) -> list[tuple[int, Task]]:
        """Tasks passing the active filters, paired with their list index."""
        return [(i, task) for i, task in enumerate(self._list(kind)) if self.matches(task)]

    def get_categories(self, dimension: Dimension) -> CategoryIndex:
        """Distinct tag names of a dimension, sorted, flagged when filtered on."""
        names = {
            name
            for tasks in self._scanned_lists()
            for task in tasks
            for name in dimension.values(task)
        }
        selected = self._filters[dimension]
        return CategoryIndex(CategoryEntry(name, name in selected) for name in sorted(names))

    def get_tasks_with_tag(self, dimension: Dimension, name: str) -> list[Task]:
        """Every task (pending, plus done if included) tagged with name."""
        return [
            task
            for tasks in self._scanned_lists()
            for task in tasks
            if name in dimension.values(task)
        ]
