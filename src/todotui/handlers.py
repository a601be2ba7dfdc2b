"""Input event routing between a list view, its navigator and the store.

Every handler receives the store explicitly; a query of the filtered view
and the index-based mutation that follows it happen inside one call.
"""

import logging
from dataclasses import dataclass

from .core.navigator import ListNavigator, NavEvent
from .core.store import Dimension, TaskIndexError, TaskListKind, TaskStore
from .core.task import TodoError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Down:
    pass


@dataclass(frozen=True)
class Up:
    pass


@dataclass(frozen=True)
class First:
    pass


@dataclass(frozen=True)
class Last:
    pass


@dataclass(frozen=True)
class ToggleFilter:
    dimension: Dimension
    name: str


@dataclass(frozen=True)
class Remove:
    pass


@dataclass(frozen=True)
class Swap:
    """Move the selected task one place down (+1) or up (-1)."""

    offset: int


@dataclass(frozen=True)
class Finish:
    pass


@dataclass(frozen=True)
class MoveTask:
    """Move the selected task to the other list."""


Event = Down | Up | First | Last | ToggleFilter | Remove | Swap | Finish | MoveTask

NAV_EVENTS = {Down: NavEvent.DOWN, Up: NavEvent.UP, First: NavEvent.FIRST, Last: NavEvent.LAST}


def other_list(kind: TaskListKind) -> TaskListKind:
    match kind:
        case TaskListKind.PENDING:
            return TaskListKind.DONE
        case TaskListKind.DONE:
            return TaskListKind.PENDING


def sync_length(store: TaskStore, navigator: ListNavigator, kind: TaskListKind) -> None:
    """Point the navigator at the current filtered view's length."""
    navigator.length = len(store.get_filtered(kind))
    navigator.clamp()


def selected_index(store: TaskStore, navigator: ListNavigator, kind: TaskListKind) -> int | None:
    """List index of the task under the cursor, or None if the view is empty there."""
    view = store.get_filtered(kind)
    position = navigator.absolute_index()
    if position >= len(view):
        return None
    return view[position][0]


def _require_selected(store: TaskStore, navigator: ListNavigator, kind: TaskListKind) -> int:
    index = selected_index(store, navigator, kind)
    if index is None:
        raise TaskIndexError(kind, navigator.absolute_index(), len(store.get_filtered(kind)))
    return index


def _swap(store: TaskStore, navigator: ListNavigator, kind: TaskListKind, offset: int) -> bool:
    view = store.get_filtered(kind)
    match offset:
        case 1:
            step = navigator.next()
        case -1:
            step = navigator.prev()
        case _:
            raise ValueError(f"Swap offset must be 1 or -1, got {offset}")
    if step is None:
        return False
    old, new = step
    store.swap(kind, view[old][0], view[new][0])
    return True


def handle(store: TaskStore, navigator: ListNavigator, kind: TaskListKind, event: Event) -> bool:
    """
    Apply one input event to the list view of ``kind``.

    Returns True if the event changed anything. Strict mutations raise
    TaskIndexError when the cursor is past the end of the view.
    """
    logger.debug(f"Event {event!r} on {kind.value} list")
    match event:
        case Down() | Up() | First() | Last():
            return navigator.handle_event(NAV_EVENTS[type(event)])
        case ToggleFilter(dimension=dimension, name=name):
            store.toggle_filter(dimension, name)
            navigator.first()
            sync_length(store, navigator, kind)
            return True
        case Remove():
            store.remove(kind, _require_selected(store, navigator, kind))
        case Swap(offset=offset):
            return _swap(store, navigator, kind, offset)
        case Finish():
            if kind is not TaskListKind.PENDING:
                raise TodoError("Only pending tasks can be finished")
            store.finish_task(_require_selected(store, navigator, kind))
        case MoveTask():
            index = selected_index(store, navigator, kind)
            if index is None or store.move_task(kind, other_list(kind), index) is None:
                return False
        case _:
            return False
    sync_length(store, navigator, kind)
    return True
