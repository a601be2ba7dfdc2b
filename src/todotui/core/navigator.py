"""Windowed cursor over a list that is longer than its viewport."""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class NavEvent(Enum):
    """Navigation input a list view understands."""

    DOWN = "down"
    UP = "up"
    FIRST = "first"
    LAST = "last"
    NONE = "none"


class ListNavigator:
    """
    Cursor over a list of ``length`` items shown ``window_size`` at a time.

    ``selection`` is the cursor row inside the window and ``window_start``
    the list index of the window's first row. Once the list is longer than
    the window, the cursor parks ``shift`` rows from the window edge and
    the window scrolls underneath it until the end of the list is reached.

    ``length`` is owned by the caller and must be updated whenever the
    list it describes changes size.

    A zero ``window_size`` means nothing is visible yet: the cursor stays
    on the first item until the viewport is sized.
    """

    def __init__(self, window_size: int = 0, shift: int = 0, length: int = 0):
        if shift < 0:
            raise ValueError(f"shift must be non-negative, got {shift}")
        self.shift = shift
        self.window_size = 0
        self.length = length
        self.selection = 0
        self.window_start = 0
        self.set_size(window_size)

    def set_size(self, window_size: int) -> None:
        """Set the viewport capacity. Cursor position is left to the caller."""
        if window_size < 0:
            raise ValueError(f"window size must be non-negative, got {window_size}")
        if window_size and self.shift >= window_size:
            raise ValueError(f"shift {self.shift} must be smaller than window size {window_size}")
        self.window_size = window_size

    def absolute_index(self) -> int:
        return self.selection + self.window_start

    def down(self) -> None:
        if not self.window_size:
            logger.debug(f"List down ignored: no window, len={self.length}")
            return
        act = self.selection
        if self.length <= self.window_size:
            if self.length > act + 1:
                self.selection = act + 1
        elif self.window_size <= act + 1 + self.shift:
            if self.window_start + self.window_size < self.length:
                self.window_start += 1
            elif self.window_size > act + 1:
                self.selection = act + 1
        else:
            self.selection = act + 1
        logger.debug(
            f"List down: selection={self.selection} start={self.window_start} "
            f"size={self.window_size} len={self.length} shift={self.shift}"
        )

    def up(self) -> None:
        act = self.selection
        if act <= self.shift:
            if self.window_start > 0:
                self.window_start -= 1
            elif act > 0:
                self.selection = act - 1
        else:
            self.selection = act - 1
        logger.debug(f"List up: selection={self.selection} start={self.window_start}")

    def first(self) -> None:
        self.selection = 0
        self.window_start = 0

    def last(self) -> None:
        if self.length == 0 or not self.window_size:
            self.first()
        elif self.length <= self.window_size:
            self.window_start = 0
            self.selection = self.length - 1
        else:
            self.window_start = self.length - self.window_size
            self.selection = self.window_size - 1

    def next(self) -> tuple[int, int] | None:
        """Step down, returning (old, new) absolute indices, or None at the end."""
        if not self.window_size or self.absolute_index() + 1 >= self.length:
            return None
        old = self.absolute_index()
        self.down()
        return old, self.absolute_index()

    def prev(self) -> tuple[int, int] | None:
        """Step up, returning (old, new) absolute indices.

        Returns None whenever the cursor sits on the window's first row,
        even if the window itself could still scroll up.
        """
        if self.selection == 0:
            return None
        old = self.absolute_index()
        self.up()
        return old, self.absolute_index()

    def visible_range(self) -> range:
        return range(self.window_start, self.window_start + self.window_size)

    def clamp(self) -> None:
        """Pull the cursor back inside the list after it shrank."""
        if self.length == 0:
            self.first()
            return
        self.selection = min(self.selection, max(0, self.window_size - 1))
        self.window_start = min(self.window_start, max(0, self.length - self.window_size))
        if self.absolute_index() >= self.length:
            self.selection = self.length - 1 - self.window_start

    def handle_event(self, event: NavEvent) -> bool:
        """Apply a navigation event. Returns False if it is not one."""
        match event:
            case NavEvent.DOWN:
                self.down()
            case NavEvent.UP:
                self.up()
            case NavEvent.FIRST:
                self.first()
            case NavEvent.LAST:
                self.last()
            case _:
                return False
        return True
