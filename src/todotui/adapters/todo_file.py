"""File-based todo.txt task source adapter."""

import logging
from pathlib import Path
from typing import Sequence

from todotui.core.task import ParseError, Task

logger = logging.getLogger(__name__)


class FileTaskSource:
    """
    todo.txt file storage.

    Implements TaskSource protocol. Pending tasks live in ``todo.txt``;
    finished tasks go to ``done.txt`` when a done path is configured,
    otherwise they stay in ``todo.txt`` after the pending ones.

    Lines that fail to parse are kept from the last load and written back
    unchanged at the end of the file they came from.
    """

    def __init__(self, todo_path: Path | str, done_path: Path | str | None = None):
        self.todo_path = Path(todo_path).expanduser()
        self.done_path = Path(done_path).expanduser() if done_path else None
        self.unparsed: dict[Path, list[str]] = {}

    def _read(self, path: Path) -> list[Task]:
        self.unparsed[path] = []
        if not path.exists():
            return []
        tasks = []
        for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            if not line.strip():
                continue
            try:
                tasks.append(Task.parse(line))
            except ParseError as e:
                logger.warning(f"Keeping unparsed line {path.name}:{lineno} as is: {e}")
                self.unparsed[path].append(line)
        return tasks

    def load(self) -> list[Task]:
        """Load tasks from todo.txt and, if configured, done.txt."""
        tasks = self._read(self.todo_path)
        if self.done_path:
            tasks.extend(self._read(self.done_path))
        logger.info(f"Loaded {len(tasks)} tasks from {self.todo_path}")
        return tasks

    def _write(self, path: Path, lines: list[str]) -> None:
        lines = lines + self.unparsed.get(path, [])
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")

    def save(self, pending: Sequence[Task], done: Sequence[Task]) -> None:
        """Write pending and done tasks back, marking list membership."""
        pending_lines = [task.to_line(finished=False) for task in pending]
        done_lines = [task.to_line(finished=True) for task in done]
        if self.done_path:
            self._write(self.todo_path, pending_lines)
            self._write(self.done_path, done_lines)
        else:
            self._write(self.todo_path, pending_lines + done_lines)
        logger.info(f"Saved {len(pending)} pending and {len(done)} done tasks")
