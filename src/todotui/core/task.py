"""todo.txt task record and line codec - no I/O."""

import re
from dataclasses import dataclass, field
from datetime import date

PRIORITY_RE = re.compile(r"^\(([A-Z])\)$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
KEY_VALUE_RE = re.compile(r"^([^\s:+@#]+):([^\s:/]\S*)$")


class TodoError(Exception):
    """Base class for todotui errors."""


class ParseError(TodoError, ValueError):
    """A line could not be parsed as a todo.txt task."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line


def _parse_date(value: str, line: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ParseError(f"Invalid date '{value}'", line) from None


def _unique(items: list[str]) -> list[str]:
    seen: list[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


@dataclass
class Task:
    """A single todo.txt task."""

    subject: str
    priority: str | None = None
    create_date: date | None = None
    finish_date: date | None = None
    finished: bool = False
    due_date: date | None = None
    threshold_date: date | None = None
    projects: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    hashtags: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, line: str) -> "Task":
        """
        Parse one todo.txt line.

        Grammar: ``[x [finish-date]] [(P)] [create-date] subject`` where the
        subject may carry ``+project``, ``@context``, ``#hashtag`` and
        ``key:value`` tokens. ``x (P) finish create`` is accepted too.
        """
        tokens = line.split()
        if not tokens:
            raise ParseError("Empty task", line)

        i = 0
        finished = tokens[0] == "x"
        if finished:
            i += 1

        priority = None
        if i < len(tokens) and (m := PRIORITY_RE.match(tokens[i])):
            priority = m.group(1)
            i += 1

        finish_date = None
        create_date = None
        if finished and i < len(tokens) and DATE_RE.match(tokens[i]):
            finish_date = _parse_date(tokens[i], line)
            i += 1
        if i < len(tokens) and DATE_RE.match(tokens[i]):
            create_date = _parse_date(tokens[i], line)
            i += 1

        words = tokens[i:]
        if not words:
            raise ParseError("Task has no subject", line)

        task = cls(
            subject=" ".join(words),
            priority=priority,
            create_date=create_date,
            finish_date=finish_date,
            finished=finished,
        )
        projects, contexts, hashtags = [], [], []
        for word in words:
            if len(word) > 1 and word[0] == "+":
                projects.append(word[1:])
            elif len(word) > 1 and word[0] == "@":
                contexts.append(word[1:])
            elif len(word) > 1 and word[0] == "#":
                hashtags.append(word[1:])
            elif m := KEY_VALUE_RE.match(word):
                key, value = m.groups()
                # Non-date due:/t: values (due:tomorrow) stay plain tags
                if key == "due" and DATE_RE.match(value):
                    task.due_date = _parse_date(value, line)
                elif key == "t" and DATE_RE.match(value):
                    task.threshold_date = _parse_date(value, line)
                else:
                    task.tags[key] = value

        task.projects = _unique(projects)
        task.contexts = _unique(contexts)
        task.hashtags = _unique(hashtags)
        return task

    def to_line(self, finished: bool | None = None) -> str:
        """Serialize back to a todo.txt line.

        ``finished`` overrides the completion marker, used when a task was
        moved between lists without being re-parsed.
        """
        finished = self.finished if finished is None else finished
        parts = []
        if finished:
            parts.append("x")
        if self.priority:
            parts.append(f"({self.priority})")
        if finished and self.finish_date:
            parts.append(self.finish_date.isoformat())
        if self.create_date:
            parts.append(self.create_date.isoformat())
        parts.append(self.subject)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_line()
