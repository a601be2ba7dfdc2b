"""Adapters - I/O implementations of ports."""

from .todo_file import FileTaskSource

__all__ = [
    "FileTaskSource",
]
