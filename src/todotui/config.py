"""Configuration management for todotui."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.task import TodoError

logger = logging.getLogger(__name__)

TODOTUI_HOME = Path(os.environ.get("TODOTUI_HOME", Path.home() / ".config" / "todotui"))
CONFIG_FILE = TODOTUI_HOME / "todotui.conf"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(TodoError):
    """Invalid configuration value."""


@dataclass
class Config:
    """todotui configuration."""

    todo_path: str = str(Path.home() / "todo.txt")
    done_path: str = ""
    # Rows kept between the cursor and the list edge before scrolling
    list_shift: int = 4
    # Also scan done tasks for categories and tag drill-down
    include_done: bool = False
    # 0 = derive from terminal height
    window_size: int = 0
    log_file: str = ""
    log_level: str = "WARNING"


def _parse_int(key: str, value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"{key.upper()} must be an integer, got '{value}'") from None
    if number < 0:
        raise ConfigError(f"{key.upper()} must not be negative, got {number}")
    return number


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"{key.upper()} must be a boolean, got '{value}'")


def _strip_value(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from todotui.conf, then apply environment overrides."""
    config = Config()
    config_file = Path(path).expanduser() if path else CONFIG_FILE

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _strip_value(value.strip())

            match key:
                case "todo_path":
                    config.todo_path = value
                case "done_path":
                    config.done_path = value
                case "list_shift":
                    config.list_shift = _parse_int(key, value)
                case "include_done" | "use_done":
                    config.include_done = _parse_bool(key, value)
                case "window_size":
                    config.window_size = _parse_int(key, value)
                case "log_file":
                    config.log_file = value
                case "log_level":
                    config.log_level = value.upper()
                case _:
                    logger.warning(f"Unknown config key '{key}' in {config_file}")

    if todo_path := os.environ.get("TODOTUI_TODO_PATH"):
        config.todo_path = todo_path
    if done_path := os.environ.get("TODOTUI_DONE_PATH"):
        config.done_path = done_path

    if config.window_size and config.list_shift >= config.window_size:
        raise ConfigError(
            f"LIST_SHIFT ({config.list_shift}) must be smaller than WINDOW_SIZE ({config.window_size})"
        )

    return config
