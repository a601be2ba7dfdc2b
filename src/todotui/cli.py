"""todotui CLI - todo.txt task manager."""

import json
import logging
import shutil
import sys

import click

from .adapters.todo_file import FileTaskSource
from .config import Config, load_config
from .core.navigator import ListNavigator, NavEvent
from .core.store import CategoryIndex, Dimension, TaskListKind, TaskStore
from .core.task import Task, TodoError
from .ports.task_source import TaskSource
from .handlers import (
    Down,
    Finish,
    First,
    Last,
    MoveTask,
    Remove,
    Swap,
    ToggleFilter,
    Up,
    handle,
    sync_length,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DIMENSION_CHOICE = click.Choice([d.value for d in Dimension])

BROWSE_KEYS = {
    "j": Down(),
    "k": Up(),
    "g": First(),
    "G": Last(),
    "x": Remove(),
    "J": Swap(1),
    "K": Swap(-1),
    "m": MoveTask(),
}

PICKER_KEYS = {
    "j": NavEvent.DOWN,
    "k": NavEvent.UP,
    "g": NavEvent.FIRST,
    "G": NavEvent.LAST,
}

FILTER_KEYS = {
    "p": Dimension.PROJECT,
    "c": Dimension.CONTEXT,
    "t": Dimension.HASHTAG,
}


def _setup_logging(config: Config, debug: bool) -> None:
    """Log to LOG_FILE when configured, to stderr with --debug, otherwise leave defaults."""
    level = logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING)
    if config.log_file:
        logging.basicConfig(filename=config.log_file, format=LOG_FORMAT, level=level)
    elif debug:
        logging.basicConfig(format=LOG_FORMAT, level=level)


def _source(config: Config) -> TaskSource:
    return FileTaskSource(config.todo_path, config.done_path or None)


def _load(config: Config) -> tuple[TaskStore, TaskSource]:
    source = _source(config)
    store = TaskStore(include_done=config.include_done)
    store.add_all(source.load())
    return store, source


def _save(store: TaskStore, source: TaskSource) -> None:
    source.save(store.tasks(TaskListKind.PENDING), store.tasks(TaskListKind.DONE))


def _kind(done: bool) -> TaskListKind:
    return TaskListKind.DONE if done else TaskListKind.PENDING


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _task_json(index: int, task: Task) -> dict:
    return {
        "index": index,
        "subject": task.subject,
        "priority": task.priority,
        "finished": task.finished,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "projects": task.projects,
        "contexts": task.contexts,
        "hashtags": task.hashtags,
    }


@click.group()
@click.version_option(package_name="todotui")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to todotui.conf")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, config_path: str | None, debug: bool):
    """todotui - todo.txt task manager."""
    try:
        config = load_config(config_path)
    except TodoError as e:
        _fail(e)
    _setup_logging(config, debug)
    ctx.obj = config


@main.command("list")
@click.option("--done", is_flag=True, help="Show finished tasks")
@click.option("--all", "show_all", is_flag=True, help="Ignore filters")
@click.option("-p", "--project", multiple=True, help="Only tasks with this +project")
@click.option("-c", "--context", multiple=True, help="Only tasks with this @context")
@click.option("-t", "--hashtag", multiple=True, help="Only tasks with this #hashtag")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_tasks(config: Config, done: bool, show_all: bool, project, context, hashtag, as_json: bool):
    """List tasks with their index."""
    store, _ = _load(config)
    for dimension, names in (
        (Dimension.PROJECT, project),
        (Dimension.CONTEXT, context),
        (Dimension.HASHTAG, hashtag),
    ):
        for name in set(names):
            store.toggle_filter(dimension, name)

    kind = _kind(done)
    tasks = store.get_all(kind) if show_all else store.get_filtered(kind)

    if as_json:
        click.echo(json.dumps([_task_json(i, t) for i, t in tasks], indent=2))
        return

    if not tasks:
        click.echo(f"No {kind.value} tasks.")
        return

    for index, task in tasks:
        click.echo(f"{index:3} {task}")


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.pass_obj
def add(config: Config, text: tuple[str, ...]):
    """Add a task written in todo.txt syntax."""
    store, source = _load(config)
    try:
        task = store.new_task(" ".join(text))
    except TodoError as e:
        _fail(e)
    _save(store, source)
    click.echo(f"Added: {task}")


@main.command()
@click.argument("index", type=int)
@click.pass_obj
def done(config: Config, index: int):
    """Mark the pending task at INDEX as done."""
    store, source = _load(config)
    try:
        task = store.finish_task(index)
    except TodoError as e:
        _fail(e)
    _save(store, source)
    click.echo(f"Done: {task.subject}")


@main.command()
@click.argument("index", type=int)
@click.pass_obj
def undo(config: Config, index: int):
    """Move the finished task at INDEX back to pending."""
    store, source = _load(config)
    task = store.move_done_task(index)
    if task is None:
        click.echo(f"No done task at index {index}.")
        return
    _save(store, source)
    click.echo(f"Reopened: {task.subject}")


@main.command()
@click.argument("index", type=int)
@click.option("--done", is_flag=True, help="Remove from finished tasks")
@click.pass_obj
def rm(config: Config, index: int, done: bool):
    """Delete the task at INDEX."""
    store, source = _load(config)
    try:
        task = store.remove(_kind(done), index)
    except TodoError as e:
        _fail(e)
    _save(store, source)
    click.echo(f"Removed: {task.subject}")


@main.command()
@click.argument("first", type=int)
@click.argument("second", type=int)
@click.option("--done", is_flag=True, help="Reorder finished tasks")
@click.pass_obj
def swap(config: Config, first: int, second: int, done: bool):
    """Swap the positions of two tasks."""
    store, source = _load(config)
    try:
        store.swap(_kind(done), first, second)
    except TodoError as e:
        _fail(e)
    _save(store, source)
    click.echo(f"Swapped {first} and {second}.")


@main.command()
@click.argument("dimension", type=DIMENSION_CHOICE)
@click.option("--include-done", is_flag=True, help="Also scan finished tasks")
@click.option("-f", "--filter", "selected", multiple=True, help="Mark NAME as an active filter")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def categories(config: Config, dimension: str, include_done: bool, selected, as_json: bool):
    """List the distinct projects, contexts or hashtags.

    Names given with --filter are flagged with '*'.
    """
    store, _ = _load(config)
    if include_done:
        store.include_done = True
    dim = Dimension(dimension)
    for name in {name.lstrip("+@#") for name in selected}:
        store.toggle_filter(dim, name)
    index = store.get_categories(dim)

    if as_json:
        click.echo(json.dumps([entry._asdict() for entry in index], indent=2))
        return

    if not index:
        click.echo(f"No {dimension}s.")
        return

    for entry in index:
        marker = "*" if entry.selected else " "
        click.echo(f"{marker} {dim.sigil}{entry.name}")


@main.command()
@click.argument("dimension", type=DIMENSION_CHOICE)
@click.argument("name")
@click.pass_obj
def tagged(config: Config, dimension: str, name: str):
    """Show every task tagged with NAME."""
    store, _ = _load(config)
    tasks = store.get_tasks_with_tag(Dimension(dimension), name.lstrip("+@#"))
    if not tasks:
        click.echo(f"No tasks tagged {Dimension(dimension).sigil}{name.lstrip('+@#')}.")
        return
    for task in tasks:
        click.echo(str(task))


def _window_size(config: Config) -> int:
    if config.window_size:
        return config.window_size
    # Title and status lines
    return max(1, shutil.get_terminal_size().lines - 3)


def _render(store: TaskStore, navigator: ListNavigator, kind: TaskListKind, message: str) -> None:
    """Paint the visible window of the filtered list."""
    click.clear()
    view = store.get_filtered(kind)
    click.echo(click.style(f"{kind.value.capitalize()} ({len(view)})", bold=True))
    for position in navigator.visible_range():
        if position >= len(view):
            break
        _, task = view[position]
        if position == navigator.absolute_index():
            click.echo(click.style(f">> {task}", reverse=True))
        else:
            click.echo(f"   {task}")

    active = [
        f"{dimension.sigil}{name}"
        for dimension in Dimension
        for name in sorted(store.filters(dimension))
    ]
    status = "filters: " + (" ".join(active) if active else "none")
    click.echo(click.style(f"{status}  {message}", dim=True))


def _render_categories(index: CategoryIndex, navigator: ListNavigator, dimension: Dimension) -> None:
    """Paint the visible window of a category picker; '*' marks active filters."""
    click.clear()
    click.echo(click.style(f"{dimension.value.capitalize()}s ({len(index)})", bold=True))
    if not index:
        click.echo(f"   No {dimension.value}s.")
    for position in navigator.visible_range():
        if position >= len(index):
            break
        if position == navigator.absolute_index():
            click.echo(click.style(f">> {index[position]}", reverse=True))
        else:
            click.echo(f"   {index[position]}")
    click.echo(click.style("enter toggle, q back", dim=True))


def _pick_categories(
    store: TaskStore,
    task_navigator: ListNavigator,
    kind: TaskListKind,
    dimension: Dimension,
    config: Config,
) -> None:
    """Category picker over one dimension. Enter or space toggles the filter under the cursor."""
    size = _window_size(config)
    navigator = ListNavigator(window_size=size, shift=min(config.list_shift, size - 1))
    index = store.get_categories(dimension)
    navigator.length = len(index)

    while True:
        _render_categories(index, navigator, dimension)
        key = click.getchar()
        if key in ("q", ""):
            return
        if key in PICKER_KEYS:
            navigator.handle_event(PICKER_KEYS[key])
        elif key in ("\r", "\n", " ") and index:
            name = index.get_name(navigator.absolute_index())
            handle(store, task_navigator, kind, ToggleFilter(dimension, name))
            index = store.get_categories(dimension)


@main.command()
@click.option("--done", is_flag=True, help="Browse finished tasks")
@click.pass_obj
def browse(config: Config, done: bool):
    """Interactive list view.

    j/k move, g/G jump, J/K reorder, x remove, d finish, m move to the
    other list, p/c/t pick project, context or hashtag filters, q save and quit.
    """
    store, source = _load(config)
    kind = _kind(done)
    size = _window_size(config)
    navigator = ListNavigator(window_size=size, shift=min(config.list_shift, size - 1))
    sync_length(store, navigator, kind)

    changed = False
    message = ""
    while True:
        _render(store, navigator, kind, message)
        message = ""
        key = click.getchar()
        if key in ("q", ""):
            break
        if key in FILTER_KEYS:
            _pick_categories(store, navigator, kind, FILTER_KEYS[key], config)
            continue
        if key == "d":
            event = Finish() if kind is TaskListKind.PENDING else MoveTask()
        elif key in BROWSE_KEYS:
            event = BROWSE_KEYS[key]
        else:
            continue

        try:
            if handle(store, navigator, kind, event) and not isinstance(event, (Down, Up, First, Last)):
                changed = True
        except TodoError as e:
            logger.info(f"Rejected {event!r}: {e}")
            message = str(e)

    if changed:
        _save(store, source)


if __name__ == "__main__":
    main()
