"""Tests for the click CLI."""

import json
from datetime import date

import pytest
from click.testing import CliRunner

from todotui.cli import main


@pytest.fixture
def todo_dir(tmp_path):
    (tmp_path / "todo.txt").write_text(
        "(A) call mom +family @phone\n"
        "write report +work @office #q3\n"
        "fix bike +home\n"
    )
    (tmp_path / "done.txt").write_text("x 2023-05-21 pay rent +home\n")
    (tmp_path / "todotui.conf").write_text(
        f"todo_path = {tmp_path / 'todo.txt'}\n"
        f"done_path = {tmp_path / 'done.txt'}\n"
        "window_size = 10\n"
    )
    return tmp_path


@pytest.fixture
def run(todo_dir, monkeypatch):
    monkeypatch.delenv("TODOTUI_TODO_PATH", raising=False)
    monkeypatch.delenv("TODOTUI_DONE_PATH", raising=False)
    runner = CliRunner()

    def _run(*args, input=None):
        return runner.invoke(main, ["--config", str(todo_dir / "todotui.conf"), *args], input=input)
    return _run


class TestList:
    def test_lists_pending(self, run):
        result = run("list")
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "  0 (A) call mom +family @phone",
            "  1 write report +work @office #q3",
            "  2 fix bike +home",
        ]

    def test_lists_done(self, run):
        result = run("list", "--done")
        assert result.output.splitlines() == ["  0 x 2023-05-21 pay rent +home"]

    def test_filter_keeps_indices(self, run):
        result = run("list", "-p", "home")
        assert result.output.splitlines() == ["  2 fix bike +home"]

    def test_filters_are_anded(self, run):
        result = run("list", "-p", "work", "-c", "phone")
        assert result.output.strip() == "No pending tasks."

    def test_all_ignores_filters(self, run):
        result = run("list", "--all", "-p", "home")
        assert len(result.output.splitlines()) == 3

    def test_json(self, run):
        result = run("list", "--json", "-t", "q3")
        data = json.loads(result.output)
        assert data == [
            {
                "index": 1,
                "subject": "write report +work @office #q3",
                "priority": None,
                "finished": False,
                "due_date": None,
                "projects": ["work"],
                "contexts": ["office"],
                "hashtags": ["q3"],
            }
        ]


class TestMutations:
    def test_add(self, run, todo_dir):
        result = run("add", "(B)", "buy", "milk", "+home")
        assert result.exit_code == 0
        assert "Added: (B) buy milk +home" in result.output
        assert (todo_dir / "todo.txt").read_text().splitlines()[-1] == "(B) buy milk +home"

    def test_add_parse_error(self, run, todo_dir):
        before = (todo_dir / "todo.txt").read_text()
        result = run("add", "thing", "due:2023-02-30")
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert (todo_dir / "todo.txt").read_text() == before

    def test_done(self, run, todo_dir):
        result = run("done", "2")
        assert result.exit_code == 0
        assert "Done: fix bike +home" in result.output
        assert (todo_dir / "done.txt").read_text().splitlines() == [
            "x 2023-05-21 pay rent +home",
            f"x {date.today().isoformat()} fix bike +home",
        ]
        assert len((todo_dir / "todo.txt").read_text().splitlines()) == 2

    def test_done_then_undo_keeps_creation_date(self, run, todo_dir):
        (todo_dir / "todo.txt").write_text("(A) 2024-01-01 write report\n")
        (todo_dir / "done.txt").write_text("")
        run("done", "0")
        assert (todo_dir / "done.txt").read_text().splitlines() == [
            f"x (A) {date.today().isoformat()} 2024-01-01 write report",
        ]
        result = run("undo", "0")
        assert result.exit_code == 0
        assert (todo_dir / "todo.txt").read_text().splitlines() == ["(A) 2024-01-01 write report"]

    def test_add_keeps_unparsed_and_relative_date_lines(self, run, todo_dir):
        (todo_dir / "todo.txt").write_text("call mom due:tomorrow\nbuy milk\n2024-13-01 broken\n")
        result = run("add", "new thing")
        assert result.exit_code == 0
        assert (todo_dir / "todo.txt").read_text().splitlines() == [
            "call mom due:tomorrow",
            "buy milk",
            "new thing",
            "2024-13-01 broken",
        ]

    def test_done_out_of_range(self, run):
        result = run("done", "7")
        assert result.exit_code == 1
        assert "No pending task at index 7" in result.output

    def test_undo(self, run, todo_dir):
        result = run("undo", "0")
        assert result.exit_code == 0
        assert (todo_dir / "todo.txt").read_text().splitlines()[-1] == "pay rent +home"
        assert (todo_dir / "done.txt").read_text() == ""

    def test_undo_out_of_range_is_not_an_error(self, run, todo_dir):
        before = (todo_dir / "done.txt").read_text()
        result = run("undo", "5")
        assert result.exit_code == 0
        assert "No done task at index 5." in result.output
        assert (todo_dir / "done.txt").read_text() == before

    def test_rm(self, run, todo_dir):
        result = run("rm", "0")
        assert result.exit_code == 0
        assert (todo_dir / "todo.txt").read_text().splitlines()[0] == "write report +work @office #q3"

    def test_rm_out_of_range(self, run):
        result = run("rm", "--done", "3")
        assert result.exit_code == 1

    def test_swap(self, run, todo_dir):
        result = run("swap", "0", "2")
        assert result.exit_code == 0
        lines = (todo_dir / "todo.txt").read_text().splitlines()
        assert lines[0] == "fix bike +home"
        assert lines[2] == "(A) call mom +family @phone"


class TestCategories:
    def test_projects(self, run):
        result = run("categories", "project")
        assert result.output.splitlines() == ["  +family", "  +home", "  +work"]

    def test_marks_active_filters(self, run):
        result = run("categories", "project", "-f", "+home")
        assert result.output.splitlines() == ["  +family", "* +home", "  +work"]

    def test_include_done_json(self, run, todo_dir):
        (todo_dir / "done.txt").write_text("x archived +old\n")
        result = run("categories", "project", "--include-done", "--json")
        assert [entry["name"] for entry in json.loads(result.output)] == ["family", "home", "old", "work"]

    def test_hashtags_json(self, run):
        result = run("categories", "hashtag", "--json", "--filter", "q3")
        assert json.loads(result.output) == [{"name": "q3", "selected": True}]

    def test_bad_dimension(self, run):
        result = run("categories", "colour")
        assert result.exit_code != 0


class TestTagged:
    def test_tagged(self, run):
        result = run("tagged", "project", "+home")
        assert result.output.splitlines() == ["fix bike +home"]

    def test_none(self, run):
        result = run("tagged", "context", "garden")
        assert result.output.strip() == "No tasks tagged @garden."


class TestConfigErrors:
    def test_invalid_config(self, todo_dir):
        (todo_dir / "bad.conf").write_text("list_shift = lots\n")
        result = CliRunner().invoke(main, ["--config", str(todo_dir / "bad.conf"), "list"])
        assert result.exit_code == 1
        assert "LIST_SHIFT" in result.output


class TestBrowse:
    def test_renders_cursor(self, run):
        result = run("browse", input="q")
        assert result.exit_code == 0
        assert ">> (A) call mom +family @phone" in result.output
        assert "filters: none" in result.output

    def test_finish_selected(self, run, todo_dir):
        result = run("browse", input="jdq")
        assert result.exit_code == 0
        assert (todo_dir / "done.txt").read_text().splitlines()[-1] == (
            f"x {date.today().isoformat()} write report +work @office #q3"
        )

    def test_filter_then_remove(self, run, todo_dir):
        # open projects, step to "home", toggle it, back, remove the only match
        result = run("browse", input="pj\nqxq")
        assert result.exit_code == 0
        assert ">> * home" in result.output
        assert "filters: +home" in result.output
        assert (todo_dir / "todo.txt").read_text().splitlines() == [
            "(A) call mom +family @phone",
            "write report +work @office #q3",
        ]

    def test_reorder(self, run, todo_dir):
        run("browse", input="GKq")
        lines = (todo_dir / "todo.txt").read_text().splitlines()
        assert lines[1:] == ["fix bike +home", "write report +work @office #q3"]

    def test_navigation_only_leaves_files_alone(self, run, todo_dir):
        before = (todo_dir / "todo.txt").read_text()
        run("browse", input="jjGgkq")
        assert (todo_dir / "todo.txt").read_text() == before

    def test_error_is_shown_not_raised(self, run):
        # family and office together match nothing
        result = run("browse", input="p\nqc\nqxq")
        assert result.exit_code == 0
        assert "No pending task at index 0" in result.output

    def test_picker_lists_categories_with_flags(self, run, todo_dir):
        before = (todo_dir / "todo.txt").read_text()
        result = run("browse", input="c\nqq")
        assert result.exit_code == 0
        assert "Contexts (2)" in result.output
        assert ">> * office" in result.output
        assert "     phone" in result.output
        assert "filters: @office" in result.output
        assert (todo_dir / "todo.txt").read_text() == before

    def test_picker_toggles_off_again(self, run):
        result = run("browse", input="t\n\nqq")
        assert result.exit_code == 0
        assert ">>   q3" in result.output
        assert result.output.rstrip().endswith("filters: none")

    def test_empty_picker_ignores_enter(self, run, todo_dir):
        (todo_dir / "todo.txt").write_text("buy milk\n")
        result = run("browse", input="t\nqq")
        assert result.exit_code == 0
        assert "No hashtags." in result.output
        assert result.output.rstrip().endswith("filters: none")
