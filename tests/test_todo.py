import pytest

from peachos.errors import DiskIOError, InvalidArgumentError, OutOfMemoryError
from peachos.todo import TodoBackend, parse_task_id, run_todo


class FakeBackend(TodoBackend):
    def __init__(self, fail=False):
        self.fail = fail
        self.tasks = []
        self.removed = []
        self.list_calls = 0

    def add(self, task):
        if self.fail:
            raise OutOfMemoryError()
        self.tasks.append(task)

    def list_tasks(self):
        self.list_calls += 1
        if self.fail:
            raise DiskIOError()
        return "".join(f"{n}: {t}\n" for n, t in enumerate(self.tasks))

    def remove(self, task_id):
        if self.fail:
            raise InvalidArgumentError()
        self.removed.append(task_id)


def run(lines, backend=None):
    backend = backend or FakeBackend()
    out = []
    result = run_todo(backend, lines, out.append)
    return backend, out, result


def test_banner_comes_first():
    _, out, _ = run([])
    assert out[:2] == ["Todo App\n", "Type 'help' for commands.\n\n"]


def test_add_stores_task():
    backend, out, _ = run(["add buy milk"])
    assert backend.tasks == ["buy milk"]
    assert "Task added\n" in out


def test_add_without_text_shows_usage():
    backend, out, _ = run(["add "])
    assert backend.tasks == []
    assert "Usage: add <task>\n" in out


def test_add_alone_is_unknown():
    backend, out, _ = run(["add"])
    assert backend.tasks == []
    assert "Unknown command\n" in out


def test_add_failure_reported():
    _, out, _ = run(["add x"], FakeBackend(fail=True))
    assert "ERROR: Failed to add task\n" in out
    assert "Task added\n" not in out


def test_list_writes_listing():
    backend = FakeBackend()
    backend.tasks = ["alpha"]
    _, out, _ = run(["list"], backend)
    assert backend.list_calls == 1
    assert "0: alpha\n" in out


def test_list_with_trailing_newline_accepted():
    backend, out, _ = run(["list\n"])
    assert backend.list_calls == 1
    assert "Unknown command\n" not in out


def test_list_failure_reported():
    _, out, _ = run(["list"], FakeBackend(fail=True))
    assert "ERROR: Failed to list tasks\n" in out


def test_remove_by_id():
    backend, out, _ = run(["remove 3"])
    assert backend.removed == [3]
    assert "Task removed\n" in out


def test_remove_bad_id():
    backend, out, _ = run(["remove abc", "remove "])
    assert backend.removed == []
    assert out.count("ERROR: Invalid task ID\n") == 2


def test_remove_failure_reported():
    _, out, _ = run(["remove 1"], FakeBackend(fail=True))
    assert "ERROR: Failed to remove task\n" in out


def test_help_lists_commands():
    _, out, _ = run(["help"])
    text = "".join(out)
    assert "Commands:\n  add <task>\n  list\n  remove <id>\n  help\n  exit\n" in text


def test_exit_stops_processing():
    backend, out, result = run(["exit", "add later"])
    assert result == 0
    assert "Bye\n" in out
    assert backend.tasks == []


def test_end_of_input_returns_zero():
    _, out, result = run(["add a"])
    assert result == 0
    assert out[-1] == "todo> "


def test_empty_line_just_reprompts():
    _, out, _ = run(["", "exit"])
    assert "Unknown command\n" not in out
    assert out.count("todo> ") == 2


def test_unknown_command():
    _, out, _ = run(["frobnicate"])
    assert "Unknown command\n" in out


def test_long_line_is_cut_to_buffer():
    backend, _, _ = run(["add " + "a" * 300])
    assert len(backend.tasks[0]) == 255 - len("add ")


def test_enter_key_ends_line():
    backend, _, _ = run(["add first\rsecond"])
    assert backend.tasks == ["first"]


@pytest.mark.parametrize("text, expected", [("42", 42), ("007", 7), ("0", 0)])
def test_parse_task_id(text, expected):
    assert parse_task_id(text) == expected


def test_parse_task_id_looks_at_32_characters_only():
    assert parse_task_id("0" * 32 + "x") == 0


@pytest.mark.parametrize("text", ["", "4a", "-1", " 1", "1\n"])
def test_parse_task_id_rejects(text):
    with pytest.raises(InvalidArgumentError):
        parse_task_id(text)