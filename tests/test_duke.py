"""
Tests for the Duke session

Run with: pytest tests/
"""

import io

import pytest
import yaml

from duke import Duke, Reply, format_block, main, SEPARATOR, INDENT


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        'storage': {'data_file': str(tmp_path / "duke.txt")},
        'bot': {'name': 'Tom'},
    }))
    return path


@pytest.fixture
def duke(config_file):
    return Duke(config_path=str(config_file))


def listed(session):
    return [task.render() for _, task in session.tasks.list()]


class TestSession:
    """Test suite for command handling"""

    def test_end_to_end_with_reload(self, duke, config_file):
        """Add, mark, list and delete, then reload from the data file"""
        for line in [
            "todo read book",
            "deadline submit report /by Sunday",
            "event team sync /from Mon 2pm /to Mon 3pm",
            "mark 2",
            "list",
            "delete 1",
        ]:
            reply = duke.handle(line)
            assert not reply.exit

        expected = [
            "[D][X] submit report (by: Sunday)",
            "[E][ ] team sync (from: Mon 2pm to: Mon 3pm)",
        ]
        assert listed(duke) == expected
        assert duke.handle("list").lines == [
            "Here are the tasks in your list:",
            "1. " + expected[0],
            "2. " + expected[1],
        ]

        reloaded = Duke(config_path=str(config_file))
        assert listed(reloaded) == expected
        assert [t.done for t in reloaded.tasks.tasks()] == [True, False]

    def test_add_reply(self, duke):
        reply = duke.handle("todo read book")
        assert reply.lines == [
            "Got it. I've added this task:",
            "  [T][ ] read book",
            "Now you have 1 tasks in the list.",
        ]

    def test_mark_unmark_delete_replies(self, duke):
        duke.handle("todo read book")
        assert duke.handle("mark 1").lines == ["Cool! I've marked this task as done:", "  [T][X] read book"]
        assert duke.handle("unmark 1").lines == ["Ok, I've marked this task as not done yet:", "  [T][ ] read book"]
        assert duke.handle("delete 1").lines == [
            "Noted. I've removed this task:",
            "  [T][ ] read book",
            "Now you have 0 tasks in the list.",
        ]

    def test_list_does_not_save(self, duke):
        duke.handle("list")
        assert not duke.storage.data_file.exists()

    def test_every_mutation_saves(self, duke):
        duke.handle("todo read book")
        assert duke.storage.data_file.read_text(encoding="utf-8") == "T | 0 | read book\n"
        duke.handle("mark 1")
        assert duke.storage.data_file.read_text(encoding="utf-8") == "T | 1 | read book\n"
        duke.handle("delete 1")
        assert duke.storage.data_file.read_text(encoding="utf-8") == ""

    def test_carriage_return_in_text_survives_reload(self, duke, config_file):
        duke.handle("todo a\rb")
        reloaded = Duke(config_path=str(config_file))
        assert listed(reloaded) == ["[T][ ] a\rb"]

    def test_load_replaces_list_from_data_file(self, duke):
        duke.handle("todo read book")
        duke.storage.data_file.write_text("D | 1 | submit report | Sunday\n", encoding="utf-8")

        assert duke.load() == 1
        assert listed(duke) == ["[D][X] submit report (by: Sunday)"]

    def test_bad_bytes_in_data_file_do_not_stop_start_up(self, config_file, tmp_path):
        (tmp_path / "duke.txt").write_bytes(b"T | 0 | read book\n\xff\xfe\n")
        session = Duke(config_path=str(config_file))
        assert listed(session) == ["[T][ ] read book"]

    def test_bye_ends_session(self, duke):
        reply = duke.handle("bye")
        assert reply.exit is True
        assert reply.lines == ["Bye. Hope to see you again soon!"]


class TestInvalidInput:
    """Test suite for error replies"""

    @pytest.mark.parametrize("line, reason", [
        ("blah", "Unknown command 'blah'"),
        ("todo", "Argument 'description' cannot be blank for command 'todo'"),
        ("deadline buy milk", "Command 'deadline' needs a /by section"),
        ("mark two", "Argument for mark must be an integer, got 'two'"),
        ("delete 1", "Task 1 does not exist, the list is empty."),
    ])
    def test_reply_names_problem_then_usage(self, duke, line, reason):
        reply = duke.handle(line)
        assert not reply.exit
        assert reply.lines[0] == reason
        assert reply.lines[1] == "Please see below for a list of valid commands"
        assert "- deadline <description> /by <date>" in reply.lines
        assert reply.lines[-1] == "- bye"

    def test_out_of_range_leaves_list_unchanged(self, duke):
        duke.handle("todo read book")
        duke.handle("mark 5")
        duke.handle("delete 0")
        assert listed(duke) == ["[T][ ] read book"]

    def test_failed_save_is_reported_but_kept_in_memory(self, duke, monkeypatch):
        monkeypatch.setattr(duke.storage, "save", lambda tasks: False)
        reply = duke.handle("todo read book")
        assert reply.lines[-1].startswith("Warning: could not save")
        assert listed(duke) == ["[T][ ] read book"]


class TestRun:
    """Test suite for the read loop"""

    def test_banner_commands_and_bye(self, duke):
        out = io.StringIO()
        duke.run(stdin=io.StringIO("todo read book\nbye\nlist\n"), stdout=out)
        text = out.getvalue()

        assert INDENT + "Hello! I'm Tom" in text
        assert INDENT + "Loading tasks from hard disk..." in text
        assert INDENT + "Got it. I've added this task:" in text
        assert text.rstrip().endswith(format_block(["Bye. Hope to see you again soon!"]))
        # nothing after bye is processed
        assert text.count("Here are the tasks in your list:") == 1

    def test_end_of_input_says_goodbye(self, duke):
        out = io.StringIO()
        duke.run(stdin=io.StringIO("todo read book\n"), stdout=out)
        assert out.getvalue().rstrip().endswith(format_block(duke.farewell()))

    def test_format_block(self):
        assert format_block(["a", "", "b"]) == "\n".join([SEPARATOR, INDENT + "a", INDENT + "b", SEPARATOR])


class TestConfig:
    """Test suite for configuration and the CLI entry point"""

    def test_defaults_fill_missing_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("bot:\n  name: Duke\n")
        session = Duke(config_path=str(path), data_file=str(tmp_path / "tasks.txt"))

        assert session.config['bot']['name'] == 'Duke'
        assert session.config['logging']['level'] == 'WARNING'
        assert session.greeting()[0] == "Hello! I'm Duke"
        assert session.storage.data_file == tmp_path / "tasks.txt"

    def test_missing_explicit_config_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Duke(config_path=str(tmp_path / "nope.yaml"))

    def test_main_reports_bad_config(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.yaml")]) == 1
        assert "Failed to initialize Duke" in capsys.readouterr().out

    def test_main_runs_session(self, config_file, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("todo read book\nbye\n"))
        assert main(["--config", str(config_file)]) == 0
        assert "Got it. I've added this task:" in capsys.readouterr().out
        assert (tmp_path / "duke.txt").read_text(encoding="utf-8") == "T | 0 | read book\n"

    def test_reply_defaults(self):
        assert Reply() == Reply(lines=[], exit=False)
