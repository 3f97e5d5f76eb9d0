#!/usr/bin/env python3
"""
Duke

Line-oriented personal task tracker:
1. Loads the saved task list from the data file on start-up
2. Reads one command per line (todo, deadline, event, mark, unmark, delete, list, bye)
3. Applies it to the in-memory task list
4. Rewrites the data file after every change
5. Answers each command with a boxed reply block
"""

import sys
import yaml
import logging
from pathlib import Path
from typing import Any, Callable, Dict, IO, List, Optional
from dataclasses import dataclass, field

from tasks import (
    USAGE,
    AddDeadlineCommand, AddEventCommand, AddTodoCommand, DeleteCommand,
    ExitCommand, ListCommand, MarkCommand, UnmarkCommand,
    Deadline, Event, ToDo, Task,
    FileStorage, IndexOutOfRange, ParseError, TaskList, parse_command,
)


INDENT = "      "
SEPARATOR = "   " + "~" * 40

DEFAULT_CONFIG: Dict[str, Any] = {
    'storage': {
        'data_file': 'data/duke.txt',
    },
    'bot': {
        'name': 'Tom',
    },
    'logging': {
        'level': 'WARNING',
    },
}


@dataclass
class Reply:
    """Lines to show for one command, and whether the session should end"""
    lines: List[str] = field(default_factory=list)
    exit: bool = False


def format_block(lines: List[str]) -> str:
    """Frame reply lines between separators, indenting each non-empty line"""
    body = [INDENT + line for line in lines if line]
    return '\n'.join([SEPARATOR] + body + [SEPARATOR])


class Duke:
    """
    One interactive session over a task list

    Owns the task list and its storage; every command line goes through
    handle(), which never raises on bad input.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        data_file: Optional[str] = None,
        log_level: Optional[str] = None
    ):
        """Initialize the session and load saved tasks"""
        self.logger = self._setup_logging()
        self.project_root = self._detect_project_root()
        self.config = self._load_config(config_path)

        level_name = log_level or self.config['logging']['level']
        self.logger.setLevel(getattr(logging, str(level_name).upper(), logging.WARNING))

        self.bot_name = self.config['bot']['name']
        self.storage = FileStorage(self._resolve_data_file(data_file))
        self.tasks = TaskList()
        self.load()

        self._handlers: Dict[type, Callable[[Any], Reply]] = {
            ListCommand: self._list,
            ExitCommand: self._exit,
            MarkCommand: self._mark,
            UnmarkCommand: self._unmark,
            DeleteCommand: self._delete,
            AddTodoCommand: self._add,
            AddDeadlineCommand: self._add,
            AddEventCommand: self._add,
        }

        self.logger.info(f"✅ Duke initialized with {self.tasks.count} tasks")

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for the session"""
        logger = logging.getLogger("Duke")

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - Duke - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.WARNING)

        return logger

    def _detect_project_root(self) -> Path:
        """Detect project root directory"""
        current_path = Path(__file__).resolve()

        for parent in current_path.parents:
            if (parent / 'pyproject.toml').exists():
                return parent

        return Path.cwd()

    def _load_config(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file, merged over the built-in defaults

        An explicit config_path must exist; the default location may be
        missing, in which case the defaults are used as they are.
        """
        if config_path is None:
            path = self.project_root / 'config' / 'config.yaml'
            if not path.exists():
                self.logger.warning(
                    f"Config not found at {path}, using defaults. "
                    f"Copy config/config.example.yaml to customize."
                )
                return _merge(DEFAULT_CONFIG, {})
        else:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        return _merge(DEFAULT_CONFIG, loaded)

    def _resolve_data_file(self, data_file: Optional[str]) -> Path:
        path = Path(data_file or self.config['storage']['data_file']).expanduser()
        if not path.is_absolute() and data_file is None:
            path = self.project_root / path
        return path

    # ==================== Session ====================

    def load(self) -> int:
        """Replace the in-memory list with the contents of the data file"""
        self.tasks.replace_all(self.storage.load())
        return self.tasks.count

    def greeting(self) -> List[str]:
        return [f"Hello! I'm {self.bot_name}", "What can I do for you?"]

    def farewell(self) -> List[str]:
        return ["Bye. Hope to see you again soon!"]

    def handle(self, line: str) -> Reply:
        """
        Parse and apply one command line

        Args:
            line: Input line without its trailing newline

        Returns:
            Reply with the lines to show the user
        """
        command = parse_command(line)
        if isinstance(command, ParseError):
            self.logger.debug(f"Rejected input {line!r}: {command.message}")
            return self._invalid(command.message)

        return self._handlers[type(command)](command)

    def run(self, stdin: Optional[IO[str]] = None, stdout: Optional[IO[str]] = None) -> None:
        """Read commands until 'bye' or end of input, printing a block per reply"""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout

        def show(lines: List[str]) -> None:
            print(format_block(lines), file=stdout)

        show(self.greeting())
        show(["Loading tasks from hard disk..."])
        show(self._list(ListCommand()).lines)

        for raw in stdin:
            reply = self.handle(raw.rstrip('\r\n'))
            show(reply.lines)
            if reply.exit:
                return

        show(self.farewell())

    # ==================== Command handlers ====================

    def _list(self, command: ListCommand) -> Reply:
        lines = ["Here are the tasks in your list:"]
        for index, task in self.tasks.list():
            lines.append(f"{index}. {task.render()}")
        return Reply(lines)

    def _exit(self, command: ExitCommand) -> Reply:
        return Reply(self.farewell(), exit=True)

    def _mark(self, command: MarkCommand) -> Reply:
        return self._set_done(command.index, True, "Cool! I've marked this task as done:")

    def _unmark(self, command: UnmarkCommand) -> Reply:
        return self._set_done(command.index, False, "Ok, I've marked this task as not done yet:")

    def _set_done(self, index: int, value: bool, header: str) -> Reply:
        task = self.tasks.mark_done(index, value)
        if isinstance(task, IndexOutOfRange):
            return self._invalid(task.message)

        self.logger.info(f"Task {index} done={value}: '{task.description[:40]}'")
        return self._saved(Reply([header, f"  {task.render()}"]))

    def _delete(self, command: DeleteCommand) -> Reply:
        result = self.tasks.delete(command.index)
        if isinstance(result, IndexOutOfRange):
            return self._invalid(result.message)

        task, count = result
        self.logger.info(f"Deleted task {command.index}: '{task.description[:40]}'")
        return self._saved(Reply([
            "Noted. I've removed this task:",
            f"  {task.render()}",
            f"Now you have {count} tasks in the list.",
        ]))

    def _add(self, command) -> Reply:
        task = _task_from(command)
        count = self.tasks.add(task)

        self.logger.info(f"Added task {count}: {task.encode()}")
        return self._saved(Reply([
            "Got it. I've added this task:",
            f"  {task.render()}",
            f"Now you have {count} tasks in the list.",
        ]))

    def _saved(self, reply: Reply) -> Reply:
        """Persist the whole list after a change; a failed save is reported, not fatal"""
        if not self.storage.save(self.tasks.tasks()):
            reply.lines.append(
                "Warning: could not save tasks to disk, changes are kept in memory only."
            )
        return reply

    def _invalid(self, reason: str) -> Reply:
        lines = [reason, "Please see below for a list of valid commands"]
        lines.extend(f"- {usage}" for usage in USAGE)
        return Reply(lines)


def _task_from(command) -> Task:
    """Build the task an add-command describes"""
    if isinstance(command, AddDeadlineCommand):
        return Deadline(command.description, command.by)
    if isinstance(command, AddEventCommand):
        return Event(command.description, command.start, command.end)
    return ToDo(command.description)


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Two-level merge of a loaded config over the defaults"""
    merged = {}
    for section, values in defaults.items():
        merged[section] = dict(values)
        override = overrides.get(section)
        if isinstance(override, dict):
            merged[section].update(override)
    return merged


# ==================== CLI Interface ====================

def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Duke: line-oriented task tracker"
    )
    parser.add_argument(
        '--config',
        help='Path to config file'
    )
    parser.add_argument(
        '--data-file',
        help='Path to the task data file (overrides storage.data_file)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (overrides logging.level)'
    )

    args = parser.parse_args(argv)

    try:
        duke = Duke(
            config_path=args.config,
            data_file=args.data_file,
            log_level=args.log_level
        )
    except Exception as e:
        print(f"❌ Failed to initialize Duke: {e}")
        return 1

    try:
        duke.run()
    except KeyboardInterrupt:
        print()
        print(format_block(duke.farewell()))

    return 0


if __name__ == '__main__':
    sys.exit(main())
