"""
Task engine: task variants, command parser, task list and flat-file storage
"""

from .model import ToDo, Deadline, Event, Task, DecodeError, decode
from .parser import (
    USAGE,
    ListCommand, ExitCommand, MarkCommand, UnmarkCommand, DeleteCommand,
    AddTodoCommand, AddDeadlineCommand, AddEventCommand, Command,
    ParseError, UnknownCommand, InvalidArgument, BlankArgument,
    MissingSection, UnexpectedSection, parse_command,
)
from .task_list import TaskList, IndexOutOfRange
from .storage import FileStorage

__all__ = [
    'ToDo', 'Deadline', 'Event', 'Task', 'DecodeError', 'decode',
    'USAGE',
    'ListCommand', 'ExitCommand', 'MarkCommand', 'UnmarkCommand', 'DeleteCommand',
    'AddTodoCommand', 'AddDeadlineCommand', 'AddEventCommand', 'Command',
    'ParseError', 'UnknownCommand', 'InvalidArgument', 'BlankArgument',
    'MissingSection', 'UnexpectedSection', 'parse_command',
    'TaskList', 'IndexOutOfRange',
    'FileStorage',
]
