"""
Command Parser

Turns one raw input line into a command value, or into a ParseError value
naming what was wrong with it. Nothing here raises on bad input.

Grammar:
    list
    mark <n>
    unmark <n>
    delete <n>
    todo <description>
    deadline <description> /by <date>
    event <description> /from <start> /to <end>
    bye
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union


logger = logging.getLogger("Duke.Parser")

USAGE: List[str] = [
    "list",
    "mark <n>",
    "unmark <n>",
    "delete <n>",
    "todo <description>",
    "deadline <description> /by <date>",
    "event <description> /from <start> /to <end>",
    "bye",
]

# Markers each add-command requires after its description, in order
SECTION_MARKERS = {
    'todo': [],
    'deadline': ['by'],
    'event': ['from', 'to'],
}

# A "/" only starts a new section when a marker word follows it
SECTION_RE = re.compile(r'/(by|from|to)(?=\s|$)')
INDEX_RE = re.compile(r'^[+-]?\d+$')


# ==================== Commands ====================

@dataclass(frozen=True)
class ListCommand:
    pass


@dataclass(frozen=True)
class ExitCommand:
    pass


@dataclass(frozen=True)
class MarkCommand:
    index: int


@dataclass(frozen=True)
class UnmarkCommand:
    index: int


@dataclass(frozen=True)
class DeleteCommand:
    index: int


@dataclass(frozen=True)
class AddTodoCommand:
    description: str


@dataclass(frozen=True)
class AddDeadlineCommand:
    description: str
    by: str


@dataclass(frozen=True)
class AddEventCommand:
    description: str
    start: str
    end: str


Command = Union[
    ListCommand, ExitCommand, MarkCommand, UnmarkCommand, DeleteCommand,
    AddTodoCommand, AddDeadlineCommand, AddEventCommand,
]


# ==================== Parse errors ====================

@dataclass(frozen=True)
class ParseError:
    """Base for every way an input line can fail to parse"""

    @property
    def message(self) -> str:
        return "Invalid input format"


@dataclass(frozen=True)
class UnknownCommand(ParseError):
    keyword: str

    @property
    def message(self) -> str:
        if not self.keyword:
            return "Unknown command"
        return f"Unknown command '{self.keyword}'"


@dataclass(frozen=True)
class InvalidArgument(ParseError):
    command: str
    token: str

    @property
    def message(self) -> str:
        return f"Argument for {self.command} must be an integer, got '{self.token}'"


@dataclass(frozen=True)
class BlankArgument(ParseError):
    command: str
    argument: str

    @property
    def message(self) -> str:
        return f"Argument '{self.argument}' cannot be blank for command '{self.command}'"


@dataclass(frozen=True)
class MissingSection(BlankArgument):
    """A required /marker section is absent altogether"""

    @property
    def message(self) -> str:
        return f"Command '{self.command}' needs a /{self.argument} section"


@dataclass(frozen=True)
class UnexpectedSection(ParseError):
    command: str
    marker: str

    @property
    def message(self) -> str:
        expected = ' '.join(f"/{m}" for m in SECTION_MARKERS[self.command]) or "no sections"
        return (
            f"Unexpected /{self.marker} section for command '{self.command}' "
            f"(expected {expected})"
        )


# ==================== Parsing ====================

def parse_command(line: str) -> Union[Command, ParseError]:
    """
    Parse one input line

    Args:
        line: Raw input line, trailing newline already removed

    Returns:
        A command value, or a ParseError value describing the problem
    """
    keyword, _, rest = line.partition(' ')
    logger.debug(f"Parsing keyword={keyword!r} rest={rest!r}")

    if keyword == 'list':
        return ListCommand()
    if keyword == 'bye':
        return ExitCommand()

    if keyword in ('mark', 'unmark', 'delete'):
        index = _parse_index(rest)
        if index is None:
            return InvalidArgument(keyword, rest.strip())
        if keyword == 'mark':
            return MarkCommand(index)
        if keyword == 'unmark':
            return UnmarkCommand(index)
        return DeleteCommand(index)

    if keyword in SECTION_MARKERS:
        return _parse_add(keyword, rest)

    return UnknownCommand(keyword)


def _parse_index(token: str) -> Optional[int]:
    """Parse an integer argument; range checking is left to the task list"""
    token = token.strip()
    if not INDEX_RE.match(token):
        return None
    return int(token)


def _parse_add(command: str, rest: str) -> Union[Command, ParseError]:
    if command == 'todo':
        description = rest.strip()
        if not description:
            return BlankArgument(command, 'description')
        return AddTodoCommand(description)

    description, sections = _split_sections(rest)
    if not description:
        return BlankArgument(command, 'description')

    expected = SECTION_MARKERS[command]
    values = []

    for position, marker in enumerate(expected):
        if position >= len(sections):
            return MissingSection(command, marker)
        found, value = sections[position]
        if found != marker:
            if found not in expected:
                return UnexpectedSection(command, found)
            if any(m == marker for m, _ in sections):
                return UnexpectedSection(command, found)
            return MissingSection(command, marker)
        if not value:
            return BlankArgument(command, marker)
        values.append(value)

    if len(sections) > len(expected):
        return UnexpectedSection(command, sections[len(expected)][0])

    if command == 'deadline':
        return AddDeadlineCommand(description, *values)
    return AddEventCommand(description, *values)


def _split_sections(rest: str) -> Tuple[str, List[Tuple[str, str]]]:
    """
    Split the text after an add keyword into its description and /marker sections

    Returns:
        (trimmed description, [(marker, trimmed value), ...]) in input order
    """
    matches = list(SECTION_RE.finditer(rest))
    if not matches:
        return rest.strip(), []

    description = rest[:matches[0].start()].strip()
    sections = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(rest)
        sections.append((match.group(1), rest[match.end():end].strip()))

    return description, sections
