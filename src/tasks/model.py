r"""
Task Model

The three task variants tracked by Duke (to-dos, deadlines, events), their
display rendering, and the line encoding used by the data file.

Persisted line layout (fields joined by " | "):
    T | <done> | <description>
    D | <done> | <description> | <by>
    E | <done> | <description> | <from> | <to>

<done> is 1 or 0. Inside a field a backslash is written as \\, a pipe as \|,
a carriage return as \r and a line feed as \n, so free text can never split a
line into extra fields or extra lines. Only the single padding space on each
side of a separator is dropped on decode; any other whitespace is kept.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple, Type, Union


FIELD_SEPARATOR = '|'
ESCAPE = '\\'
DONE_FLAGS = {'1': True, '0': False}

# escaped character -> character it stands for
UNESCAPES = {ESCAPE: ESCAPE, FIELD_SEPARATOR: FIELD_SEPARATOR, 'r': '\r', 'n': '\n'}


class _Checkable:
    """Done-flag behaviour shared by every task variant"""

    glyph = '?'

    def set_done(self, value: bool) -> None:
        self.done = value

    def _prefix(self) -> str:
        mark = 'X' if self.done else ' '
        return f"[{self.glyph}][{mark}] {self.description}"

    def _fields(self) -> List[str]:
        return [self.glyph, '1' if self.done else '0', self.description]

    def encode(self) -> str:
        """Encode the task as a single data-file line (no trailing newline)"""
        return f" {FIELD_SEPARATOR} ".join(_escape(f) for f in self._fields())


@dataclass
class ToDo(_Checkable):
    """A plain task with nothing but a description"""
    description: str
    done: bool = False

    glyph = 'T'

    def render(self) -> str:
        return self._prefix()


@dataclass
class Deadline(_Checkable):
    """A task that has to be finished by some (free-text) date"""
    description: str
    by: str
    done: bool = False

    glyph = 'D'

    def render(self) -> str:
        return f"{self._prefix()} (by: {self.by})"

    def _fields(self) -> List[str]:
        return super()._fields() + [self.by]


@dataclass
class Event(_Checkable):
    """A task that spans a period, stored as literal start and end strings"""
    description: str
    start: str
    end: str
    done: bool = False

    glyph = 'E'

    def render(self) -> str:
        return f"{self._prefix()} (from: {self.start} to: {self.end})"

    def _fields(self) -> List[str]:
        return super()._fields() + [self.start, self.end]


Task = Union[ToDo, Deadline, Event]

# glyph -> (variant, number of variant-specific fields)
VARIANTS: Dict[str, Tuple[Type, int]] = {
    ToDo.glyph: (ToDo, 0),
    Deadline.glyph: (Deadline, 1),
    Event.glyph: (Event, 2),
}


@dataclass(frozen=True)
class DecodeError:
    """A data-file line that could not be turned back into a task"""
    line: str
    reason: str

    @property
    def message(self) -> str:
        return f"Cannot decode {self.line!r}: {self.reason}"


def decode(line: str) -> Union[Task, DecodeError]:
    """
    Decode one data-file line

    Args:
        line: Line as read from the data file (a trailing newline is ignored)

    Returns:
        The decoded task, or a DecodeError describing why the line is malformed
    """
    line = line.rstrip('\r\n')
    if not line.strip():
        return DecodeError(line, "blank line")

    try:
        fields = _split_fields(line)
    except ValueError as e:
        return DecodeError(line, str(e))

    if len(fields) < 3:
        return DecodeError(line, f"expected at least 3 fields, found {len(fields)}")

    tag, done_token, description = fields[:3]
    extra = fields[3:]

    if tag not in VARIANTS:
        return DecodeError(line, f"unknown task type {tag!r}")
    variant, extra_count = VARIANTS[tag]

    if len(extra) != extra_count:
        return DecodeError(
            line,
            f"type {tag} takes {3 + extra_count} fields, found {len(fields)}"
        )

    if done_token not in DONE_FLAGS:
        return DecodeError(line, f"done flag must be 0 or 1, found {done_token!r}")

    return variant(description, *extra, done=DONE_FLAGS[done_token])


def _escape(text: str) -> str:
    return (
        text.replace(ESCAPE, ESCAPE * 2)
        .replace(FIELD_SEPARATOR, ESCAPE + FIELD_SEPARATOR)
        .replace('\r', ESCAPE + 'r')
        .replace('\n', ESCAPE + 'n')
    )


def _split_fields(line: str) -> List[str]:
    """Split on unescaped separators, unescape, and drop the separator padding"""
    fields = []
    current = []
    chars = iter(line)

    for ch in chars:
        if ch == ESCAPE:
            escaped = next(chars, None)
            if escaped is None:
                raise ValueError("dangling escape character")
            if escaped not in UNESCAPES:
                raise ValueError(f"invalid escape sequence {ESCAPE + escaped!r}")
            current.append(UNESCAPES[escaped])
        elif ch == FIELD_SEPARATOR:
            fields.append(''.join(current))
            current = []
        else:
            current.append(ch)
    fields.append(''.join(current))

    last = len(fields) - 1
    return [_unpad(f, lead=i > 0, trail=i < last) for i, f in enumerate(fields)]


def _unpad(field: str, lead: bool, trail: bool) -> str:
    # escapes never produce a space
    if lead and field.startswith(' '):
        field = field[1:]
    if trail and field.endswith(' '):
        field = field[:-1]
    return field
