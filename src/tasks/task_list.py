"""
Task List

The ordered, in-memory list of tasks and the operations the session applies
to it. Tasks are addressed only by their 1-based position.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from .model import Task


@dataclass(frozen=True)
class IndexOutOfRange:
    """A task number outside 1..count"""
    requested: int
    count: int

    @property
    def message(self) -> str:
        if self.count == 0:
            return f"Task {self.requested} does not exist, the list is empty."
        return f"Task {self.requested} does not exist (valid numbers are 1 to {self.count})."


class TaskList:
    """Ordered collection of tasks owned by one session"""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: List[Task] = list(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def count(self) -> int:
        return len(self._tasks)

    def add(self, task: Task) -> int:
        """Append a task and return the new count"""
        self._tasks.append(task)
        return len(self._tasks)

    def get(self, index: int) -> Union[Task, IndexOutOfRange]:
        """
        Look up a task by its 1-based position

        Returns:
            The task, or IndexOutOfRange if index is not in 1..count
        """
        if index < 1 or index > len(self._tasks):
            return IndexOutOfRange(index, len(self._tasks))
        return self._tasks[index - 1]

    def mark_done(self, index: int, value: bool) -> Union[Task, IndexOutOfRange]:
        """Set the done flag of the task at index and return that task"""
        task = self.get(index)
        if isinstance(task, IndexOutOfRange):
            return task
        task.set_done(value)
        return task

    def delete(self, index: int) -> Union[Tuple[Task, int], IndexOutOfRange]:
        """
        Remove the task at index; later tasks move up by one

        Returns:
            (removed task, new count), or IndexOutOfRange
        """
        task = self.get(index)
        if isinstance(task, IndexOutOfRange):
            return task
        del self._tasks[index - 1]
        return task, len(self._tasks)

    def list(self) -> List[Tuple[int, Task]]:
        """Snapshot of (1-based index, task) pairs in current order"""
        return list(enumerate(self._tasks, start=1))

    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def replace_all(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)
