"""
Flat-file Storage

Loads the task list from, and saves it to, the data file: one encoded task per
line (see tasks.model for the line layout).
"""

import contextlib
import logging
from pathlib import Path
from typing import List, Union

from .model import DecodeError, Task, decode


class FileStorage:
    """Whole-list load/save against a single text file"""

    def __init__(self, data_file: Union[str, Path]):
        """
        Initialize storage

        Args:
            data_file: Path of the data file (created on first save)
        """
        self.data_file = Path(data_file).expanduser()
        self.logger = logging.getLogger("Duke.Storage")

    def load(self) -> List[Task]:
        """
        Read every task from the data file

        Lines that fail to decode are skipped with a warning, so one corrupt
        line never loses the rest of the list.

        Returns:
            Tasks in file order (empty if the file does not exist yet)
        """
        if not self.data_file.exists():
            self.logger.info(f"No data file at {self.data_file}, starting with an empty list")
            return []

        self.logger.info(f"Loading tasks from {self.data_file}")

        tasks = []
        with open(self.data_file, 'rb') as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode('utf-8')
                except UnicodeDecodeError as e:
                    self.logger.warning(f"Skipping line {line_number}: not valid UTF-8 ({e.reason})")
                    continue
                if not line.strip():
                    continue
                result = decode(line)
                if isinstance(result, DecodeError):
                    self.logger.warning(f"Skipping line {line_number}: {result.message}")
                    continue
                tasks.append(result)

        self.logger.info(f"Loaded {len(tasks)} tasks")
        return tasks

    def save(self, tasks: List[Task]) -> bool:
        """
        Rewrite the data file with the given tasks

        The new content is written to a temporary file next to the target and
        renamed over it, so the file on disk is always a complete list.

        Returns:
            True if saved, False if the write failed (the error is logged)
        """
        content = ''.join(task.encode() + '\n' for task in tasks)
        tmp_file = self.data_file.with_suffix(self.data_file.suffix + '.tmp')

        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_file.write_bytes(content.encode('utf-8'))
            tmp_file.replace(self.data_file)
        except OSError as e:
            self.logger.error(f"Failed to save tasks to {self.data_file}: {e}")
            with contextlib.suppress(OSError):
                if tmp_file.exists():
                    tmp_file.unlink()
            return False

        self.logger.debug(f"Saved {len(tasks)} tasks to {self.data_file}")
        return True
