#!/usr/bin/env python3
"""
duke CLI

Line-oriented task tracker. Reads one command per line from standard input
and keeps the task list in data/duke.txt.

Usage:
    ./duke-cli.py                          # Start a session
    ./duke-cli.py --data-file ~/tasks.txt  # Use another data file
    ./duke-cli.py --log-level INFO         # Show what is loaded and saved

Commands:
    list
    mark <n>
    unmark <n>
    delete <n>
    todo <description>
    deadline <description> /by <date>
    event <description> /from <start> /to <end>
    bye
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from duke import main

if __name__ == '__main__':
    sys.exit(main())
