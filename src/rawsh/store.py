# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Bounded command history for rawsh.

Handles the in-memory log of finished command lines, its persistence to a
plain line-oriented file, and the per-read-session navigation cursor.
"""

from __future__ import annotations

import sys
from collections import deque
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

# Maximum number of stored commands (oldest evicted first)
HISTORY_MAX = 1000


class HistoryStore:
    """Deque-backed implementation of HistoryLog protocol."""

    def __init__(
        self, max_entries: int = HISTORY_MAX,
        error_stream: TextIO | None = None,
        error_prefix: str = "rawsh",
    ):
        """Initialize an empty store.

        Args:
            max_entries: Capacity; adding past it evicts index 0
            error_stream: Where save() failures are reported
                (default: sys.stderr at call time)
            error_prefix: Prefix for reported messages
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.error_stream = error_stream
        self.error_prefix = error_prefix
        self._entries: deque[str] = deque(maxlen=max_entries)

    # ----------------------------------------------------------------
    # Container operations
    # ----------------------------------------------------------------

    def add(self, command: str) -> None:
        """Append a command; at capacity the oldest entry is dropped."""
        self._entries.append(command)

    @property
    def count(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def entries(self) -> list[str]:
        """Snapshot of all entries, oldest first."""
        return list(self._entries)

    # ----------------------------------------------------------------
    # Persistence
    # ----------------------------------------------------------------

    def load(self, path: Path) -> None:
        """Append every line of path, in file order.

        A missing or unreadable file is treated as "no history yet".
        Lines are taken verbatim apart from the trailing newline: a
        carriage return stays inside its line, and undecodable bytes
        survive a later save().
        """
        try:
            with path.open(
                "r", encoding="utf-8", errors="surrogateescape", newline="\n"
            ) as f:
                for line in f:
                    self.add(line.removesuffix("\n"))
        except OSError:
            return

    def save(self, path: Path) -> bool:
        """Overwrite path with one entry per line.

        Returns:
            True on success; False after reporting the failure
        """
        try:
            with path.open(
                "w", encoding="utf-8", errors="surrogateescape", newline="\n"
            ) as f:
                for cmd in self._entries:
                    f.write(cmd + "\n")
        except OSError as e:
            stream = self.error_stream or sys.stderr
            reason = e.strerror or str(e)
            stream.write(f"{self.error_prefix}: history save: {reason}\n")
            return False
        return True


class HistoryNavigator:
    """Navigation cursor over a history log for one read session.

    The cursor starts at len(history), meaning "the line being typed".
    up() moves toward older entries and stops at 0. down() moves toward
    newer entries; stepping past the newest entry returns to the line
    that was being typed when browsing started. Both return the text to
    show, or None when the cursor did not move.
    """

    def __init__(self, history) -> None:
        self.history = history
        self.position = len(history)
        self._saved_input = ""

    @property
    def browsing(self) -> bool:
        return self.position < len(self.history)

    def up(self, current_input: str = "") -> str | None:
        if self.position <= 0:
            return None
        if not self.browsing:
            self._saved_input = current_input
        self.position -= 1
        return self.history[self.position]

    def down(self) -> str | None:
        count = len(self.history)
        if self.position < count - 1:
            self.position += 1
            return self.history[self.position]
        if self.position == count - 1:
            # Past the newest entry: back to the in-progress line
            self.position = count
            return self._saved_input
        return None
