# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces enable clean separation between the shell session,
the line editor, history persistence, and process launching.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol


class HistoryLog(Protocol):
    """Protocol for the bounded command history."""

    def add(self, command: str) -> None:
        """Append a command, evicting the oldest entry at capacity."""
        ...

    def __len__(self) -> int:
        ...

    def __getitem__(self, index: int) -> str:
        ...

    def __iter__(self) -> Iterator[str]:
        ...

    def load(self, path: Path) -> None:
        """Load entries from a history file (missing file = no history)."""
        ...

    def save(self, path: Path) -> bool:
        """Overwrite a history file with the current entries."""
        ...


class Launcher(Protocol):
    """Protocol for external command execution."""

    def launch(self, tokens: list[str]) -> bool:
        """Run tokens[0] with tokens as argv and wait for it.

        Returns:
            Always True (external failures never stop the shell)
        """
        ...


class Terminal(Protocol):
    """Protocol for terminal mode switching."""

    def enter_raw_mode(self) -> bool:
        """Disable canonical input and echo. False if unavailable."""
        ...

    def restore_mode(self) -> None:
        """Reapply the attributes captured by enter_raw_mode()."""
        ...


class CompletionSource(Protocol):
    """Protocol for prefix completion of the line buffer."""

    def complete(self, partial: str) -> list[str]:
        """Return every candidate that starts with partial."""
        ...

    def render_matches(
        self, matches: list[str], prompt: str, partial: str
    ) -> str:
        """Return the text shown when more than one candidate matches."""
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    def prompt(self) -> str:
        ...

    def error_prefix(self) -> str:
        ...

    def history_file(self) -> Path:
        ...

    def history_max(self) -> int:
        ...

    def buffer_increment(self) -> int:
        ...

    def help_lines(self) -> list[str]:
        ...

    def help_footer(self) -> str:
        ...
