# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
rawsh kernel.

Session engine of the shell:
- tokenizes finished lines
- routes them to a builtin or to the launcher
- owns the history for the session (load on start, save on shutdown)

Important boundary:
- Kernel does not read keys or touch terminal modes; the line reader
  (raw editor or prompt_toolkit UI) does that and hands over text.
- Kernel consumes the injected ConfigModel, HistoryLog and Launcher.
"""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TextIO

from . import config as cfg_module
from .builtins import BUILTINS, Builtin
from .interfaces import ConfigModel, HistoryLog, Launcher
from .utils import displayable, tokenize


def write_crash_log(
    error: BaseException,
    raw_command: str = "",
    cwd: str = "",
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions raised while running a command.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        logs_dir = cfg_module.logs_dir(cfg_module.get_data_root())

        # Create logs directory only when we need to write
        logs_dir.mkdir(parents=True, exist_ok=True)

        crash_log_path = logs_dir / "crash.log"

        timestamp = datetime.now().isoformat()
        lines = [f"{timestamp}"]

        if raw_command:
            lines.append(f"raw={raw_command}")
        if cwd:
            lines.append(f"cwd={cwd}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(traceback.format_exception(
                type(error), error, error.__traceback__
            ))
        )
        lines.append("----")

        with crash_log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # If we can't write the crash log, fail silently
        # (we're already in an error state)
        pass


@dataclass
class Shell:
    """rawsh session engine."""

    history: HistoryLog
    launcher: Launcher
    config: ConfigModel

    builtins: dict[str, Builtin] = field(
        default_factory=lambda: dict(BUILTINS)
    )
    running: bool = False

    # History file resolved at start() (relative to the startup cwd)
    history_path: Path | None = None

    # Output streams; None means sys.stdout / sys.stderr at write time
    out: TextIO | None = None
    err: TextIO | None = None

    # -----------------------
    # Session
    # -----------------------

    def start(self) -> None:
        """Start a session: resolve and load the history file."""
        self.running = True
        if self.history_path is None:
            self.history_path = self.config.history_file().absolute()
        self.history.load(self.history_path)

    def shutdown(self) -> bool:
        """End the session and persist history.

        Returns:
            False if the history file could not be written
        """
        self.running = False
        if self.history_path is None:
            return True
        return self.history.save(self.history_path)

    def prompt(self) -> str:
        return self.config.prompt()

    def builtin_names(self) -> list[str]:
        return list(self.builtins)

    # -----------------------
    # Output
    # -----------------------

    def write(self, text: str) -> None:
        stream = self.out or sys.stdout
        stream.write(displayable(text))
        stream.flush()

    def report(self, message: str) -> None:
        """Write '<prefix>: <message>' to the error stream."""
        stream = self.err or sys.stderr
        stream.write(displayable(f"{self.config.error_prefix()}: {message}\n"))
        stream.flush()

    # -----------------------
    # Command handling
    # -----------------------

    def execute(self, tokens: list[str]) -> bool:
        """Run a tokenized command.

        Returns:
            The continue flag (False only from `exit`)
        """
        if not tokens:
            return True

        handler = self.builtins.get(tokens[0])
        if handler is not None:
            return handler(self, tokens)

        return self.launcher.launch(tokens)

    def handle_command(self, line: str) -> bool:
        """Tokenize and execute a finished line; updates `running`."""
        keep_going = self.execute(tokenize(line))
        if not keep_going:
            self.running = False
        return keep_going
