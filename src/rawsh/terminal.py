# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Terminal mode switching for the line editor.

Raw mode here means canonical line processing and echo are off; signals
(ISIG) and output processing are left alone so Ctrl+C and newline
translation behave as usual. Mode switches never flush pending input, so
typeahead entered while a command runs reaches the next prompt.

If the attributes cannot be read or written (stdin is a pipe, a file,
or a detached terminal) the controller reports degraded mode instead of
raising, and the editor falls back to plain line input.
"""

from __future__ import annotations

import termios

STDIN_FILENO = 0


class TerminalModeController:
    """termios implementation of Terminal protocol."""

    def __init__(self, fd: int | None = None) -> None:
        self.fd = STDIN_FILENO if fd is None else fd
        self._saved: list | None = None
        self.degraded = False

    @property
    def is_raw(self) -> bool:
        return self._saved is not None

    def enter_raw_mode(self) -> bool:
        """Capture current attributes and switch off ICANON and ECHO.

        Returns:
            True if raw mode is active, False in degraded mode
        """
        if self._saved is not None:
            return True
        try:
            original = termios.tcgetattr(self.fd)
            raw = termios.tcgetattr(self.fd)
            raw[3] &= ~(termios.ICANON | termios.ECHO)
            # Deliver every byte immediately
            raw[6][termios.VMIN] = 1
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(self.fd, termios.TCSANOW, raw)
        except (termios.error, OSError, ValueError):
            self.degraded = True
            return False

        self._saved = original
        self.degraded = False
        return True

    def restore_mode(self) -> None:
        """Reapply the attributes captured by enter_raw_mode()."""
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError, ValueError):
            self.degraded = True

