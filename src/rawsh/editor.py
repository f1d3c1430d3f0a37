# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Raw-mode line editor.

One call to LineEditor.read() is one read session:
- the terminal is switched to raw mode,
- keys are consumed one byte at a time and drive a small state machine
  (NORMAL / ESCAPE_SEQ1 / ESCAPE_SEQ2),
- the terminal is restored the moment Enter is pressed, before the line
  is handed back, so anything the command prints sees a normal terminal.

Supported keys: printable input (appended at the end of the line),
Backspace, Enter, Tab (completion), Up/Down (history).

Known limitations:
- editing is append-only; there is no mid-line cursor movement,
- escape sequences are assumed to be exactly three bytes (ESC + two);
  only ESC [ A and ESC [ B mean anything, every other payload is dropped.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from enum import Enum, auto
from typing import BinaryIO

from .config import CLEAR_TO_EOL, DEFAULT_BUFFER_INCREMENT
from .interfaces import CompletionSource, HistoryLog, Terminal
from .store import HistoryNavigator
from .terminal import STDIN_FILENO

KEY_CTRL_H = 8
KEY_TAB = 9
KEY_NEWLINE = 10
KEY_RETURN = 13
KEY_ESCAPE = 27
KEY_DELETE = 127

ESCAPE_INTRO = ord("[")
ARROW_UP = ord("A")
ARROW_DOWN = ord("B")


class EditorState(Enum):
    """Key-parsing states of a read session."""
    NORMAL = auto()
    ESCAPE_SEQ1 = auto()  # saw ESC
    ESCAPE_SEQ2 = auto()  # saw ESC + first payload byte


class LineBuffer:
    """Growable byte buffer for the line being edited.

    Capacity starts at `increment` and grows by exactly `increment`
    whenever a write would not fit, so length <= capacity always holds.
    Text is kept as UTF-8 bytes and decoded only when read back; bytes
    that are not valid UTF-8 round-trip as surrogate escapes.
    """

    def __init__(self, increment: int = DEFAULT_BUFFER_INCREMENT) -> None:
        if increment <= 0:
            raise ValueError("increment must be positive")
        self.increment = increment
        self._data = bytearray(increment)
        self.length = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def position(self) -> int:
        # Append-only editing: the cursor is always at the end
        return self.length

    def _reserve(self, needed: int) -> None:
        while needed > len(self._data):
            self._data.extend(bytes(self.increment))

    def append(self, byte: int) -> None:
        self._reserve(self.length + 1)
        self._data[self.length] = byte
        self.length += 1

    def erase_last(self) -> int:
        """Drop the last character (all of its UTF-8 bytes).

        Returns:
            Number of bytes removed (0 if the buffer was already empty)
        """
        end = self.length
        if end == 0:
            return 0
        self.length -= 1
        # Continuation bytes are 0b10xxxxxx
        while self.length > 0 and (self._data[self.length] & 0xC0) == 0x80:
            self.length -= 1
        return end - self.length

    def replace(self, text: str) -> None:
        data = text.encode("utf-8", errors="surrogateescape")
        self._reserve(len(data))
        self._data[: len(data)] = data
        self.length = len(data)

    def raw(self) -> bytes:
        return bytes(self._data[: self.length])

    def text(self) -> str:
        return self.raw().decode("utf-8", errors="surrogateescape")


def _stdin_reader() -> Callable[[], bytes]:
    fd = STDIN_FILENO
    return lambda: os.read(fd, 1)


class LineEditor:
    """Reads one command line at a time from a raw-mode terminal."""

    def __init__(
        self,
        history: HistoryLog,
        completer: CompletionSource,
        terminal: Terminal,
        read_byte: Callable[[], bytes] | None = None,
        output: BinaryIO | None = None,
        buffer_increment: int = DEFAULT_BUFFER_INCREMENT,
    ) -> None:
        """Initialize the editor.

        Args:
            history: Store that receives finished non-empty lines and
                backs Up/Down navigation
            completer: Source for Tab completion
            terminal: Raw-mode switch, entered/restored per read
            read_byte: Returns the next input byte, or b"" at end of
                input (default: one os.read from stdin)
            output: Binary stream for echo and redraws
                (default: sys.stdout.buffer)
            buffer_increment: LineBuffer growth step
        """
        self.history = history
        self.completer = completer
        self.terminal = terminal
        self.read_byte = read_byte or _stdin_reader()
        self.output = output if output is not None else sys.stdout.buffer
        self.buffer_increment = buffer_increment

        # Per-session state (reset by read())
        self.state = EditorState.NORMAL
        self.buffer = LineBuffer(buffer_increment)
        self.navigator = HistoryNavigator(history)
        self._prompt = ""
        self._escape_first = 0

    # ----------------------------------------------------------------
    # Output helpers
    # ----------------------------------------------------------------

    def _write(self, data: bytes | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8", errors="surrogateescape")
        self.output.write(data)
        self.output.flush()

    def _repaint(self) -> None:
        """Carriage return, prompt, buffer, clear to end of line."""
        self._write(
            b"\r" + self._prompt.encode("utf-8") + self.buffer.raw()
            + CLEAR_TO_EOL.encode("ascii")
        )

    # ----------------------------------------------------------------
    # Read session
    # ----------------------------------------------------------------

    def read(self, prompt: str) -> str:
        """Print prompt and edit one line until Enter.

        Returns:
            The finished line (may be empty)

        Raises:
            EOFError: input ended before anything was typed
        """
        self._prompt = prompt
        self.state = EditorState.NORMAL
        self.buffer = LineBuffer(self.buffer_increment)
        self.navigator = HistoryNavigator(self.history)

        self._write(prompt)

        if not self.terminal.enter_raw_mode():
            return self._read_plain_line()

        try:
            while True:
                key = self.read_byte()
                if not key:
                    return self._finish_at_eof()
                line = self.feed(key[0])
                if line is not None:
                    return line
        finally:
            self.terminal.restore_mode()

    def feed(self, byte: int) -> str | None:
        """Advance the state machine by one input byte.

        Returns:
            The finished line when byte completes it, else None
        """
        if self.state is EditorState.ESCAPE_SEQ1:
            self._escape_first = byte
            self.state = EditorState.ESCAPE_SEQ2
            return None

        if self.state is EditorState.ESCAPE_SEQ2:
            self.state = EditorState.NORMAL
            if self._escape_first == ESCAPE_INTRO:
                if byte == ARROW_UP:
                    self._history_up()
                elif byte == ARROW_DOWN:
                    self._history_down()
            return None

        if byte == KEY_ESCAPE:
            self.state = EditorState.ESCAPE_SEQ1
        elif byte in (KEY_NEWLINE, KEY_RETURN):
            return self._finish()
        elif byte == KEY_TAB:
            self._complete()
        elif byte in (KEY_DELETE, KEY_CTRL_H):
            removed = self.buffer.erase_last()
            if removed == 1:
                self._write(b"\b \b")
            elif removed:
                # Wide glyphs may span two columns
                self._repaint()
        elif byte >= 32:
            self.buffer.append(byte)
            self._write(bytes([byte]))
        return None

    def _finish(self) -> str:
        line = self.buffer.text()
        self._write(b"\n")
        self.terminal.restore_mode()
        if line:
            self.history.add(line)
        return line

    def _finish_at_eof(self) -> str:
        if self.buffer.length == 0:
            self._write(b"\n")
            self.terminal.restore_mode()
            raise EOFError
        return self._finish()

    # ----------------------------------------------------------------
    # Key actions
    # ----------------------------------------------------------------

    def _history_up(self) -> None:
        entry = self.navigator.up(self.buffer.text())
        if entry is not None:
            self.buffer.replace(entry)
            self._repaint()

    def _history_down(self) -> None:
        entry = self.navigator.down()
        if entry is not None:
            self.buffer.replace(entry)
            self._repaint()

    def _complete(self) -> None:
        partial = self.buffer.text()
        matches = self.completer.complete(partial)
        listing = self.completer.render_matches(matches, self._prompt, partial)
        if listing:
            self._write(listing)
        if matches:
            self.buffer.replace(matches[0])
            self._repaint()

    # ----------------------------------------------------------------
    # Degraded mode
    # ----------------------------------------------------------------

    def _read_plain_line(self) -> str:
        """Read up to newline without echo or editing keys."""
        while True:
            key = self.read_byte()
            if not key:
                if self.buffer.length == 0:
                    raise EOFError
                break
            if key[0] == KEY_NEWLINE:
                break
            self.buffer.append(key[0])

        line = self.buffer.text().rstrip("\r")
        if line:
            self.history.add(line)
        return line
