# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed launcher for external commands.

The child inherits stdin/stdout/stderr and owns the terminal until it
exits; the shell blocks for the whole run. There is no timeout, no
capture and no background execution.

Popen reports exec failures (program missing, not executable) in the
parent as OSError, after the child has already exited, so a failed exec
can never continue running shell code.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class LaunchResult:
    """Result from a foreground run (no output capture)."""

    exit_code: int
    # Signal number if the child was killed by one, else None
    signal: int | None


def _wait_foreground(proc: subprocess.Popen) -> int:
    """Block until proc exits or dies from a signal.

    Ctrl+C reaches the child through the terminal's foreground process
    group; the child decides whether to exit, and the wait goes on until
    it is reaped.
    """
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            continue


class SubprocessLauncher:
    """Subprocess implementation of Launcher protocol."""

    def __init__(
        self,
        error_stream: TextIO | None = None,
        error_prefix: str = "rawsh",
    ):
        """Initialize launcher.

        Args:
            error_stream: Where spawn failures are reported
                (default: sys.stderr at call time)
            error_prefix: Prefix for reported messages
        """
        self.error_stream = error_stream
        self.error_prefix = error_prefix

    def _report(self, message: str) -> None:
        stream = self.error_stream or sys.stderr
        stream.write(f"{self.error_prefix}: {message}\n")
        stream.flush()

    def run_tty(self, argv: list[str]) -> LaunchResult:
        """Run argv in the foreground and wait for it to terminate.

        argv[0] is both the program (looked up on PATH) and the child's
        argv[0]. Stopped children keep the wait going; only a normal exit
        or death by signal ends it. The child is always reaped before
        this returns.

        Returns:
            LaunchResult

        Raises:
            OSError: the program could not be started (fork or exec)
        """
        with subprocess.Popen(argv) as proc:
            exit_code = _wait_foreground(proc)

        # Popen reports death by signal N as -N
        signal = -exit_code if exit_code < 0 else None

        return LaunchResult(exit_code=exit_code, signal=signal)

    def launch(self, tokens: list[str]) -> bool:
        """Run an external command; failures are reported, never raised.

        Returns:
            Always True
        """
        if not tokens:
            return True
        try:
            self.run_tty(tokens)
        except OSError as e:
            reason = e.strerror or str(e)
            self._report(f"{tokens[0]}: {reason}")
        return True

