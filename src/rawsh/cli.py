# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
rawsh CLI entry point and REPL loop.

Design:
- CLI owns process startup, wiring and shutdown.
- Shell (kernel) is the session engine (config+history+launcher injected).
- The line reader is the raw-mode LineEditor by default; RAWSH_UI=prompt_toolkit
  switches to PromptToolkitUI.
"""

from __future__ import annotations

import os
import sys
from typing import Protocol

from . import config
from .completion import ShellCompleter
from .editor import LineEditor
from .executor import SubprocessLauncher
from .kernel import Shell, write_crash_log
from .store import HistoryStore
from .terminal import TerminalModeController


class LineReader(Protocol):
    def read(self, prompt: str) -> str:
        ...


def run_repl(shell: Shell, reader: LineReader) -> None:
    """Run the read-eval loop until `exit` or end of input."""
    while shell.running:
        try:
            line = reader.read(shell.prompt())
        except (KeyboardInterrupt, EOFError):
            break

        try:
            shell.handle_command(line)
        except MemoryError:
            raise
        except KeyboardInterrupt:
            # Interrupted while waiting on a child; keep the session
            shell.write("\n")
        except Exception as e:
            # Unhandled exception - write crash log, report, continue
            write_crash_log(e, raw_command=line, cwd=_safe_cwd())
            shell.report(
                f"unhandled exception: {type(e).__name__}: {e}"
            )


def _safe_cwd() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""


def build_shell(cfg: config.YAMLConfig) -> Shell:
    """Explicit wiring: config + history + launcher injected into Shell."""
    prefix = cfg.error_prefix()
    history = HistoryStore(max_entries=cfg.history_max(), error_prefix=prefix)
    launcher = SubprocessLauncher(error_prefix=prefix)
    return Shell(history=history, launcher=launcher, config=cfg)


def build_reader(shell: Shell, cfg: config.YAMLConfig) -> LineReader:
    if config.use_prompt_toolkit_ui():
        from .ui import PromptToolkitUI

        return PromptToolkitUI(shell)

    return LineEditor(
        history=shell.history,
        completer=ShellCompleter(shell.builtin_names()),
        terminal=TerminalModeController(),
        buffer_increment=cfg.buffer_increment(),
    )


def main() -> None:
    """Main entry point for rawsh."""
    cfg = config.load_system_config()
    shell = build_shell(cfg)
    reader = build_reader(shell, cfg)

    shell.start()
    try:
        run_repl(shell, reader)
    except MemoryError:
        # Fatal: no history save, a truncated line may be in memory
        sys.stderr.write(f"{cfg.error_prefix()}: allocation error\n")
        sys.exit(1)
    except BaseException:
        shell.shutdown()
        raise
    shell.shutdown()
