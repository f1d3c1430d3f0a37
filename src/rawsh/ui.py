# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
prompt_toolkit line reader.

Alternative to the raw editor (RAWSH_UI=prompt_toolkit). It shares the
shell's completer and history store, so Tab and Up/Down see the same data,
but prompt_toolkit owns key handling and rendering.

Differences from the raw editor:
- prompt_toolkit skips a line identical to the previous history entry,
- completions show in a menu instead of being printed above the prompt.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import History
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style

from .completion import ShellCompleter

if TYPE_CHECKING:
    from .interfaces import HistoryLog  # pragma: no cover
    from .kernel import Shell  # pragma: no cover


def _default_style_dict() -> dict[str, str]:
    # Conservative: works across prompt_toolkit versions.
    return {
        "completion-menu": "bg:#111111 #d0d0d0",
        "completion-menu.completion": "bg:#111111 #d0d0d0",
        "completion-menu.completion.current": "bg:#303030 #ffffff bold",
        "completion-menu.meta.completion": "bg:#111111 #808080",
        "completion-menu.meta.completion.current": "bg:#303030 #a0a0a0",
        "scrollbar.background": "bg:#202020",
        "scrollbar.button": "bg:#505050",
    }


class StoreHistory(History):
    """prompt_toolkit History backed by the shell's HistoryLog."""

    def __init__(self, store: HistoryLog) -> None:
        super().__init__()
        self.store = store

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit wants newest first
        return list(reversed(list(self.store)))

    def store_string(self, string: str) -> None:
        self.store.add(string)


class PromptToolkitUI:
    """
    Terminal-friendly prompt_toolkit reader:
      - Tab completes builtins + working directory entries (menu)
      - Up/Down browse the shared history store
      - Ctrl+L clears the screen
    """

    def __init__(self, shell: Shell) -> None:
        self.shell = shell
        self.session: PromptSession[str] | None = None
        self._style = Style.from_dict(_default_style_dict())
        self.completer = ShellCompleter(shell.builtin_names())
        self.history = StoreHistory(shell.history)

    # ---------- session ----------

    def _ensure_session(self) -> None:
        if self.session is not None:
            return

        self.session = PromptSession(
            history=self.history,
            key_bindings=self.build_key_bindings(),
            completer=self.completer,
            complete_while_typing=False,
            style=self._style,
        )

    # ---------- public API ----------

    def read(self, prompt: str) -> str:
        self._ensure_session()
        assert self.session is not None

        with patch_stdout():
            # prompt may carry ANSI color from config, so preserve it
            return self.session.prompt(ANSI(prompt))

    # ---------- keybindings ----------

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-l")
        def _(event):
            event.app.renderer.clear()
            event.app.invalidate()

        return kb
