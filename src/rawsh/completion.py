# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Prefix completion over builtin names and the working directory.

The raw line editor calls complete() with the whole buffer; the
prompt_toolkit front end goes through get_completions(). Both see the
same candidates: builtins in table order, then directory entries in
the order the OS lists them. The directory is read again on every
request.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .utils import has_prefix


class ShellCompleter(Completer):
    """Completes builtin names and filenames in the current directory."""

    def __init__(
        self,
        builtin_names: Iterable[str],
        cwd_fn: Callable[[], str] = os.getcwd,
    ) -> None:
        self.builtin_names = list(builtin_names)
        self.cwd_fn = cwd_fn

    def _list_dir(self) -> list[str]:
        try:
            return os.listdir(self.cwd_fn())
        except OSError:
            return []

    def complete(self, partial: str) -> list[str]:
        """Return every candidate that has partial as a prefix.

        An empty partial matches everything. A filename equal to a
        builtin name is only listed once.
        """
        matches: list[str] = []
        seen: set[str] = set()
        for name in self.builtin_names:
            if has_prefix(name, partial) and name not in seen:
                matches.append(name)
                seen.add(name)
        for name in self._list_dir():
            if has_prefix(name, partial) and name not in seen:
                matches.append(name)
                seen.add(name)
        return matches

    def render_matches(
        self, matches: list[str], prompt: str, partial: str
    ) -> str:
        """Text printed above the prompt when several candidates match.

        Empty when there is nothing to list (zero or one match).
        """
        if len(matches) <= 1:
            return ""
        listing = "".join(f"{m} " for m in matches)
        return f"\n{listing}\n{prompt}{partial}"

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor or ""
        for match in self.complete(text):
            yield Completion(
                match,
                start_position=-len(text),
                display_meta="builtin" if match in self.builtin_names
                else "file",
            )
