# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for rawsh.
"""

import re

# Space, tab, carriage return, newline, bell
TOKEN_DELIMITERS = " \t\r\n\a"

_TOKEN_PATTERN = re.compile(f"[^{re.escape(TOKEN_DELIMITERS)}]+")

REDIRECT_TOKEN = ">"


def tokenize(line: str) -> list[str]:
    """Split a command line into whitespace-delimited tokens.

    Consecutive delimiters collapse; no empty tokens are produced.
    There is no quoting: '"a b"' yields two tokens.

    Args:
        line: The finished command line

    Returns:
        Tokens in order (empty list for blank input)
    """
    if not line:
        return []
    return _TOKEN_PATTERN.findall(line)


def split_redirect(args: list[str]) -> tuple[list[str], str | None]:
    """Split echo-style arguments at the first '>' token.

    Args:
        args: Arguments after the command name

    Returns:
        (words before '>', redirect target or None)

    A trailing '>' with no target yields (words, None); anything after
    the target is ignored.
    """
    words: list[str] = []
    for i, arg in enumerate(args):
        if arg == REDIRECT_TOKEN:
            target = args[i + 1] if i + 1 < len(args) else None
            return words, target
        words.append(arg)
    return words, None


def format_history(entries: list[str]) -> str:
    """Format history entries as '<n> <command>' lines, 1-indexed."""
    return "".join(
        f"{i} {cmd}\n" for i, cmd in enumerate(entries, start=1)
    )


def has_prefix(candidate: str, partial: str) -> bool:
    """True when the first len(partial) chars of candidate equal partial."""
    return candidate[: len(partial)] == partial


def displayable(text: str) -> str:
    """Swap surrogate-escaped bytes for U+FFFD so text can be printed."""
    return text.encode("utf-8", errors="surrogateescape").decode(
        "utf-8", errors="replace"
    )
