# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Builtin commands.

Every handler takes the shell and the full token list (args[0] is the
command name) and returns the continue flag. Only `exit` returns False.
Argument and filesystem errors are reported on the shell's error stream
and never stop the shell.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING

from .config import CLEAR_SCREEN
from .utils import format_history, split_redirect

if TYPE_CHECKING:
    from .kernel import Shell  # pragma: no cover

Builtin = Callable[["Shell", list[str]], bool]


def _os_error(shell: Shell, e: OSError) -> bool:
    shell.report(e.strerror or str(e))
    return True


# -----------------------
# Session / navigation
# -----------------------


def builtin_cd(shell: Shell, args: list[str]) -> bool:
    if len(args) < 2:
        shell.report('expected argument to "cd"')
        return True
    try:
        os.chdir(args[1])
    except OSError as e:
        return _os_error(shell, e)
    return True


def builtin_help(shell: Shell, args: list[str]) -> bool:
    for line in shell.config.help_lines():
        shell.write(line + "\n")
    for name in shell.builtins:
        shell.write(f" {name}\n")
    footer = shell.config.help_footer()
    if footer:
        shell.write(footer + "\n")
    return True


def builtin_exit(shell: Shell, args: list[str]) -> bool:
    return False


def builtin_pwd(shell: Shell, args: list[str]) -> bool:
    try:
        cwd = os.getcwd()
    except OSError as e:
        return _os_error(shell, e)
    shell.write(cwd + "\n")
    return True


def builtin_clear(shell: Shell, args: list[str]) -> bool:
    shell.write(CLEAR_SCREEN)
    return True


def builtin_history(shell: Shell, args: list[str]) -> bool:
    shell.write(format_history(list(shell.history)))
    return True


# -----------------------
# Files
# -----------------------


def builtin_ls(shell: Shell, args: list[str]) -> bool:
    """ls [-a] [DIR]: list entries, hiding dotfiles unless -a."""
    show_all = "-a" in args[1:]
    paths = [a for a in args[1:] if a != "-a"]
    path = paths[0] if paths else "."

    try:
        names = os.listdir(path)
    except OSError as e:
        return _os_error(shell, e)

    if show_all:
        names = [".", ".."] + names
    for name in names:
        if name.startswith(".") and not show_all:
            continue
        shell.write(name + "\n")
    return True


def builtin_cat(shell: Shell, args: list[str]) -> bool:
    if len(args) < 2:
        shell.report('expected argument to "cat"')
        return True
    try:
        with open(args[1], encoding="utf-8", errors="replace") as f:
            for line in f:
                shell.write(line)
    except OSError as e:
        return _os_error(shell, e)
    return True


def builtin_grep(shell: Shell, args: list[str]) -> bool:
    """grep PATTERN FILE: print matching lines as '<n>: <line>'."""
    if len(args) < 3:
        shell.report("grep requires pattern and filename")
        return True
    pattern, filename = args[1], args[2]
    try:
        with open(filename, encoding="utf-8", errors="replace") as f:
            for number, line in enumerate(f, start=1):
                if pattern in line:
                    if not line.endswith("\n"):
                        line += "\n"
                    shell.write(f"{number}: {line}")
    except OSError as e:
        return _os_error(shell, e)
    return True


def builtin_touch(shell: Shell, args: list[str]) -> bool:
    if len(args) < 2:
        shell.report("touch requires a filename")
        return True
    try:
        with open(args[1], "a", encoding="utf-8"):
            pass
    except OSError as e:
        return _os_error(shell, e)
    return True


def builtin_echo(shell: Shell, args: list[str]) -> bool:
    """echo WORDS... [> FILE]

    Each word is followed by one space. With a redirect the words go to
    FILE (truncated, no newline) instead of the terminal.
    """
    words, target = split_redirect(args[1:])
    text = "".join(f"{w} " for w in words)
    if target is None:
        shell.write(text + "\n")
        return True
    try:
        with open(target, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write(text)
    except OSError as e:
        return _os_error(shell, e)
    return True


def builtin_rm(shell: Shell, args: list[str]) -> bool:
    if len(args) < 2:
        shell.report("rm requires a filename")
        return True
    target = args[1]
    try:
        # Files are unlinked; empty directories are removed too
        if os.path.isdir(target) and not os.path.islink(target):
            os.rmdir(target)
        else:
            os.remove(target)
    except OSError as e:
        return _os_error(shell, e)
    return True


# Declared order is also the completion and help order
BUILTINS: dict[str, Builtin] = {
    "cd": builtin_cd,
    "help": builtin_help,
    "exit": builtin_exit,
    "ls": builtin_ls,
    "pwd": builtin_pwd,
    "clear": builtin_clear,
    "history": builtin_history,
    "cat": builtin_cat,
    "grep": builtin_grep,
    "touch": builtin_touch,
    "echo": builtin_echo,
    "rm": builtin_rm,
}
