# rawsh — Raw-Mode Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and data root resolution for rawsh.

Handles:
- Data root resolution (RAWSH_DATA_HOME, ~/.local/share)
- Packaged YAML defaults loading (rawsh.defaults/*.yaml)
- Terminal control sequences + ANSI coloring constants
"""

from __future__ import annotations

import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

# -----------------------
# Terminal constants
# -----------------------

# Names accepted by system.prompt_color, plus "reset"
ANSI_COLORS: dict[str, str] = {
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "reset": "\033[0m",
}

# Clear whole screen and home the cursor
CLEAR_SCREEN = "\033[2J\033[H"
# Erase from cursor to end of line
CLEAR_TO_EOL = "\033[K"

# Fallbacks used when a key is absent from system.yaml
DEFAULT_PROMPT = "> "
DEFAULT_ERROR_PREFIX = "rawsh"
DEFAULT_HISTORY_FILE = ".shell_history"
DEFAULT_HISTORY_MAX = 1000
DEFAULT_BUFFER_INCREMENT = 1024


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("history.max_entries", 1000)
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur

    # ---- typed accessors (fall back to module defaults) ----

    def prompt(self) -> str:
        text = self.get_path("system.prompt", DEFAULT_PROMPT)
        text = str(text) if text is not None else DEFAULT_PROMPT
        color = ANSI_COLORS.get(str(self.get_path("system.prompt_color", "")))
        if color:
            return f"{color}{text}{ANSI_COLORS['reset']}"
        return text

    def error_prefix(self) -> str:
        return str(self.get_path("system.error_prefix", DEFAULT_ERROR_PREFIX))

    def history_file(self) -> Path:
        return Path(str(self.get_path("history.file", DEFAULT_HISTORY_FILE)))

    def history_max(self) -> int:
        return _positive_int(
            self.get_path("history.max_entries", DEFAULT_HISTORY_MAX),
            DEFAULT_HISTORY_MAX,
        )

    def buffer_increment(self) -> int:
        return _positive_int(
            self.get_path("editor.buffer_increment", DEFAULT_BUFFER_INCREMENT),
            DEFAULT_BUFFER_INCREMENT,
        )

    def help_lines(self) -> list[str]:
        lines = self.get_path("help.lines", [])
        if not isinstance(lines, list):
            return []
        return [str(line) for line in lines]

    def help_footer(self) -> str:
        footer = self.get_path("help.footer", "")
        return str(footer) if footer else ""


def _positive_int(value: Any, default: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n > 0 else default


# -----------------------
# Data root
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for rawsh.

    Resolution order:
    1. RAWSH_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    rawsh_data_home = os.getenv("RAWSH_DATA_HOME")
    if rawsh_data_home:
        root = Path(rawsh_data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def logs_dir(data_root: Path) -> Path:
    """<data_root>/rawsh/logs"""
    return data_root / "rawsh" / "logs"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("rawsh.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from rawsh/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))


def use_prompt_toolkit_ui() -> bool:
    """True when RAWSH_UI asks for the prompt_toolkit line reader."""
    return os.environ.get("RAWSH_UI", "").strip().lower() in (
        "prompt_toolkit", "ptk",
    )
