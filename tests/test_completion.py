"""
Tests for ShellCompleter: prefix matching over builtins and the live
working directory, the multi-match listing, and the prompt_toolkit
Completer surface.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from rawsh.builtins import BUILTINS
from rawsh.completion import ShellCompleter


@pytest.fixture
def empty_dir(tmp_path: Path) -> Path:
    d = tmp_path / "empty"
    d.mkdir()
    return d


@pytest.fixture
def completer(empty_dir: Path) -> ShellCompleter:
    return ShellCompleter(BUILTINS, cwd_fn=lambda: str(empty_dir))


def test_complete_h_matches_help_and_history(completer: ShellCompleter):
    assert set(completer.complete("h")) == {"help", "history"}


def test_complete_keeps_builtin_declared_order(completer: ShellCompleter):
    assert completer.complete("c") == ["cd", "clear", "cat"]


def test_empty_partial_matches_every_builtin(completer: ShellCompleter):
    assert completer.complete("") == list(BUILTINS)


def test_no_match_returns_empty_list(completer: ShellCompleter):
    assert completer.complete("zzz") == []


def test_partial_longer_than_candidate_does_not_match(completer: ShellCompleter):
    assert completer.complete("cdx") == []


def test_filenames_follow_builtins(tmp_path: Path):
    (tmp_path / "hello.txt").write_text("", encoding="utf-8")
    (tmp_path / "other.txt").write_text("", encoding="utf-8")
    c = ShellCompleter(BUILTINS, cwd_fn=lambda: str(tmp_path))

    assert c.complete("h") == ["help", "history", "hello.txt"]


def test_directory_is_reread_on_every_call(tmp_path: Path):
    c = ShellCompleter(BUILTINS, cwd_fn=lambda: str(tmp_path))
    assert c.complete("notes") == []

    (tmp_path / "notes.md").write_text("", encoding="utf-8")

    assert c.complete("notes") == ["notes.md"]


def test_file_named_like_builtin_is_listed_once(tmp_path: Path):
    (tmp_path / "echo").write_text("", encoding="utf-8")
    c = ShellCompleter(BUILTINS, cwd_fn=lambda: str(tmp_path))

    assert c.complete("ec") == ["echo"]


def test_unreadable_directory_falls_back_to_builtins(tmp_path: Path):
    c = ShellCompleter(BUILTINS, cwd_fn=lambda: str(tmp_path / "gone"))

    assert c.complete("e") == ["exit", "echo"]


def test_default_cwd_is_process_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    (tmp_path / "zebra").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert ShellCompleter(BUILTINS).complete("zeb") == ["zebra"]


# ----------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------


def test_render_matches_lists_all_then_reprints_prompt(completer: ShellCompleter):
    text = completer.render_matches(["help", "history"], "> ", "h")

    assert text == "\nhelp history \n> h"


@pytest.mark.parametrize("matches", [[], ["help"]])
def test_render_matches_is_empty_for_zero_or_one(
    completer: ShellCompleter, matches: list[str]
):
    assert completer.render_matches(matches, "> ", "h") == ""


# ----------------------------------------------------------------
# prompt_toolkit Completer surface
# ----------------------------------------------------------------


def test_get_completions_replaces_text_before_cursor(completer: ShellCompleter):
    doc = Document("hi", cursor_position=2)

    results = list(completer.get_completions(doc, CompleteEvent()))

    assert [r.text for r in results] == ["history"]
    assert results[0].start_position == -2


def test_get_completions_meta_marks_files(tmp_path: Path):
    (tmp_path / "hosts").write_text("", encoding="utf-8")
    c = ShellCompleter(BUILTINS, cwd_fn=lambda: str(tmp_path))

    results = list(c.get_completions(Document("ho"), CompleteEvent()))

    assert [r.text for r in results] == ["hosts"]
    assert results[0].display_meta_text == "file"
