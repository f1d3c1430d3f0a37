from __future__ import annotations

import pytest

from rawsh.utils import (
    displayable,
    format_history,
    has_prefix,
    split_redirect,
    tokenize,
)

# ----------------------------------------------------------------
# tokenize
# ----------------------------------------------------------------


def test_tokenize_collapses_surrounding_and_repeated_spaces():
    assert tokenize("  ls   -a  ") == ["ls", "-a"]


@pytest.mark.parametrize("line", ["", " ", "\t\t", " \r\n\a "])
def test_tokenize_blank_input_is_empty(line: str):
    assert tokenize(line) == []


def test_tokenize_splits_on_every_delimiter():
    assert tokenize("a\tb\rc\nd\ae f") == ["a", "b", "c", "d", "e", "f"]


def test_tokenize_has_no_quoting():
    assert tokenize('echo "hello world"') == ["echo", '"hello', 'world"']


def test_tokenize_keeps_non_ascii_tokens():
    assert tokenize("cat café.txt") == ["cat", "café.txt"]


# ----------------------------------------------------------------
# split_redirect
# ----------------------------------------------------------------


def test_split_redirect_without_operator():
    assert split_redirect(["a", "b"]) == (["a", "b"], None)


def test_split_redirect_with_target():
    assert split_redirect(["a", "b", ">", "out.txt"]) == (["a", "b"], "out.txt")


def test_split_redirect_ignores_tokens_after_target():
    assert split_redirect(["a", ">", "out", "extra"]) == (["a"], "out")


def test_split_redirect_trailing_operator_has_no_target():
    assert split_redirect(["a", ">"]) == (["a"], None)


# ----------------------------------------------------------------
# helpers
# ----------------------------------------------------------------


def test_format_history_numbers_from_one():
    assert format_history(["ls", "pwd"]) == "1 ls\n2 pwd\n"
    assert format_history([]) == ""


def test_has_prefix_compares_partial_length_only():
    assert has_prefix("history", "h")
    assert has_prefix("history", "")
    assert not has_prefix("h", "history")
    assert not has_prefix("help", "hi")


def test_displayable_replaces_escaped_bytes_only():
    raw = b"ls caf\xc3\xa9 \xff".decode("utf-8", errors="surrogateescape")

    assert displayable(raw) == "ls café �"
    assert displayable("plain") == "plain"
