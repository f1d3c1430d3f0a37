"""
Tests for TerminalModeController.

termios calls are replaced with an in-memory fake so the suite never
changes the attributes of the terminal running the tests.
"""

from __future__ import annotations

import copy
import os
import termios

import pytest

from rawsh.terminal import TerminalModeController

LFLAG = 3
CC = 6

ORIGINAL_LFLAG = termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN


class FakeTermios:
    def __init__(self) -> None:
        cc = [b"\x00"] * 32
        self.attrs = [0, 0, 0, ORIGINAL_LFLAG, 38400, 38400, cc]
        self.set_calls: list[tuple[int, int, list]] = []

    def tcgetattr(self, fd: int) -> list:
        return copy.deepcopy(self.attrs)

    def tcsetattr(self, fd: int, when: int, attrs: list) -> None:
        self.set_calls.append((fd, when, copy.deepcopy(attrs)))
        self.attrs = copy.deepcopy(attrs)


@pytest.fixture
def fake_termios(monkeypatch: pytest.MonkeyPatch) -> FakeTermios:
    fake = FakeTermios()
    monkeypatch.setattr(termios, "tcgetattr", fake.tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", fake.tcsetattr)
    return fake


def test_enter_raw_mode_disables_canonical_and_echo(fake_termios: FakeTermios):
    ctl = TerminalModeController(fd=0)

    assert ctl.enter_raw_mode() is True
    assert ctl.is_raw is True

    fd, when, attrs = fake_termios.set_calls[-1]
    assert fd == 0
    # Pending input is kept
    assert when == termios.TCSANOW
    assert attrs[LFLAG] & termios.ICANON == 0
    assert attrs[LFLAG] & termios.ECHO == 0
    # Signals stay enabled
    assert attrs[LFLAG] & termios.ISIG
    assert attrs[CC][termios.VMIN] == 1
    assert attrs[CC][termios.VTIME] == 0


def test_restore_mode_reapplies_original_attributes(fake_termios: FakeTermios):
    ctl = TerminalModeController(fd=0)
    ctl.enter_raw_mode()

    ctl.restore_mode()

    assert ctl.is_raw is False
    assert fake_termios.attrs[LFLAG] == ORIGINAL_LFLAG


def test_restore_without_enter_is_noop(fake_termios: FakeTermios):
    ctl = TerminalModeController(fd=0)

    ctl.restore_mode()

    assert fake_termios.set_calls == []


def test_second_enter_keeps_first_snapshot(fake_termios: FakeTermios):
    ctl = TerminalModeController(fd=0)
    ctl.enter_raw_mode()
    ctl.enter_raw_mode()

    ctl.restore_mode()

    assert len(fake_termios.set_calls) == 2
    assert fake_termios.attrs[LFLAG] == ORIGINAL_LFLAG


def test_mode_switches_never_flush_typeahead(fake_termios: FakeTermios):
    ctl = TerminalModeController(fd=0)

    ctl.enter_raw_mode()
    ctl.restore_mode()

    whens = [when for _, when, _ in fake_termios.set_calls]
    assert whens == [termios.TCSANOW, termios.TCSADRAIN]
    assert termios.TCSAFLUSH not in whens


def test_non_tty_descriptor_degrades_instead_of_raising():
    read_fd, write_fd = os.pipe()
    try:
        ctl = TerminalModeController(fd=read_fd)

        assert ctl.enter_raw_mode() is False
        assert ctl.degraded is True
        assert ctl.is_raw is False

        # Still safe to call
        ctl.restore_mode()
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_set_failure_degrades(fake_termios: FakeTermios, monkeypatch: pytest.MonkeyPatch):
    def failing_set(fd, when, attrs):
        raise termios.error(25, "Inappropriate ioctl for device")

    monkeypatch.setattr(termios, "tcsetattr", failing_set)
    ctl = TerminalModeController(fd=0)

    assert ctl.enter_raw_mode() is False
    assert ctl.degraded is True
