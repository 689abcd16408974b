"""Tests for the Ctrl+C handler."""

from __future__ import annotations

import signal

import pytest

import virtual_eye.utils.ctrl_handler as ctrl_module
from virtual_eye.utils.ctrl_handler import CtrlCHandler


def test_sigint_sets_should_stop(monkeypatch: pytest.MonkeyPatch) -> None:
    registered = {}
    monkeypatch.setattr(ctrl_module.signal, "signal", lambda sig, handler: registered.update({sig: handler}))

    handler = CtrlCHandler()
    assert handler.should_stop is False

    registered[signal.SIGINT](signal.SIGINT, None)

    assert handler.should_stop is True
