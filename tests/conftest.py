"""Shared fixtures: route navigation logs into the test's tmp dir."""

from __future__ import annotations

import pytest

from virtual_eye.core.telemetry.loggers import navigation_logger as nav_module


@pytest.fixture(autouse=True)
def session_logs(tmp_path):
    nav_module.reset_navigation_logger()
    log_dir = tmp_path / "logs"
    nav_module.get_navigation_logger(session_dir=log_dir)
    yield log_dir
    nav_module.reset_navigation_logger()
