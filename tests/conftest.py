from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _capture_diagnostics(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="sheetscript")
