import os
import tempfile

import pytest

# Keep app.log out of the source tree while tests run.
os.environ.setdefault("SUBGLOSS_LOG_DIR", tempfile.mkdtemp(prefix="subgloss-logs-"))

from subgloss import logging_manager as log_mgr  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_log_context():
    log_mgr.clear_log_context()
    yield
    log_mgr.clear_log_context()


@pytest.fixture(autouse=True)
def _clear_subgloss_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUBGLOSS_DICTIONARY", raising=False)
    monkeypatch.delenv("SUBGLOSS_LANGUAGE", raising=False)
