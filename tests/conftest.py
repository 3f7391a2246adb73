"""Shared fixtures for the quickapply test suite.

Everything runs offline: pages are in-memory fakes from tests/fakes.py and
all pacing delays are zero.
"""

import os
import tempfile
from pathlib import Path

import pytest

# Keep the log file out of the working tree; must be set before quickapply is imported
os.environ.setdefault("QUICKAPPLY_LOG_DIR", os.path.join(tempfile.gettempdir(), "quickapply-test-logs"))

from quickapply.data.ledger import Ledger  # noqa: E402
from quickapply.utils.timing import Pacing  # noqa: E402

ENV_KEYS = (
    "DRY_RUN",
    "HEADLESS",
    "PLATFORMS",
    "MAX_APPLICATIONS",
    "DELAY_MIN_BETWEEN_APPS",
    "DELAY_MAX_BETWEEN_APPS",
    "SCREENSHOT_ON_ERROR",
    "MAX_RETRIES",
    "RESUME_PATH",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Clean environment and a private working directory for every test.

    - Removes the QuickApply environment overrides so config tests are deterministic.
    - Runs from tmp_path so a stray config.yaml / .env is never picked up.
    """
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def pacing():
    return Pacing.instant()


@pytest.fixture
def ledger(tmp_path):
    return Ledger(tmp_path / "data" / "ledger.db")
