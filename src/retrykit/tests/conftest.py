"""Shared fixtures."""

import pytest

from retrykit.foundation.config import clear_settings_cache


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Isolate tests from RETRYKIT_* environment and cached settings."""
    for name in ("UNITS", "JITTER", "ATTEMPT_TIMEOUT", "LOG_ERRORS"):
        monkeypatch.delenv(f"RETRYKIT_{name}", raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
