"""Shared fixtures: tests never see the developer's own keys or data dir."""

import pytest

from finhealth.config import get_settings


ISOLATED_ENV_VARS = (
    "GEMINI_API_KEY",
    "API_KEY",
    "GEMINI_MODEL_NAME",
    "FINHEALTH_STORAGE_BACKEND",
    "FINHEALTH_STORAGE_DATA_DIR",
    "FINHEALTH_STORAGE_STATE_KEY",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    for name in ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # No stray .env file is picked up from the working directory
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
