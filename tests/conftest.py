"""Shared test configuration and fixtures."""

import pytest

from lingua_bridge.tutor.config import TutorSettings, reset_settings, set_settings


@pytest.fixture(autouse=True)
def _clean_settings():
    """Every test starts and ends without a cached global settings instance."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> TutorSettings:
    """Settings with a fake key; ignores any local .env file."""
    s = TutorSettings(deepseek_api_key="sk-test-key", _env_file=None)
    set_settings(s)
    return s


@pytest.fixture
def settings_without_key() -> TutorSettings:
    s = TutorSettings(deepseek_api_key=None, _env_file=None)
    set_settings(s)
    return s
