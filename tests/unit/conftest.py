"""Shared fixtures for unit tests."""

import os

import pytest

from fieldwise.config import ENV_PREFIX, FieldwiseConfig, reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from FIELDWISE_* variables and any cached configuration."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> FieldwiseConfig:
    """Provide the default configuration."""
    return FieldwiseConfig()
