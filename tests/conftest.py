"""Shared test fixtures for the notionbridge test suite."""

from __future__ import annotations

import pytest
from helpers import make_config

from notionbridge.config import NotionBridgeConfig


@pytest.fixture
def config() -> NotionBridgeConfig:
    """Default test configuration with a dummy token and no retry delays."""
    return make_config()
