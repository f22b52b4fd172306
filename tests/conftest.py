"""Shared test fixtures and configuration."""
from pathlib import Path

import pytest
from typing import Any

from tests.fixtures import clover_webhooks


@pytest.fixture
def mock_settings(tmp_path: Path) -> dict[str, Any]:
    """Mock settings for testing."""
    return {
        "CLOVER_SERVER": "https://api.example.com",
        "ACCESS_TOKEN_DIR": str(tmp_path),
        "ACCESS_TOKEN_FILE_NAME": "tokens.json",
        "HTTP_TIMEOUT": "5",
        "LOG_LEVEL": "DEBUG",
    }


@pytest.fixture
def sample_clover_payload() -> dict[str, Any]:
    """Sample Clover webhook payload."""
    return clover_webhooks.order_created()


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    """Token file with a single merchant entry."""
    path = tmp_path / "tokens.json"
    path.write_text('{"M1": "tok"}', encoding="utf-8")
    return path
