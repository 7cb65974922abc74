"""Pytest configuration and shared fixtures for ollama-mcp-client tests.

This module provides common fixtures used across all test modules,
including test app creation and async client setup.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ollama_mcp_client import create_app
from ollama_mcp_client.config import ClientSettings


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with an isolated config file.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        ClientSettings: Settings instance configured for testing.
    """
    return ClientSettings(
        host="127.0.0.1",
        port=8000,
        config_path=str(tmp_path / "mcp_config.json"),
        import_claude_config=False,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance."""
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
